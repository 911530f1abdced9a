"""
expensebot/utils/constants.py

Purpose: Centralized static content

- All user-facing messages
- Commands and button labels
- Status labels of the expense table

(Prevents hardcoding across the codebase)
"""

# ============================================================
# COMMANDS
# ============================================================

START_COMMAND = "expense"
RESET_COMMAND = "reset"

# ============================================================
# ONBOARDING
# ============================================================

ONBOARDING_MESSAGE = "Hi! I'm ExpenseBot, I'll help you submit an expense. Type ```expense``` to start a new expense."

START_MESSAGE = "Let's start the expense, shall we? If you change your mind, type ```reset``` and it will all be over."

RESET_MESSAGE = "Type ```expense``` to start a new expense."

# ============================================================
# DEFAULTS
# ============================================================

ASK_DEFAULTS_MESSAGE = "Last time you used account **{account}** and name **{name}**. Do you want to use them again? (y[es]/n[o])"

DEFAULTS_ACCEPTED_MESSAGE = "Amazing, look at us being efficient! I will fill that in for you, let's start with the amount."

DEFAULTS_DECLINED_MESSAGE = "No problem, let's start from the beginning."

DEFAULTS_INVALID_ANSWER_MESSAGE = "Please answer with yes or no. Just the first letter is enough."

# ============================================================
# DIALOG STEPS
# ============================================================

ASK_ACCOUNT_MESSAGE = "**What is your IBAN?**"

INVALID_IBAN_MESSAGE = "Invalid IBAN. Please try again."

ASK_NAME_MESSAGE = "**In what name is the account held?**"

ASK_AMOUNT_MESSAGE = """**What is the amount of the expense?** (e.g. 100.00)

If you combine multiple receipts, fill in the total amount."""

ASK_DESCRIPTION_MESSAGE = "**In a few words, describe the expense.**"

ASK_FILE_MESSAGE = """**Upload the invoice or a picture of the receipt.**

You can drag 'n' drop a file into the chat window, or use the paperclip in the bottom right corner.

If you have multiple receipts, take a single picture of all the receipts."""

SINGLE_FILE_MESSAGE = "Submit a single file."

# ============================================================
# COMPLETION
# ============================================================

EXPENSE_SAVED_MESSAGE = "**Expense saved! :tada:**"

NEW_EXPENSE_HINT_MESSAGE = "Type ```expense``` to start a new expense"

# ============================================================
# ERRORS
# ============================================================

SYSTEM_ERROR_MESSAGE = "System error, please try again or type ```reset``` to stop the expense."

# ============================================================
# EXPENSE TABLE & CHANNEL
# ============================================================

STATUS_SUBMITTED_LABEL = ":hourglass_flowing_sand: **Submitted**"
STATUS_PAID_LABEL = ":white_check_mark: **Paid**"
STATUS_REJECTED_LABEL = ":x: **Rejected**"

CLAIM_TITLE = "**Expense claim from {first_name} {last_name}**"

BUTTON_PAID = "Paid"
BUTTON_REJECT = "Reject"
