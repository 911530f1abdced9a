"""
expensebot/flow/states.py

Purpose: Defines all conversation states

- Enum for each step of the expense dialog
- Single source of truth for flow stages
- State transition validation
- Metadata for each state (display name, step number)

"No draft" is not a state: absence of a stored draft means no conversation
is in progress.
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class DraftState(str, Enum):
    """
    The next input expected from the user.
    Values are the ones persisted in `draft:{user_id}` records.
    """

    ASK_DEFAULTS = "ask_defaults"
    ASK_ACCOUNT = "ask_account"
    ASK_NAME = "ask_name"
    ASK_AMOUNT = "ask_amount"
    ASK_DESCRIPTION = "ask_description"
    ASK_FILE = "ask_file"


@dataclass(frozen=True)
class StateMetadata:
    """
    Metadata associated with each conversation state.
    """
    name: DraftState
    display_name: str
    step_number: Optional[int] = None
    total_steps: int = 5
    description: str = ""


STATE_METADATA: Dict[DraftState, StateMetadata] = {
    DraftState.ASK_DEFAULTS: StateMetadata(
        name=DraftState.ASK_DEFAULTS,
        display_name="Reuse details",
        description="Offer the account and name used last time"
    ),
    DraftState.ASK_ACCOUNT: StateMetadata(
        name=DraftState.ASK_ACCOUNT,
        display_name="Bank account",
        step_number=1,
        description="Collect and validate the IBAN"
    ),
    DraftState.ASK_NAME: StateMetadata(
        name=DraftState.ASK_NAME,
        display_name="Account holder",
        step_number=2,
        description="Collect the name the account is held in"
    ),
    DraftState.ASK_AMOUNT: StateMetadata(
        name=DraftState.ASK_AMOUNT,
        display_name="Amount",
        step_number=3,
        description="Collect the amount, free text"
    ),
    DraftState.ASK_DESCRIPTION: StateMetadata(
        name=DraftState.ASK_DESCRIPTION,
        display_name="Description",
        step_number=4,
        description="Collect a short description"
    ),
    DraftState.ASK_FILE: StateMetadata(
        name=DraftState.ASK_FILE,
        display_name="Receipt",
        step_number=5,
        description="Collect exactly one attachment, then finalize"
    ),
}


# Forward transitions only; staying in the same state is a re-prompt and
# never persisted. Reset and finalize delete the draft instead.
STATE_TRANSITIONS: Dict[DraftState, List[DraftState]] = {
    DraftState.ASK_DEFAULTS: [
        DraftState.ASK_AMOUNT,   # defaults accepted
        DraftState.ASK_ACCOUNT,  # defaults declined
    ],
    DraftState.ASK_ACCOUNT: [DraftState.ASK_NAME],
    DraftState.ASK_NAME: [DraftState.ASK_AMOUNT],
    DraftState.ASK_AMOUNT: [DraftState.ASK_DESCRIPTION],
    DraftState.ASK_DESCRIPTION: [DraftState.ASK_FILE],
    DraftState.ASK_FILE: [],
}

# States a brand-new draft may start in
INITIAL_STATES = (DraftState.ASK_DEFAULTS, DraftState.ASK_ACCOUNT)


def is_valid_transition(from_state: DraftState, to_state: DraftState) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    return to_state in STATE_TRANSITIONS.get(from_state, [])


def get_state_metadata(state: DraftState) -> StateMetadata:
    """Retrieves metadata for a given state."""
    return STATE_METADATA[state]


def get_progress_message(state: DraftState) -> str:
    """
    Generates a progress message for the current state (e.g. "Step 3 of 5").
    """
    metadata = get_state_metadata(state)
    if metadata.step_number:
        return f"Step {metadata.step_number} of {metadata.total_steps}"
    return ""
