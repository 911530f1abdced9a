"""
expensebot/utils/validation_utils.py

Purpose: Input validation

- IBAN structure, country length and mod-97 checksum validation
- Command normalization ("expense", "reset")
- Yes/no answer parsing
"""

import re
from typing import Optional


# IBAN lengths per country (SWIFT IBAN registry)
IBAN_LENGTHS = {
    "AD": 24, "AE": 23, "AL": 28, "AT": 20, "AZ": 28, "BA": 20, "BE": 16,
    "BG": 22, "BH": 22, "BI": 27, "BR": 29, "BY": 28, "CH": 21, "CR": 22,
    "CY": 28, "CZ": 24, "DE": 22, "DJ": 27, "DK": 18, "DO": 28, "EE": 20,
    "EG": 29, "ES": 24, "FI": 18, "FK": 18, "FO": 18, "FR": 27, "GB": 22,
    "GE": 22, "GI": 23, "GL": 18, "GR": 27, "GT": 28, "HR": 21, "HU": 28,
    "IE": 22, "IL": 23, "IQ": 23, "IS": 26, "IT": 27, "JO": 30, "KW": 30,
    "KZ": 20, "LB": 28, "LC": 32, "LI": 21, "LT": 20, "LU": 20, "LV": 21,
    "LY": 25, "MC": 27, "MD": 24, "ME": 22, "MK": 19, "MN": 20, "MR": 27,
    "MT": 31, "MU": 30, "NI": 28, "NL": 18, "NO": 15, "OM": 23, "PK": 24,
    "PL": 28, "PS": 29, "PT": 25, "QA": 29, "RO": 24, "RS": 22, "RU": 33,
    "SA": 24, "SC": 31, "SD": 18, "SE": 24, "SI": 19, "SK": 24, "SM": 27,
    "SO": 23, "ST": 25, "SV": 28, "TL": 23, "TN": 24, "TR": 26, "UA": 29,
    "VA": 22, "VG": 24, "XK": 20, "YE": 30,
}

IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}$")

YES_ANSWERS = ("y", "yes")
NO_ANSWERS = ("n", "no")


def normalize_iban(iban: str) -> str:
    """
    Canonical form of an IBAN: upper case, no spaces or separators.

    Example: "de89 3704 0044 0532 0130 00" -> "DE89370400440532013000"
    """
    if not iban:
        return ""
    return re.sub(r"[\s\-]", "", iban).upper()


def iban_checksum_valid(iban: str) -> bool:
    """
    ISO 13616 mod-97 check on a normalized IBAN.
    The first four characters move to the end, letters become 10..35,
    and the resulting number must leave remainder 1.
    """
    rearranged = iban[4:] + iban[:4]
    digits = "".join(str(int(char, 36)) for char in rearranged)
    return int(digits) % 97 == 1


def validate_iban(iban: str) -> Optional[str]:
    """
    Validates an IBAN.

    Args:
        iban: IBAN as typed by the user (spaces allowed)

    Returns:
        The normalized IBAN if valid, None otherwise
    """
    code = normalize_iban(iban)
    if not IBAN_PATTERN.match(code):
        return None

    expected_length = IBAN_LENGTHS.get(code[:2])
    if expected_length is None or len(code) != expected_length:
        return None

    if not iban_checksum_valid(code):
        return None

    return code


def normalize_command(text: str) -> str:
    """Trims whitespace and lower-cases a message for command matching."""
    return (text or "").strip().lower()


def parse_yes_no(text: str) -> Optional[bool]:
    """
    Parses a yes/no answer.

    Returns:
        True for y/yes, False for n/no, None for anything else
    """
    answer = normalize_command(text)
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    return None
