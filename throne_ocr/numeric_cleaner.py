"""
Repairs OCR digit/letter confusions in numeric leaderboard cells.
"""

import re
from typing import Optional

_NON_DIGITS = re.compile(r'[^0-9]')
_STANDALONE_L = re.compile(r'\s*L\s*')


def clean_numeric_value(value: Optional[str]) -> str:
    """
    Clean a raw numeric cell down to a digits-only string.

    A cell that is only the letter "L" is read as 1, every lowercase "o" is
    read as 0, then everything that is not a digit is dropped. Blank or fully
    non-numeric cells come back as "0".

    Args:
        value: Raw cell text

    Returns:
        Digits-only string, never empty
    """
    if value is None:
        return '0'

    cleaned = value
    if _STANDALONE_L.fullmatch(cleaned):
        cleaned = '1'

    cleaned = cleaned.replace('o', '0')
    cleaned = _NON_DIGITS.sub('', cleaned)

    return cleaned or '0'


def parse_numeric_value(value: Optional[str]) -> int:
    """Clean a raw numeric cell and convert it to an int."""
    return int(clean_numeric_value(value))
