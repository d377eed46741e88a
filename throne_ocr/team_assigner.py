"""
Maps a row's color marker to a team label.
"""

from typing import Optional

from throne_ocr.models import DEFAULT_ENEMY_LABEL, SUITS

RED = 'red'
YELLOW = 'yellow'
UNKNOWN_COLOR = 'unknown'

_RED_TOKENS = ('rouge', 'red')
_YELLOW_TOKENS = ('jaune', 'yellow')

_FILTER_COLOR_ALIASES = {
    'r': RED,
    'red': RED,
    'rouge': RED,
    'y': YELLOW,
    'yellow': YELLOW,
    'jaune': YELLOW,
}


def normalize_filter_color(color: str) -> str:
    """
    Normalize the operator's filter color.

    Args:
        color: 'y'/'yellow' or 'r'/'red' (French names accepted), any case

    Returns:
        'yellow' or 'red'

    Raises:
        ValueError: If color is not one of the supported values
    """
    key = (color or '').strip().lower()
    if key not in _FILTER_COLOR_ALIASES:
        raise ValueError(f"Invalid filter color: {color!r}. Must be 'y' (yellow) or 'r' (red)")
    return _FILTER_COLOR_ALIASES[key]


def detect_color(color_cell: str) -> str:
    """Return 'red', 'yellow' or 'unknown' for a color cell."""
    lowered = color_cell.lower()
    if any(token in lowered for token in _RED_TOKENS):
        return RED
    if any(token in lowered for token in _YELLOW_TOKENS):
        return YELLOW
    return UNKNOWN_COLOR


def assign_team(
    color_cell: str,
    filter_color: str,
    enemy_label: Optional[str] = None
) -> str:
    """
    Assign the team label for a row.

    Args:
        color_cell: Raw text of the row's color cell
        filter_color: Operator's chosen color, 'yellow' or 'red'
        enemy_label: Label for rows of the other color (defaults to 'Enemy')

    Returns:
        'Suits' when the row's color matches the filter, the enemy label otherwise
    """
    if detect_color(color_cell) == filter_color.lower():
        return SUITS
    return enemy_label or DEFAULT_ENEMY_LABEL
