"""
Splits raw OCR lines into cells and locates the team color marker.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

COLOR_TOKENS = frozenset({'red', 'rouge', 'yellow', 'jaune'})
EXPECTED_NUMERIC_CELLS = 5
CELL_DELIMITER = '|'

_DELIMITER_WITH_SPACES = re.compile(r'\s*\|\s*')
_WHITESPACE_RUN = re.compile(r'\s+')


@dataclass(frozen=True)
class ParsedLine:
    """A line whose color cell was found with a name cell before it."""

    raw: str
    color_index: int
    name_cell: str
    color_cell: str
    numeric_cells: Tuple[str, ...]

    @property
    def valid(self) -> bool:
        """True when exactly five numeric cells follow the color cell."""
        return len(self.numeric_cells) == EXPECTED_NUMERIC_CELLS


def split_cells(line: str) -> List[str]:
    """
    Split a line on the pipe delimiter and trim every cell.

    A trailing delimiter closes the last cell instead of opening an empty one,
    so "a | 1 |" yields ["a", "1"].

    Args:
        line: Raw OCR line

    Returns:
        List of trimmed cells
    """
    parts = line.strip().split(CELL_DELIMITER)
    while len(parts) > 1 and parts[-1] == '':
        parts.pop()
    return [part.strip() for part in parts]


def find_color_column(cells: List[str]) -> int:
    """Return the index of the first exact color token, or -1."""
    for i, cell in enumerate(cells):
        if cell.lower() in COLOR_TOKENS:
            return i
    return -1


def parse_line(line: Optional[str]) -> Optional[ParsedLine]:
    """
    Locate the color, name and numeric cells of a raw line.

    Args:
        line: Raw OCR line

    Returns:
        ParsedLine, or None when the line is blank, has no color token, or
        has its color token in the first cell
    """
    if line is None or not line.strip():
        return None

    cells = split_cells(line)
    color_index = find_color_column(cells)

    # No name cell can precede a color in column 0
    if color_index <= 0:
        return None

    return ParsedLine(
        raw=line,
        color_index=color_index,
        name_cell=cells[color_index - 1],
        color_cell=cells[color_index],
        numeric_cells=tuple(cells[color_index + 1:]),
    )


def lightly_clean(line: str) -> str:
    """Drop pipes with their surrounding spaces and collapse whitespace runs."""
    joined = _DELIMITER_WITH_SPACES.sub('', line.strip())
    return _WHITESPACE_RUN.sub(' ', joined).strip()
