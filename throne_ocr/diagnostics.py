"""
Builds the contents of the diagnostics (errors) file for manual review.
"""

from typing import List, Optional

from throne_ocr.constraint_validator import ValidationReport
from throne_ocr.recognition import RecognitionResult
from throne_ocr.utils import format_csv_row

# Blank lines written between two non-empty sections
SECTION_SEPARATOR = ['', '']


def build_diagnostic_lines(
    result: RecognitionResult,
    report: Optional[ValidationReport] = None
) -> List[str]:
    """
    Assemble diagnostics lines.

    Sections, in order: malformed lines (lightly cleaned), UNKNOWN-class
    records, anomaly-flagged records. Records use the main-output columns.
    Empty sections are skipped together with their separator.

    Args:
        result: Recognition result holding the malformed lines
        report: Validation report holding unknown-class and flagged players

    Returns:
        Lines to write, without trailing newlines
    """
    sections = [list(result.error_lines)]
    if report is not None:
        sections.append([format_csv_row(p.to_row()) for p in report.unknown_class_players])
        sections.append([format_csv_row(p.to_row()) for p in report.flagged_players])

    lines: List[str] = []
    for section in sections:
        if not section:
            continue
        if lines:
            lines.extend(SECTION_SEPARATOR)
        lines.extend(section)
    return lines
