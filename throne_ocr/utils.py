"""
Utility functions for logging, file I/O, and helper functions.
"""

import logging
import os
import io
import json
import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence


def setup_logger(
    name: str,
    log_dir: str,
    debug: bool = True,
    console_output: bool = True,
    console_level: Optional[int] = None
) -> logging.Logger:
    """
    Set up a logger with both file and console handlers.

    Args:
        name: Logger name
        log_dir: Directory to save log files
        debug: Enable debug mode (verbose logging)
        console_output: Whether to print to console
        console_level: Log level for console handler (defaults to DEBUG in debug mode, INFO otherwise)

    Returns:
        Configured logger instance
    """
    # Create log directory if it doesn't exist
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Re-initialising a batch must not stack handlers
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    log_file = os.path.join(log_dir, f'{name}_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler()
        if console_level is not None:
            console_handler.setLevel(console_level)
        else:
            console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def format_csv_row(row: Sequence[Any]) -> str:
    """Render one row as a CSV line without the line terminator."""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator='\n').writerow(row)
    return buffer.getvalue().rstrip('\n')


def save_csv(
    filepath: str,
    rows: Iterable[Sequence[Any]],
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Save rows to a CSV file.

    Args:
        filepath: Path to save CSV file
        rows: Rows to write, one sequence of values per line
        logger: Logger instance for logging

    Raises:
        IOError: If file writing fails
    """
    try:
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', newline='', encoding='utf-8') as csvfile:
            writer = csv.writer(csvfile, lineterminator='\n')
            writer.writerows(rows)
        if logger:
            logger.info(f"Saved CSV to {filepath}")
    except IOError as e:
        raise IOError(f"Failed to save CSV to {filepath}: {e}")


def save_lines(
    filepath: str,
    lines: Iterable[str],
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Write text lines to a file, one per line.

    Args:
        filepath: Path to the output file
        lines: Lines to write (without trailing newlines)
        logger: Logger instance for logging

    Raises:
        IOError: If file writing fails
    """
    try:
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as textfile:
            for line in lines:
                textfile.write(f"{line}\n")
        if logger:
            logger.info(f"Saved lines to {filepath}")
    except IOError as e:
        raise IOError(f"Failed to save lines to {filepath}: {e}")


def save_text(
    filepath: str,
    text: str,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Write text verbatim to a file.

    Raises:
        IOError: If file writing fails
    """
    try:
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as textfile:
            textfile.write(text)
        if logger:
            logger.info(f"Saved text to {filepath}")
    except IOError as e:
        raise IOError(f"Failed to save text to {filepath}: {e}")


def load_text(
    filepath: str,
    logger: Optional[logging.Logger] = None
) -> str:
    """
    Load a text file.

    Raises:
        IOError: If file reading fails
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as textfile:
            text = textfile.read()
        if logger:
            logger.info(f"Loaded {len(text)} characters from {filepath}")
        return text
    except (IOError, UnicodeDecodeError) as e:
        raise IOError(f"Failed to load text from {filepath}: {e}")


def load_json(
    filepath: str,
    logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Load data from a JSON file.

    Args:
        filepath: Path to JSON file
        logger: Logger instance for logging

    Returns:
        Dictionary loaded from JSON

    Raises:
        IOError: If file reading fails
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as jsonfile:
            data = json.load(jsonfile)
        if logger:
            logger.info(f"Loaded JSON from {filepath}")
        return data
    except IOError as e:
        raise IOError(f"Failed to load JSON from {filepath}: {e}")
