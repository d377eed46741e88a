"""
Player class registry.
Loads the name,class resource once per batch and resolves classes case-insensitively.
"""

import csv
import logging
from typing import Dict, Mapping, Optional

from throne_ocr.models import UNKNOWN_CLASS


class ClassRegistry:
    """Name -> class lookup keyed by lowercased player name."""

    def __init__(self, classes: Optional[Mapping[str, str]] = None):
        """
        Build the registry from a name -> class mapping.

        Args:
            classes: Player names and their classes; later duplicates (ignoring case) win
        """
        self._classes: Dict[str, str] = {}
        for name, player_class in (classes or {}).items():
            self._classes[name.strip().lower()] = player_class.strip()

    def resolve(self, name: str) -> str:
        """Return the class for name ignoring case, or UNKNOWN."""
        return self._classes.get(name.lower(), UNKNOWN_CLASS)

    def __len__(self) -> int:
        return len(self._classes)


def load_class_registry(
    filepath: str,
    logger: Optional[logging.Logger] = None
) -> ClassRegistry:
    """
    Load player classes from a name,class file.

    Lines without a comma are skipped. The class is everything after the
    first comma.

    Args:
        filepath: Path to the class registry file
        logger: Logger instance for logging

    Returns:
        ClassRegistry built from the file

    Raises:
        IOError: If the file is missing or cannot be read
    """
    classes: Dict[str, str] = {}
    try:
        with open(filepath, 'r', newline='', encoding='utf-8') as csvfile:
            for row in csv.reader(csvfile):
                if len(row) < 2:
                    continue
                name = row[0].strip()
                player_class = ','.join(row[1:]).strip()
                if name:
                    classes[name] = player_class
    except (IOError, UnicodeDecodeError) as e:
        raise IOError(f"Failed to load player classes from {filepath}: {e}")

    registry = ClassRegistry(classes)
    if logger:
        if len(registry) == 0:
            logger.warning(f"No player classes found in {filepath}; every player will be {UNKNOWN_CLASS}")
        else:
            logger.info(f"Loaded {len(registry)} player classes from {filepath}")
    return registry
