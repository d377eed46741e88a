"""
Adds the player class column to batch outputs written without one.
Walks every batch folder under a root directory and writes output_with_classes.csv
next to each output.csv.
"""

import argparse
import csv
import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from throne_ocr.class_registry import ClassRegistry, load_class_registry
from throne_ocr.custom_logger import get_custom_logger
from throne_ocr.name_resolver import AliasTable
from throne_ocr.utils import save_csv

INPUT_FILE_NAME = 'output.csv'
OUTPUT_SUFFIX = '_with_classes'

NAME_COLUMN = 2
CLASS_COLUMN = 3


def append_classes(
    df: pd.DataFrame,
    class_registry: ClassRegistry,
    aliases: Optional[AliasTable] = None
) -> pd.DataFrame:
    """
    Insert a class column after the name column.

    Names are passed through the alias table first and the canonical name
    replaces the raw one in the result. Rows too short to hold a name keep
    missing cells in both columns.

    Args:
        df: Rows as date, team, name, kills, ... with integer column labels;
            ragged rows are padded with missing values
        class_registry: Registry used to resolve classes
        aliases: Alias table (defaults to the built-in table)

    Returns:
        New DataFrame with the class as fourth column; frames with fewer than
        three columns come back unchanged
    """
    if df.shape[1] <= NAME_COLUMN:
        return df.copy()

    aliases = aliases if aliases is not None else AliasTable.default()

    result = df.copy()
    names = result[NAME_COLUMN].map(
        lambda name: aliases.match(name.strip()) if isinstance(name, str) else None
    )
    classes = names.map(lambda name: class_registry.resolve(name) if name is not None else None)
    result[NAME_COLUMN] = names
    result.insert(CLASS_COLUMN, 'class', classes)
    result.columns = range(result.shape[1])
    return result


def to_rows(df: pd.DataFrame) -> List[List[str]]:
    """Turn a padded frame back into rows, dropping the padding."""
    return [[value for value in row if not pd.isna(value)] for row in df.values.tolist()]


def read_rows(input_file: Path) -> List[List[str]]:
    """
    Read a comma-separated file as rows of varying width.

    Raises:
        IOError: If the file cannot be read or decoded
    """
    try:
        with open(input_file, 'r', newline='', encoding='utf-8') as csvfile:
            return list(csv.reader(csvfile))
    except (IOError, UnicodeDecodeError) as e:
        raise IOError(f"Failed to load CSV from {input_file}: {e}")


def output_path_for(input_file: Path) -> Path:
    """output.csv -> output_with_classes.csv"""
    return input_file.with_name(f"{input_file.stem}{OUTPUT_SUFFIX}.csv")


def process_file(
    input_file: Path,
    class_registry: ClassRegistry,
    aliases: Optional[AliasTable] = None,
    logger: Optional[logging.Logger] = None
) -> Optional[Path]:
    """
    Append classes to one batch output file.

    Rows with fewer than three fields are written back unchanged.

    Args:
        input_file: Batch output without class column
        class_registry: Registry used to resolve classes
        aliases: Alias table applied to names
        logger: Logger instance

    Returns:
        Path of the written file, or None when the input is missing or empty

    Raises:
        IOError: If the input cannot be read or the output cannot be written
    """
    if not input_file.exists():
        if logger:
            logger.warning(f"Input file does not exist: {input_file}")
        return None

    rows = read_rows(input_file)
    if not rows:
        if logger:
            logger.warning(f"Input file is empty: {input_file}")
        return None

    output_file = output_path_for(input_file)
    save_csv(str(output_file), to_rows(append_classes(pd.DataFrame(rows), class_registry, aliases)))

    if logger:
        logger.info(f"Output written to: {output_file}")
    return output_file


def append_classes_in_tree(
    root_dir: str,
    class_registry: ClassRegistry,
    aliases: Optional[AliasTable] = None,
    logger: Optional[logging.Logger] = None
) -> List[Path]:
    """
    Process output.csv of every direct sub-directory of root_dir.

    Batches whose files cannot be read or written are logged and skipped.

    Args:
        root_dir: Folder holding one sub-directory per batch
        class_registry: Registry used to resolve classes
        aliases: Alias table applied to names
        logger: Logger instance

    Returns:
        Written files, in directory name order

    Raises:
        NotADirectoryError: If root_dir is not a directory
    """
    root = Path(root_dir)
    if not root.is_dir():
        raise NotADirectoryError(f"Directory not found: {root_dir}")

    written = []
    for batch_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        input_file = batch_dir / INPUT_FILE_NAME
        if logger:
            logger.info(f"Processing file {input_file}")
        try:
            output_file = process_file(input_file, class_registry, aliases, logger)
        except IOError as e:
            # One unreadable batch must not stop the others
            if logger:
                logger.error(f"Skipping {batch_dir.name}: {e}")
            continue
        if output_file is not None:
            written.append(output_file)
    return written


def main():
    """Main entry point for command-line execution"""
    parser = argparse.ArgumentParser(
        description="Add the player class column to every batch output.csv under a folder"
    )
    parser.add_argument(
        "--root-dir",
        type=str,
        required=True,
        help="Folder holding one sub-directory per batch, each with an output.csv"
    )
    parser.add_argument(
        "--class-registry",
        type=str,
        default="class.csv",
        help="Path to the name,class registry (default: class.csv)"
    )

    args = parser.parse_args()
    logger = get_custom_logger(name=__name__, level=logging.INFO)

    try:
        class_registry = load_class_registry(args.class_registry, logger)
        written = append_classes_in_tree(args.root_dir, class_registry, logger=logger)
    except (IOError, NotADirectoryError) as e:
        logger.exception(e)
        return 1

    logger.info(f"Written {len(written)} files with classes")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
