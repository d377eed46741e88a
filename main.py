#!/usr/bin/env python3
"""
Main entry point for the Throne and Liberty Leaderboard OCR Pipeline.
Supports both CLI and programmatic usage.
"""

import sys
import argparse
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from throne_ocr.config_manager import DEFAULT_CONFIG_PATH
from throne_ocr.orchestrator import BatchResult, OCRBatchProcessor
from throne_ocr.utils import load_text

BATCH_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
_INPUT_DATE_FORMATS = {
    '%Y-%m-%d': '%Y-%m-%d 00:00:00',
    '%Y-%m-%d %H:%M': '%Y-%m-%d %H:%M:00',
}


def resolve_batch_date(date_str: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Normalize the batch date given on the command line.

    Args:
        date_str: 'yyyy-MM-dd', 'yyyy-MM-dd HH:mm' or None for the current time
        now: Time used when date_str is None (defaults to datetime.now())

    Returns:
        Date as 'yyyy-MM-dd HH:mm:ss'

    Raises:
        ValueError: If date_str matches neither format
    """
    if date_str is None:
        return (now or datetime.now()).strftime(BATCH_DATE_FORMAT)

    date_str = date_str.strip()
    for input_format, output_format in _INPUT_DATE_FORMATS.items():
        try:
            parsed = datetime.strptime(date_str, input_format)
        except ValueError:
            continue
        return parsed.strftime(output_format)

    raise ValueError(f"Invalid date: {date_str!r}. Expected 'yyyy-MM-dd' or 'yyyy-MM-dd HH:mm'")


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI flags onto config keys; flags left unset keep the config file's value."""
    return {
        'filter_color': args.color,
        'enemy_label': args.guild,
        'max_workers': args.workers,
        'ocr': {'language': args.language},
        'output_paths': {'output': args.output},
    }


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Throne and Liberty Leaderboard OCR Pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process a folder of screenshots, yellow is our guild
  python main.py --image-dir screenshots/ --color y

  # Name the enemy guild and date the batch
  python main.py --image-dir screenshots/ --color r --guild Dremio --date "2025-06-14 21:00"

  # French client, four OCR workers, debug logging
  python main.py --image-dir screenshots/ --color y --language fra --workers 4 --debug

  # Re-run recognition on a saved OCR dump without running OCR again
  python main.py --text tesseract_output.txt --color y
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--image-dir',
        type=str,
        help='Path to directory containing the leaderboard screenshots of one batch'
    )
    source.add_argument(
        '--text',
        type=str,
        help='Path to a saved raw OCR dump to process instead of images'
    )
    parser.add_argument(
        '--color',
        type=str.lower,
        choices=['y', 'r'],
        help="Our guild's color on the leaderboard: y (yellow) or r (red)"
    )
    parser.add_argument(
        '--language',
        type=str,
        help='Tesseract language code (default from config: eng)'
    )
    parser.add_argument(
        '--guild',
        type=str,
        help='Team label for the other color (default from config: Enemy)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Path of the output CSV (default from config: output.csv)'
    )
    parser.add_argument(
        '--date',
        type=str,
        help="Batch date, 'yyyy-MM-dd' or 'yyyy-MM-dd HH:mm' (default: now)"
    )
    parser.add_argument(
        '--config',
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help='Path to configuration file (default: throne_ocr/configs/default.json)'
    )
    parser.add_argument(
        '--workers',
        type=int,
        help='OCR worker threads, 0 = one per CPU, 1 = sequential (default from config: 0)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    # Validate arguments
    if not Path(args.config).exists():
        parser.error(f'Config file not found: {args.config}')

    if args.workers is not None and args.workers < 0:
        parser.error('--workers must be 0 or greater')

    try:
        date_str = resolve_batch_date(args.date)
    except ValueError as e:
        parser.error(str(e))

    # Initialize batch processor
    try:
        processor = OCRBatchProcessor(args.config, debug=args.debug, overrides=build_overrides(args))
    except Exception as e:
        print(f"Failed to initialize processor: {e}", file=sys.stderr)
        return 1

    try:
        if args.text:
            result = process_text_file(processor, args.text, date_str)
        else:
            result = processor.process_folder(args.image_dir, date_str)
    except Exception as e:
        processor.logger.error(f"Processing failed: {e}")
        return 1

    if result is None:
        processor.logger.warning("Nothing to process")
        return 1

    log_summary(processor, result)
    return 0


def process_text_file(processor: OCRBatchProcessor, text_path: str, date_str: str) -> BatchResult:
    """
    Run recognition on a saved OCR dump.

    Args:
        processor: OCRBatchProcessor instance
        text_path: Path to the raw OCR text
        date_str: Timestamp attached to every record

    Raises:
        IOError: If the dump cannot be read or the output cannot be written
    """
    processor.logger.info(f"Processing saved OCR text: {text_path}")
    return processor.process_text(load_text(text_path, processor.logger), date_str)


def log_summary(processor: OCRBatchProcessor, result: BatchResult) -> None:
    processor.logger.info("=" * 80)
    processor.logger.info(f"Players written: {len(result.recognition.players)} -> {result.output_file}")
    processor.logger.info(
        f"Lines for manual review: {len(result.recognition.error_lines)}, "
        f"unknown classes: {len(result.validation.unknown_class_players)}, "
        f"flagged players: {len(result.validation.flagged_players)} -> {result.errors_file}"
    )
    if result.images_processed or result.images_failed:
        processor.logger.info(
            f"Images processed: {result.images_processed}, failed: {result.images_failed}"
        )
    processor.logger.info("=" * 80)


if __name__ == '__main__':
    sys.exit(main())
