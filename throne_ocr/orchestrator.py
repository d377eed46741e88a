"""
Batch processor orchestrating the full scoreboard pipeline.
Coordinates OCR over a folder of screenshots, recognition, validation and result storage.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from throne_ocr.class_registry import load_class_registry
from throne_ocr.config_manager import DEFAULT_CONFIG_PATH, ConfigManager
from throne_ocr.constraint_validator import PlayerStatValidator, ValidationReport
from throne_ocr.diagnostics import build_diagnostic_lines
from throne_ocr.name_resolver import NameResolver
from throne_ocr.ocr_engines import OCREngine, OCRError
from throne_ocr.recognition import RecognitionResult, RecordBuilder, ScoreboardRecognizer
from throne_ocr.utils import format_csv_row, save_csv, save_lines, save_text, setup_logger

LOG_DIR = ".logging"


@dataclass
class BatchResult:
    """Summary of one processed batch."""

    recognition: RecognitionResult
    validation: ValidationReport
    output_file: str
    errors_file: str
    images_processed: int = 0
    images_failed: int = 0


class OCRBatchProcessor:
    """Orchestrates the full scoreboard pipeline."""

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        debug: bool = False,
        overrides: Optional[Mapping[str, Any]] = None,
        ocr_engine: Optional[Any] = None
    ):
        """
        Initialize batch processor.

        Args:
            config_path: Path to JSON configuration file
            debug: Enable debug logging
            overrides: Config values taken over the file (e.g. from CLI flags)
            ocr_engine: Object with extract_text_from_file(path) -> str; an
                OCREngine is created lazily from config when omitted

        Raises:
            IOError: If config or the class registry cannot be loaded
            ValueError: If config validation fails or debug is not a boolean
        """
        if not isinstance(debug, bool):
            raise ValueError(f"debug parameter must be a boolean, got {type(debug).__name__}")

        self.debug = debug
        self.config_path = config_path

        # Config decides where logs go, so it is loaded before the logger exists
        try:
            self.config_manager = ConfigManager(config_path, overrides=overrides)
        except Exception as e:
            self.logger = self._setup_logger(LOG_DIR)
            self.logger.error(f"Failed to load configuration from {config_path}: {e}")
            raise

        self.config = self.config_manager.config
        self.output_paths = self.config_manager.get_output_paths()
        self.logger = self._setup_logger(self.config_manager.get_nested(['output_paths', 'logs']) or LOG_DIR)

        self.logger.info("=" * 80)
        self.logger.info("Starting OCR Batch Processor")
        self.logger.info(f"Config path: {config_path}")
        self.logger.info("=" * 80)
        self.logger.info(f"Output paths: {self.output_paths}")

        # Registry failure aborts the batch before any line is processed
        try:
            self.class_registry = load_class_registry(
                self.config_manager.get_class_registry_path(),
                self.logger
            )
        except IOError as e:
            self.logger.error(f"Failed to load class registry: {e}")
            raise

        self.name_resolver = NameResolver(self.config_manager.get_alias_table())
        self.validator = PlayerStatValidator(self.logger)
        self._ocr_engine = ocr_engine

        self.logger.info(
            f"Color filter: {self.config_manager.get_filter_color()} = Suits, "
            f"other = {self.config_manager.get_enemy_label()}"
        )
        self.logger.info("OCR Batch Processor initialized successfully")

    def _setup_logger(self, log_dir: str) -> logging.Logger:
        return setup_logger(
            name='OCRBatchProcessor',
            log_dir=log_dir,
            debug=self.debug,
            console_output=True
        )

    @property
    def ocr_engine(self) -> Any:
        if self._ocr_engine is None:
            self._ocr_engine = OCREngine(config_manager=self.config_manager, logger=self.logger)
        return self._ocr_engine

    def find_images(self, image_dir: str) -> List[Path]:
        """
        List image files of a folder in name order.

        Args:
            image_dir: Folder holding the screenshots

        Returns:
            Sorted list of image paths

        Raises:
            NotADirectoryError: If image_dir is not a directory
        """
        image_dir_path = Path(image_dir)
        if not image_dir_path.is_dir():
            raise NotADirectoryError(f"Image folder does not exist or is not a directory: {image_dir}")

        extensions = set(self.config_manager.get_image_extensions())
        return sorted(
            p for p in image_dir_path.iterdir()
            if p.is_file() and p.suffix.lower() in extensions
        )

    def _pool_size(self, image_count: int) -> int:
        max_workers = self.config_manager.get_max_workers()
        if max_workers == 0:
            max_workers = os.cpu_count() or 1
        return max(1, min(max_workers, image_count))

    def _extract_one(self, image_path: Path) -> Optional[str]:
        """OCR one image; failures are logged and give None."""
        try:
            text = self.ocr_engine.extract_text_from_file(str(image_path))
        except (OCRError, IOError) as e:
            self.logger.warning(f"Failed to process {image_path.name}: {e}")
            return None
        except Exception as e:
            # One bad image never aborts the batch
            self.logger.error(f"Failed to process {image_path.name}: {e}")
            return None

        if not text or not text.strip():
            self.logger.warning(f"No OCR output for {image_path.name}")
            return None
        return text

    def extract_text(self, image_paths: List[Path]) -> Tuple[str, int]:
        """
        Run OCR over images and aggregate their text.

        Images run sequentially or on a thread pool depending on max_workers.
        Texts are joined in submission order whatever order workers finish in.

        Args:
            image_paths: Images to process

        Returns:
            Tuple of (aggregated_text, failed_image_count)
        """
        if not image_paths:
            return '', 0

        # Create the engine before workers share it
        _ = self.ocr_engine

        pool_size = self._pool_size(len(image_paths))
        if pool_size == 1:
            self.logger.info(f"Processing {len(image_paths)} images sequentially")
            texts = [self._extract_one(p) for p in image_paths]
        else:
            self.logger.info(f"Processing {len(image_paths)} images with {pool_size} workers")
            with ThreadPoolExecutor(max_workers=pool_size) as executor:
                # map() yields results in submission order
                texts = list(executor.map(self._extract_one, image_paths))

        failed = sum(1 for text in texts if text is None)
        aggregated = ''.join(f"{text}\n" for text in texts if text is not None)
        return aggregated, failed

    def process_text(self, ocr_text: str, date_str: str) -> BatchResult:
        """
        Run recognition and validation over aggregated OCR text and save results.

        Args:
            ocr_text: Aggregated OCR output of the batch
            date_str: Timestamp attached to every record

        Returns:
            BatchResult

        Raises:
            IOError: If the main output cannot be written
        """
        builder = RecordBuilder(
            filter_color=self.config_manager.get_filter_color(),
            date_str=date_str,
            enemy_label=self.config_manager.get_enemy_label(),
            name_resolver=self.name_resolver
        )
        recognizer = ScoreboardRecognizer(
            builder,
            self.class_registry,
            duplicate_policy=self.config_manager.get_duplicate_policy(),
            logger=self.logger
        )

        recognition = recognizer.recognize(ocr_text)

        output_file = self.output_paths['output']
        try:
            save_csv(output_file, [p.to_row() for p in recognition.players], self.logger)
            self.logger.info(f"Written {len(recognition.players)} players to: {output_file}")
        except IOError as e:
            self.logger.error(f"Failed to save output CSV: {e}")
            raise

        validation = self.validator.validate_players(recognition.players)

        errors_file = self.output_paths['errors']
        try:
            save_lines(errors_file, build_diagnostic_lines(recognition, validation), self.logger)
        except IOError as e:
            self.logger.warning(f"Failed to write {errors_file}: {e}")

        for player in validation.unknown_class_players:
            self.logger.info(f"Unknown class for {player.name}: {format_csv_row(player.to_row())}")

        return BatchResult(
            recognition=recognition,
            validation=validation,
            output_file=output_file,
            errors_file=errors_file
        )

    def process_folder(self, image_dir: str, date_str: str) -> Optional[BatchResult]:
        """
        Process every screenshot of a folder as one batch.

        Args:
            image_dir: Folder holding the screenshots
            date_str: Timestamp attached to every record

        Returns:
            BatchResult, or None when no image produced any text

        Raises:
            NotADirectoryError: If image_dir is not a directory
            IOError: If the main output cannot be written
        """
        image_files = self.find_images(image_dir)
        if not image_files:
            self.logger.warning(f"No image files found in: {image_dir}")
            return None

        self.logger.info(f"Found {len(image_files)} image files to process")

        ocr_text, failed = self.extract_text(image_files)
        if not ocr_text:
            self.logger.warning("No OCR output for any images")
            return None

        raw_ocr_file = self.output_paths['raw_ocr']
        try:
            save_text(raw_ocr_file, ocr_text, self.logger)
        except IOError as e:
            self.logger.warning(f"Failed to write {raw_ocr_file}: {e}")

        result = self.process_text(ocr_text, date_str)
        result.images_processed = len(image_files) - failed
        result.images_failed = failed
        return result
