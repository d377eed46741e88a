"""
OCR engine wrapper.
Extracts the raw pipe-delimited scoreboard text from screenshots with Tesseract.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

import cv2
import numpy as np
import pytesseract

if TYPE_CHECKING:
    from throne_ocr.config_manager import ConfigManager


class OCRError(Exception):
    """Raised when text cannot be extracted from an image."""


class OCREngine:
    """Thin wrapper around the OCR library used for scoreboard screenshots"""

    SUPPORTED_ENGINES = ['tesseract']

    def __init__(
        self,
        config_manager: 'ConfigManager',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initializes the OCR engine configured for the batch.

        Args:
            config_manager: Configuration manager instance for loading engine parameters
            logger: Logger instance

        Raises:
            ValueError: If engine is not supported
        """
        ocr_config = config_manager.get_ocr_config()
        engine_name = ocr_config.get('engine', 'tesseract')
        if engine_name not in self.SUPPORTED_ENGINES:
            raise ValueError(f"Unsupported engine: {engine_name}. Must be one of {self.SUPPORTED_ENGINES}")

        self.engine_name = engine_name
        self.language = ocr_config.get('language', 'eng')
        self.extra_config = ocr_config.get('extra_config', '') or ''
        self.tessdata_dir = ocr_config.get('tessdata_dir') or os.environ.get('TESSDATA_PREFIX')
        self.logger = logger

        if self.logger:
            self.logger.info(f"Initializing {engine_name} OCR engine (language={self.language})")

        self.engine = self._initialize_engine(engine_name)

    def _initialize_engine(self, engine_name: str) -> Any:
        # pytesseract is a module-level API, nothing to construct
        if engine_name == 'tesseract':
            return pytesseract

    def _tesseract_config(self) -> str:
        parts = []
        if self.tessdata_dir:
            parts.append(f'--tessdata-dir "{self.tessdata_dir}"')
        if self.extra_config:
            parts.append(self.extra_config)
        return ' '.join(parts)

    def extract_text(self, image: np.ndarray) -> str:
        """
        Extract raw text from an image.

        Args:
            image: Input image as numpy array

        Returns:
            Extracted text, stripped of surrounding whitespace

        Raises:
            OCRError: If OCR fails
        """
        try:
            text = self.engine.image_to_string(
                image,
                lang=self.language,
                config=self._tesseract_config()
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as e:
            if self.logger:
                self.logger.error(f"OCR extraction failed: {e}")
            raise OCRError(f"Failed to extract text from image: {e}") from e

        return text.strip() if text else ''

    def extract_text_from_file(self, image_path: str) -> str:
        """
        Load an image file and extract its text.

        Args:
            image_path: Path to the image

        Returns:
            Extracted text

        Raises:
            OCRError: If the file is missing, unreadable, or OCR fails
        """
        image_path_str = str(image_path)
        if not Path(image_path_str).exists():
            raise OCRError(f"Image file does not exist: {image_path_str}")

        image = cv2.imread(image_path_str)
        if image is None:
            raise OCRError(f"cv2.imread failed for {image_path_str}. File may be corrupted or unsupported format.")

        if self.logger:
            self.logger.info(f"Processing image: {image_path_str}")

        return self.extract_text(image)
