"""
Throne and Liberty Leaderboard OCR Pipeline
"""

from throne_ocr.config_manager import ConfigManager
from throne_ocr.ocr_engines import OCREngine, OCRError
from throne_ocr.class_registry import ClassRegistry, load_class_registry
from throne_ocr.name_resolver import AliasTable, NameResolver
from throne_ocr.models import PlayerRecord
from throne_ocr.recognition import RecognitionResult, RecordBuilder, ScoreboardRecognizer
from throne_ocr.constraint_validator import PlayerStatValidator, ValidationReport
from throne_ocr.orchestrator import BatchResult, OCRBatchProcessor
from throne_ocr.utils import (
    setup_logger,
    save_csv,
    save_lines,
    save_text,
    load_text,
    load_json,
)

__all__ = [
    'ConfigManager',
    'OCREngine',
    'OCRError',
    'ClassRegistry',
    'load_class_registry',
    'AliasTable',
    'NameResolver',
    'PlayerRecord',
    'RecognitionResult',
    'RecordBuilder',
    'ScoreboardRecognizer',
    'PlayerStatValidator',
    'ValidationReport',
    'BatchResult',
    'OCRBatchProcessor',
    'setup_logger',
    'save_csv',
    'save_lines',
    'save_text',
    'load_text',
    'load_json',
]
