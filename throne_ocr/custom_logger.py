import logging
from typing import Optional


def get_custom_logger(name=__name__, level=logging.DEBUG, log_file: Optional[str] = None):
    """Logger for the standalone tools; console always, file only when log_file is given."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Calling a tool's main() twice must not print every line twice
    if logger.handlers:
        return logger

    formatter = logging.Formatter("{asctime} - {levelname} - {name} - {message}"
                                , style="{"
                                , datefmt="%Y-%m-%d %H:%M")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
