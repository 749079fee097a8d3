"""
Logging Configuration
Sets up the global logger for the scale engine.

The level and log file default to `config.LOG_LEVEL` and `config.LOG_FILE`,
which can be set through CHARTSCALE_LOG_LEVEL and CHARTSCALE_LOG_FILE.
"""
import logging
import sys
from typing import Optional, Union

from chartscale import config
from chartscale.errors import ConfigurationError


def resolve_level(level: Union[int, str]) -> int:
    """Accepts a logging level number or a level name such as 'debug'."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(str(level).strip().upper())
    if resolved is None:
        raise ConfigurationError(f"Unknown logging level: {level!r}")
    return resolved


def setup_logging(level: Optional[Union[int, str]] = None, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the 'chartscale' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG or "debug"). Defaults to config.LOG_LEVEL.
        log_file: Optional path to save logs to a file. Defaults to config.LOG_FILE.
    """
    level = resolve_level(config.LOG_LEVEL if level is None else level)
    if log_file is None:
        log_file = config.LOG_FILE

    logger = logging.getLogger("chartscale")
    logger.setLevel(level)

    # Re-initializing the host must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
