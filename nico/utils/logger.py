"""
Generic loguru setup shared by all contexts.

Context-specific wrappers with message prefixes live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

from nico import __version__

# Console colors for levels that should stand out during a build
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Optional[Path]:
    """
    Configure loguru sinks for a build session.

    The console sink is always installed. When log_dir is given, a DEBUG-level
    file sink is added as well and a provenance header is written to it.

    Args:
        context_name: Session identifier, used as the log file stem (e.g. "build")
        log_dir: Directory for the session log file (None disables file logging)
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum level shown on the console ("DEBUG" for verbose runs)

    Returns:
        Path to the log file, or None when file logging is disabled

    Example:
        from nico.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="build",
            log_dir=Path("outs/logs/build_20261017_101500"),
            extra_provenance={"Config": "nico.yaml"},
        )
    """
    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[Dict[str, str]] = None) -> None:
    """
    Log execution provenance (command, working directory, versions) at DEBUG level.

    Args:
        extra_context: Additional key-value pairs to log
    """
    logger.debug("=" * 80)
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")
    logger.debug(f"nico: {__version__}")

    if extra_context:
        for key, value in extra_context.items():
            logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
