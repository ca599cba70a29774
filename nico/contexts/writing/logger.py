"""
Writing context logger.

Provides logging interface for the writing context with automatic [write] prefix.
All writing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from nico.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[write]"


def setup_writing_logger(log_dir: Optional[Path], config_path: Optional[Path] = None, verbose: bool = False) -> Optional[Path]:
    """
    Setup logger for a build session.

    Args:
        log_dir: Directory for this build session (None for console only)
        config_path: Site configuration file, recorded in the provenance header
        verbose: Show DEBUG messages on the console

    Returns:
        Path to log file (None for console only)
    """
    return _setup_logger(
        context_name="build",
        log_dir=log_dir,
        extra_provenance={"Config": str(config_path)} if config_path else None,
        console_level="DEBUG" if verbose else "INFO",
    )


# Wrapper functions with automatic [write] prefix


def _log_info(message: str) -> None:
    """Log info message with [write] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [write] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [write] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [write] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [write] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level writing-specific logging helpers


def log_writer_start(writer_name: str) -> None:
    """Log a writer entering the started state."""
    _log_info(f"Starting {writer_name}")


def log_writer_end(writer_name: str, written: int) -> None:
    """Log a writer reaching the ended state."""
    _log_info(f"Ending {writer_name} ({written} file(s))")


def log_item_failure(writer_name: str, item: str, error: Exception) -> None:
    """Log the content item that aborted a writer's run."""
    _log_error(f"{writer_name} failed on {item}")
    _log_error(f"  Error: {error}")


def log_build_result(
    result,  # BuildResult
    elapsed_time: float,
) -> None:
    """
    Log the outcome of a full site build.

    Args:
        result: BuildResult from build_site()
        elapsed_time: Time taken by the build
    """
    if result.success:
        _log_success(f"Build finished: {len(result.written)} file(s) in {result.output} ({elapsed_time:.2f}s)")
    else:
        _log_error(f"Build failed after {len(result.written)} file(s) ({elapsed_time:.2f}s)")
        if result.error:
            _log_error(f"  Error: {result.error}")

    for writer_name, count in result.counts.items():
        _log_debug(f"  {writer_name}: {count}")
