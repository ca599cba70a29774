"""
Content context logger.

Provides logging interface for the content context with automatic [content] prefix.
All content modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[content]"


def _log_info(message: str) -> None:
    """Log info message with [content] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [content] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [content] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_resource_loaded(source: Path, resource) -> None:
    """Log a summary of the loaded resource store."""
    _log_info(
        f"Loaded {source}: {len(resource.public_posts)} public post(s), "
        f"{len(resource.secret_posts)} secret post(s), {len(resource.pages)} page(s), "
        f"{len(resource.files)} file(s)"
    )
