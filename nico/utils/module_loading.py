"""Resolve dotted string references ("package.module:attr") to Python objects."""

from importlib import import_module
from typing import Any


class ResolutionError(ImportError):
    """
    Raised when a configured string reference cannot be resolved.

    Attributes:
        reference: The string reference that failed to resolve
    """

    def __init__(self, message: str, reference: str):
        self.reference = reference
        super().__init__(message)


def import_string(reference: str) -> Any:
    """
    Import an object from a string reference.

    Both "package.module:attr" and "package.module.attr" forms are accepted.
    The colon form allows nested attributes ("package.module:Class.method").

    Args:
        reference: String reference to resolve

    Returns:
        The referenced object

    Raises:
        ResolutionError: If the module cannot be imported or lacks the attribute

    Examples:
        >>> import_string("os.path:join")
        <function join ...>
        >>> import_string("markdown.markdown")
        <function markdown ...>
    """
    reference = reference.strip()
    if ":" in reference:
        module_path, _, attr_path = reference.partition(":")
    else:
        module_path, _, attr_path = reference.rpartition(".")

    if not module_path or not attr_path:
        raise ResolutionError(
            f"Invalid reference '{reference}': expected 'module:attr' or 'module.attr'",
            reference,
        )

    try:
        obj = import_module(module_path)
    except ImportError as e:
        raise ResolutionError(f"Cannot import module '{module_path}' for '{reference}': {e}", reference) from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ResolutionError(f"'{module_path}' has no attribute '{attr_path}'", reference) from e

    return obj
