"""Custom exceptions for the writing context."""

from pathlib import Path
from typing import Optional


class TemplateRenderError(Exception):
    """
    Exception raised when a template fails to compile or evaluate.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        filename: Path to the template file (None for in-memory templates)
        lineno: Template line where evaluation failed (None if unknown)
        source_line: Offending template source line (None if unknown)
        original_error: The original Jinja2 or filter/function error
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        filename: Optional[Path] = None,
        lineno: Optional[int] = None,
        source_line: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_name = template_name
        self.filename = filename
        self.lineno = lineno
        self.source_line = source_line
        self.original_error = original_error

        parts = [message]

        if template_name:
            location = f"{filename or template_name}"
            if lineno:
                location += f", line {lineno}"
            parts.append(f"\nTemplate: {location}")

        if source_line:
            parts.append(f"  {source_line.strip()}")

        if original_error:
            parts.append(f"\nOriginal error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))


class WriterLifecycleError(RuntimeError):
    """
    Exception raised when writer lifecycle methods are called out of order.

    The only valid sequence is start() -> run() -> end().
    """

    pass
