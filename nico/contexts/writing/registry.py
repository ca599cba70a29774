"""
Function Registry

Resolves every function the template engine needs (filters, global functions,
context functions, context filters and the content parser) exactly once, when
the site configuration is loaded. The render path only ever sees callables.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

import markdown

from nico.config import EngineOptions, FunctionRef
from nico.utils.module_loading import ResolutionError, import_string

ContextFunction = Callable[[Dict[str, Any]], Any]
ContextFilterFactory = Callable[[Dict[str, Any]], Callable[..., Any]]

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc"]


def markdown_parser(text: str) -> str:
    """Default content parser: markdown to HTML."""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


@dataclass(frozen=True)
class FunctionRegistry:
    """
    Name -> callable tables built from EngineOptions.

    Attributes:
        filters: Static template filters
        functions: Template global functions
        context_functions: Called with the render context; result injected under the name
        context_filters: Called with the render context; result is the filter for that render
        parser: Content parser (markdown text -> HTML)
    """

    filters: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    functions: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    context_functions: Dict[str, ContextFunction] = field(default_factory=dict)
    context_filters: Dict[str, ContextFilterFactory] = field(default_factory=dict)
    parser: Callable[[str], str] = markdown_parser


def resolve_function(name: str, value: FunctionRef, kind: str = "function") -> Callable[..., Any]:
    """
    Resolve a configured function value to a callable.

    Args:
        name: Configured name (for error messages)
        value: Callable or string reference
        kind: Table the entry belongs to (for error messages)

    Returns:
        The callable

    Raises:
        ResolutionError: If a string reference cannot be imported or is not callable
    """
    func = import_string(value) if isinstance(value, str) else value

    if not callable(func):
        raise ResolutionError(f"{kind} '{name}' resolved to non-callable {func!r}", str(value))

    return func


def _resolve_table(table: Mapping[str, FunctionRef], kind: str) -> Dict[str, Callable[..., Any]]:
    # Insertion order is the configured order; a repeated name keeps the later value
    return {name: resolve_function(name, value, kind) for name, value in table.items()}


def build_registry(options: EngineOptions, parser: Optional[FunctionRef] = None) -> FunctionRegistry:
    """
    Build the function registry for a site.

    Args:
        options: Engine options from the site configuration
        parser: Content parser (callable or string reference; None uses markdown)

    Returns:
        FunctionRegistry with every reference resolved

    Raises:
        ResolutionError: If any reference cannot be resolved
    """
    return FunctionRegistry(
        filters=_resolve_table(options.filters, "filter"),
        functions=_resolve_table(options.functions, "function"),
        context_functions=_resolve_table(options.contextfunctions, "context function"),
        context_filters=_resolve_table(options.contextfilters, "context filter"),
        parser=resolve_function("parser", parser, "parser") if parser is not None else markdown_parser,
    )
