"""
Render context assembly.

Builds the mapping a template is rendered against. Jinja2 filters are registered
on the environment, so there is no native way to give a filter access to the
values of the current render. Context filters close that gap: each configured
factory is called with the assembled context and returns the filter used for
this render only.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict


@dataclass
class RenderedContext:
    """
    Context for a single render. Never shared between renders.

    Attributes:
        values: Template variables (params + writer + config + context functions)
        filters: Filters bound to this context (context filters)
    """

    values: Dict[str, Any]
    filters: Dict[str, Callable[..., Any]] = field(default_factory=dict)


def assemble_context(writer, request, filepath: str) -> RenderedContext:
    """
    Assemble the render context for a request.

    Steps (in this order):
    1. Copy request.params (the caller's mapping is left untouched)
    2. Inject writer = {"name", "filepath"}
    3. Inject config (the site configuration mapping)
    4. Evaluate context functions against the context so far, storing each result
       under its name
    5. Evaluate context filter factories against the completed context, collecting
       the bound filters

    Args:
        writer: Writer issuing the render (provides name and site)
        request: RenderRequest
        filepath: Normalized destination relative to the output root

    Returns:
        RenderedContext
    """
    site = writer.site
    registry = site.registry

    values: Dict[str, Any] = dict(request.params or {})
    values["writer"] = {"name": writer.name, "filepath": filepath}
    values["config"] = site.config.raw

    for name, func in registry.context_functions.items():
        values[name] = func(values)

    filters = {name: factory(values) for name, factory in registry.context_filters.items()}

    return RenderedContext(values=values, filters=filters)
