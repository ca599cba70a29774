"""
Writing Context

Responsibilities:
- Resolves logical destinations to normalized output paths
- Configures the Jinja2 engine once per process (search roots, filters, globals)
- Assembles per-render contexts, including context functions and context filters
- Renders templates and writes primary files and iframe sub-documents
- Sequences writers through their start/run/end lifecycle

Owns: Output tree, template engine configuration, writer lifecycle
Never: Parses content or mutates the resource store
"""

from nico.contexts.writing.build import BuildResult, build_site
from nico.contexts.writing.context import RenderedContext, assemble_context
from nico.contexts.writing.engine import (
    CompiledTemplate,
    TemplateEngine,
    ensure_initialized,
    find_template_roots,
    get_engine,
    reset_engine,
)
from nico.contexts.writing.exceptions import TemplateRenderError, WriterLifecycleError
from nico.contexts.writing.paths import iframe_filename, normalize_destination, resolve_output_path
from nico.contexts.writing.pipeline import RenderRequest, RenderResult, render_request
from nico.contexts.writing.registry import FunctionRegistry, build_registry
from nico.contexts.writing.writers import (
    WRITERS,
    ArchiveWriter,
    FileWriter,
    PageWriter,
    PostWriter,
    StaticWriter,
    Writer,
    WriterState,
    create_writers,
    register_writer,
)

__all__ = [
    # Build orchestration
    "build_site",
    "BuildResult",
    # Render pipeline
    "render_request",
    "RenderRequest",
    "RenderResult",
    "assemble_context",
    "RenderedContext",
    "normalize_destination",
    "iframe_filename",
    "resolve_output_path",
    # Template engine
    "TemplateEngine",
    "CompiledTemplate",
    "ensure_initialized",
    "find_template_roots",
    "get_engine",
    "reset_engine",
    "FunctionRegistry",
    "build_registry",
    # Writers
    "Writer",
    "WriterState",
    "PostWriter",
    "PageWriter",
    "ArchiveWriter",
    "FileWriter",
    "StaticWriter",
    "WRITERS",
    "create_writers",
    "register_writer",
    # Errors
    "TemplateRenderError",
    "WriterLifecycleError",
]
