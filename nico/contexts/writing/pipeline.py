"""
Render Pipeline

Turns one RenderRequest into files: resolves the output path, assembles the
context, compiles and renders the template, writes the primary file and then any
iframe sub-documents next to it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from nico.contexts.writing.context import assemble_context
from nico.contexts.writing.engine import get_engine
from nico.contexts.writing.logger import _log_debug
from nico.contexts.writing.paths import iframe_filename, resolve_output_path

IFRAME_TEMPLATE = "iframe.html"


@dataclass
class RenderRequest:
    """
    A single render issued by a writer.

    Attributes:
        destination: Logical destination (normalized by the path resolver)
        template: Template name or path
        params: Template variables (writers pass at least `post`)
        iframes: iframe key -> code, each written as a sibling <key>.html
    """

    destination: str
    template: str
    params: Dict[str, Any] = field(default_factory=dict)
    iframes: Optional[Dict[str, str]] = None


@dataclass
class RenderResult:
    """
    Files written for one RenderRequest.

    Attributes:
        path: Primary output file
        iframe_paths: Sibling iframe files, in iframe order
    """

    path: Path
    iframe_paths: List[Path] = field(default_factory=list)

    @property
    def written(self) -> List[Path]:
        return [self.path, *self.iframe_paths]


def write_file(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write content to path, creating parent directories and overwriting any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)


def render_request(writer, request: RenderRequest) -> RenderResult:
    """
    Render a request and write its output files.

    Compile and render both happen before anything is written, so a broken
    template never leaves a partial primary file. Iframes are written after the
    primary file; a failing iframe leaves the primary file in place.

    Args:
        writer: Writer issuing the render
        request: RenderRequest

    Returns:
        RenderResult with every written path

    Raises:
        TemplateNotFound: If the template (or iframe.html) cannot be found
        TemplateRenderError: If the template fails to compile or evaluate
        ValueError: If an iframe key is not a plain file name (checked before any write)
    """
    config = writer.site.config
    encoding = config.engine.encoding
    engine = get_engine()

    path = resolve_output_path(request.destination, config.output)
    filepath = path.relative_to(config.output).as_posix()
    iframe_paths = {key: path.parent / iframe_filename(key) for key in request.iframes or {}}

    context = assemble_context(writer, request, filepath)
    compiled = engine.compile(request.template)
    html = engine.render(compiled, context.values, context.filters)

    _log_debug(f"Writing {filepath}")
    write_file(path, html, encoding)
    result = RenderResult(path=path)

    if request.iframes:
        iframe_template = engine.compile(IFRAME_TEMPLATE)
        for key, code in request.iframes.items():
            iframe_path = iframe_paths[key]
            iframe_html = engine.render(iframe_template, {"key": key, "code": code}, context.filters)
            _log_debug(f"Writing iframe {iframe_path.relative_to(config.output)}")
            write_file(iframe_path, iframe_html, encoding)
            result.iframe_paths.append(iframe_path)

    return result
