"""
Template Engine

Wraps Jinja2 for the writers: one process-wide environment configured from the
site (search roots, filters, globals), template compilation by name or path, and
rendering against a context with an optional per-render filter set.

Per-render filters never touch the shared environment. The compiled code object
is bound to a throwaway overlay environment carrying the extra filters, so two
renders can never observe each other's filters.
"""

import traceback
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from types import CodeType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    TemplateRuntimeError,
    TemplateSyntaxError,
    Undefined,
)

from nico.config import ConfigurationError
from nico.contexts.writing.exceptions import TemplateRenderError
from nico.contexts.writing.logger import _log_debug, _log_error
from nico.utils.timestamp import format_date

_engine: Optional["TemplateEngine"] = None


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Compiled template, independent of any filter set.

    Attributes:
        name: Template name (relative to a search root, or the absolute path)
        filename: Source file on disk
        code: Jinja2 module code object
    """

    name: str
    filename: Optional[str]
    code: CodeType


def _unbound_context_filter(name: str) -> Callable[..., Any]:
    """Placeholder for a context filter so templates using it compile."""

    def placeholder(*args, **kwargs):
        raise TemplateRuntimeError(f"Context filter '{name}' used outside of a writer render")

    return placeholder


class TemplateEngine:
    """
    Configured Jinja2 environment.

    Settings: no autoescaping, no template cache, default Undefined. A missing
    variable prints as empty and tests false, so optional keys such as
    `config.disqus` can be checked with `{% if %}`. Looking up an attribute of a
    missing value still raises.
    """

    def __init__(
        self,
        roots: Iterable[Path],
        filters: Optional[Mapping[str, Callable[..., Any]]] = None,
        globals: Optional[Mapping[str, Any]] = None,
        encoding: str = "utf-8",
        context_filter_names: Iterable[str] = (),
    ):
        """
        Initialize the engine.

        Args:
            roots: Ordered template search roots
            filters: Static filters (name -> callable)
            globals: Template globals (values and functions)
            encoding: Template source encoding
            context_filter_names: Names of per-render filters templates may reference
        """
        self.roots: List[Path] = [Path(r) for r in roots]
        self.encoding = encoding

        self.environment = Environment(
            loader=FileSystemLoader([str(r) for r in self.roots], encoding=encoding),
            autoescape=False,
            cache_size=0,
            undefined=Undefined,
            keep_trailing_newline=True,
        )
        self.environment.filters.update(filters or {})
        for name in context_filter_names:
            self.environment.filters.setdefault(name, _unbound_context_filter(name))
        self.environment.globals.update(globals or {})

    def _load_source(self, template_ref: Union[str, Path]) -> tuple[str, str, Optional[str]]:
        """Return (name, source, filename) for a template name or file path."""
        ref_path = Path(template_ref)

        if ref_path.is_absolute():
            for root in self.roots:
                if ref_path.is_relative_to(root):
                    template_ref = ref_path.relative_to(root).as_posix()
                    break
            else:
                if not ref_path.is_file():
                    raise TemplateNotFound(str(ref_path))
                return str(ref_path), ref_path.read_text(encoding=self.encoding), str(ref_path)

        name = str(template_ref).replace("\\", "/")
        try:
            source, filename, _ = self.environment.loader.get_source(self.environment, name)
        except TemplateNotFound as e:
            roots = ", ".join(str(r) for r in self.roots)
            raise TemplateNotFound(name, message=f"Template '{name}' not found in: {roots}") from e

        return name, source, filename

    def compile(self, template_ref: Union[str, Path]) -> CompiledTemplate:
        """
        Compile a template by name (searched across roots) or by file path.

        Args:
            template_ref: Template name (e.g. "post.html") or path

        Returns:
            CompiledTemplate

        Raises:
            TemplateNotFound: If no search root contains the template
            TemplateRenderError: If the template has a syntax error
        """
        name, source, filename = self._load_source(template_ref)

        try:
            code = self.environment.compile(source, name, filename)
        except TemplateSyntaxError as e:
            lines = source.splitlines()
            source_line = lines[e.lineno - 1] if e.lineno and e.lineno <= len(lines) else None
            raise TemplateRenderError(
                f"Syntax error in template '{name}'",
                template_name=name,
                filename=filename,
                lineno=e.lineno,
                source_line=source_line,
                original_error=e,
            ) from e

        return CompiledTemplate(name=name, filename=filename, code=code)

    def _environment_for(self, filters: Optional[Mapping[str, Callable[..., Any]]]) -> Environment:
        if not filters:
            return self.environment

        overlay = self.environment.overlay()
        overlay.filters = {**self.environment.filters, **filters}
        return overlay

    def render(
        self,
        compiled: CompiledTemplate,
        context: Mapping[str, Any],
        filters: Optional[Mapping[str, Callable[..., Any]]] = None,
    ) -> str:
        """
        Render a compiled template.

        Args:
            compiled: Template from compile()
            context: Render context mapping
            filters: Per-render filters, layered over the static filters for this call only

        Returns:
            Rendered text

        Raises:
            TemplateNotFound: If an included or extended template is missing
            TemplateRenderError: If evaluation raises inside the template
        """
        environment = self._environment_for(filters)
        template = Template.from_code(environment, compiled.code, environment.make_globals(None))

        try:
            return template.render(context)
        except TemplateNotFound:
            raise
        except Exception as e:
            lineno, source_line = _template_location(e, compiled.filename)
            raise TemplateRenderError(
                f"Failed to render template '{compiled.name}'",
                template_name=compiled.name,
                filename=compiled.filename,
                lineno=lineno,
                source_line=source_line,
                original_error=e,
            ) from e


def _template_location(error: Exception, filename: Optional[str]) -> tuple[Optional[int], Optional[str]]:
    """Find the innermost traceback frame inside the template file."""
    if filename is None:
        return None, None

    # Jinja2 rewrites tracebacks so template frames carry the template's filename
    frames = [f for f in traceback.extract_tb(error.__traceback__) if f.filename == filename]
    if not frames:
        return getattr(error, "lineno", None), None

    return frames[-1].lineno, frames[-1].line


def find_template_roots(config) -> List[Path]:
    """
    Determine template search roots for a site.

    Order: the configured engine.root list; otherwise the local _templates
    directory (if it exists) followed by the theme's templates directory (if a
    theme is configured).

    Args:
        config: SiteConfig

    Returns:
        Search roots (possibly empty)
    """
    if config.engine.root:
        return list(config.engine.root)

    roots = []
    if config.local_templates.is_dir():
        roots.append(config.local_templates)
    if config.theme is not None:
        roots.append(config.theme / "templates")
    return roots


def build_engine(site) -> TemplateEngine:
    """
    Create a TemplateEngine from a SiteContext.

    Raises:
        ConfigurationError: If no template root can be located
    """
    config = site.config
    registry = site.registry

    roots = find_template_roots(config)
    if not roots:
        _log_error("No theme is assigned and no _templates directory was found.")
        raise ConfigurationError(
            f"No template root: configure engine.root or theme, or create {config.local_templates}"
        )

    filters: Dict[str, Callable[..., Any]] = {
        "date": partial(format_date, tz_offset=config.engine.tz_offset),
    }
    filters.update(registry.filters)

    template_globals: Dict[str, Any] = dict(config.engine.globals)
    template_globals.update(registry.functions)
    if site.resource is not None:
        template_globals["resource"] = site.resource

    _log_debug(f"Template roots: {', '.join(str(r) for r in roots)}")

    return TemplateEngine(
        roots=roots,
        filters=filters,
        globals=template_globals,
        encoding=config.engine.encoding,
        context_filter_names=registry.context_filters.keys(),
    )


def ensure_initialized(site) -> TemplateEngine:
    """
    Return the process-wide engine, creating it from the site on first call.

    Later calls return the same engine regardless of their argument.

    Raises:
        ConfigurationError: If no template root can be located
    """
    global _engine
    if _engine is None:
        _engine = build_engine(site)
    return _engine


def get_engine() -> TemplateEngine:
    """Return the initialized engine."""
    if _engine is None:
        raise RuntimeError("Template engine not initialized; call ensure_initialized() first")
    return _engine


def reset_engine() -> None:
    """Drop the process-wide engine (used between builds in tests)."""
    global _engine
    _engine = None
