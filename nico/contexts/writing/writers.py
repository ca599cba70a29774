"""
Writers

Each writer owns one production rule over the site's content store and is
driven through start() -> run() -> end(). Templated writers issue RenderRequests
through the render pipeline; the others copy files.

New writers register themselves by name so configurations can list them:

    @register_writer
    class FeedWriter(Writer):
        name = "FeedWriter"

        def run(self):
            ...
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Type

from nico.config import ConfigurationError
from nico.contexts.content.models import ContentItem
from nico.contexts.content.permalink import destination
from nico.contexts.content.view import create_post_view
from nico.contexts.writing.engine import ensure_initialized
from nico.contexts.writing.exceptions import WriterLifecycleError
from nico.contexts.writing.logger import _log_debug, log_item_failure, log_writer_end, log_writer_start
from nico.contexts.writing.pipeline import RenderRequest, RenderResult, render_request
from nico.utils.file_operations import copy_files, copy_tree

PAGE_PATTERN = "{{directory}}/{{filename}}.html"

WRITERS: Dict[str, Type["Writer"]] = {}


def register_writer(cls: Type["Writer"]) -> Type["Writer"]:
    """Class decorator adding a writer to WRITERS under its name."""
    WRITERS[cls.name] = cls
    return cls


class WriterState(Enum):
    CREATED = "created"
    STARTED = "started"
    ENDED = "ended"


class Writer(ABC):
    """
    Base writer.

    Creating a writer initializes the process-wide template engine from the site
    (a no-op after the first writer). Production (render/copy) is only allowed
    between start() and end().

    Attributes:
        name: Writer identity, exposed to templates as writer.name
        site: SiteContext (read-only)
        state: Lifecycle state
        written: Files produced by this writer
    """

    name = "Writer"

    def __init__(self, site):
        ensure_initialized(site)
        self.site = site
        self.state = WriterState.CREATED
        self.written: List[Path] = []

    def setup(self) -> None:
        """Optional hook called by start() before the writer is marked started."""

    def start(self) -> "Writer":
        if self.state is not WriterState.CREATED:
            raise WriterLifecycleError(f"{self.name}.start() called in state '{self.state.value}'")
        self.setup()
        self.state = WriterState.STARTED
        log_writer_start(self.name)
        return self

    @abstractmethod
    def run(self) -> "Writer":
        """Produce this writer's output."""

    def end(self) -> "Writer":
        if self.state is not WriterState.STARTED:
            raise WriterLifecycleError(f"{self.name}.end() called in state '{self.state.value}'")
        self.state = WriterState.ENDED
        log_writer_end(self.name, len(self.written))
        return self

    def _require_started(self, action: str) -> None:
        if self.state is not WriterState.STARTED:
            raise WriterLifecycleError(f"{self.name} cannot {action} in state '{self.state.value}'")

    def render(self, request: RenderRequest) -> RenderResult:
        """Render a request through the pipeline and record the written files."""
        self._require_started("render")
        result = render_request(self, request)
        self.written.extend(result.written)
        return result

    def copy(self, copier: Callable[..., List[Path]], *args) -> List[Path]:
        """Run a bulk-copy helper and record the copied files."""
        self._require_started("copy")
        copied = copier(*args)
        self.written.extend(copied)
        return copied


class ContentWriter(Writer):
    """Renders one file per content item."""

    default_template = "post.html"

    def items(self) -> Iterable[ContentItem]:
        raise NotImplementedError

    def pattern(self) -> str:
        raise NotImplementedError

    def run(self) -> "ContentWriter":
        items = list(self.items())
        _log_debug(f"Generating {len(items)} item(s) with {self.name}")

        for item in items:
            view = create_post_view(self.site, item)
            try:
                self.render(
                    RenderRequest(
                        destination=destination(view, self.pattern()),
                        template=view.template or self.default_template,
                        params={"post": view},
                        iframes=view.iframes,
                    )
                )
            except Exception as e:
                log_item_failure(self.name, str(item.filepath), e)
                raise

        return self


@register_writer
class PostWriter(ContentWriter):
    """Public posts followed by secret posts, at the configured permalink."""

    name = "PostWriter"
    default_template = "post.html"

    def items(self) -> Iterable[ContentItem]:
        resource = self.site.resource
        if resource is None:
            return []
        return resource.public_posts + resource.secret_posts

    def pattern(self) -> str:
        return self.site.config.permalink


@register_writer
class PageWriter(ContentWriter):
    """Pages at {{directory}}/{{filename}}.html."""

    name = "PageWriter"
    default_template = "page.html"

    def items(self) -> Iterable[ContentItem]:
        resource = self.site.resource
        return resource.pages if resource is not None else []

    def pattern(self) -> str:
        return PAGE_PATTERN


@register_writer
class ArchiveWriter(Writer):
    """Reserved for paginated archives."""

    name = "ArchiveWriter"

    def run(self) -> "ArchiveWriter":
        return self


@register_writer
class FileWriter(Writer):
    """Copies the resource store's raw files from the source root to the output root."""

    name = "FileWriter"

    def run(self) -> "FileWriter":
        resource = self.site.resource
        files = resource.files if resource is not None else []
        config = self.site.config
        self.copy(copy_files, config.source, config.output, files)
        return self


@register_writer
class StaticWriter(Writer):
    """Copies <theme>/static and the local _static directory into <output>/static."""

    name = "StaticWriter"

    def run(self) -> "StaticWriter":
        config = self.site.config
        dest = config.output / "static"

        if config.theme is not None:
            self.copy(copy_tree, config.theme / "static", dest)
        self.copy(copy_tree, config.local_static, dest)
        return self


def create_writers(site, names: Optional[Iterable[str]] = None) -> List[Writer]:
    """
    Instantiate writers by name, in order.

    Args:
        site: SiteContext
        names: Writer names (defaults to site.config.writers)

    Returns:
        Writers in the given order

    Raises:
        ConfigurationError: If a name is not registered (checked before any writer is created)
    """
    names = list(site.config.writers if names is None else names)

    unknown = [name for name in names if name not in WRITERS]
    if unknown:
        raise ConfigurationError(f"Unknown writer(s): {unknown}. Available: {sorted(WRITERS)}")

    return [WRITERS[name](site) for name in names]
