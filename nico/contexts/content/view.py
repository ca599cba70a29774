"""
Post view model.

PostView is what templates see as `post`: the source item's fields plus
derived values (rendered HTML, filename, directory, date parts).
"""

from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from nico.contexts.content.models import ContentItem


class PostView:
    """
    Template-facing view of a post or page.

    Attributes:
        title: Document title
        content: Raw body
        filepath: Source file path
        root: Content root the directory is computed against
        parser: Content parser (raw body -> HTML)
        meta: Extra front matter fields (also reachable as attributes)
        template: Template override
        iframes: iframe key -> code
        date: Publication date (None for pages)
    """

    def __init__(
        self,
        title: str,
        content: str,
        filepath: Path,
        root: Path,
        parser: Callable[[str], str],
        meta: Optional[Dict[str, Any]] = None,
        template: Optional[str] = None,
        iframes: Optional[Dict[str, str]] = None,
        date=None,
    ):
        self.title = title
        self.content = content
        self.filepath = Path(filepath)
        self.root = Path(root)
        self.parser = parser
        self.meta = dict(meta or {})
        self.template = template
        self.iframes = iframes
        self.date = date

    @cached_property
    def html(self) -> str:
        """Body rendered by the configured parser."""
        return self.parser(self.content)

    @property
    def filename(self) -> str:
        """Source file name without suffix."""
        return self.filepath.stem

    @property
    def directory(self) -> str:
        """Source directory relative to the content root ("" at the top level)."""
        try:
            relative = self.filepath.parent.relative_to(self.root)
        except ValueError:
            return ""
        return "" if relative == Path(".") else relative.as_posix()

    @property
    def year(self) -> str:
        return f"{self.date.year:04d}" if self.date else ""

    @property
    def month(self) -> str:
        return f"{self.date.month:02d}" if self.date else ""

    @property
    def day(self) -> str:
        return f"{self.date.day:02d}" if self.date else ""

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not regular attributes
        meta = self.__dict__.get("meta", {})
        if name in meta:
            return meta[name]
        raise AttributeError(f"{type(self).__name__!r} has no attribute {name!r}")

    def __repr__(self) -> str:
        return f"PostView(title={self.title!r}, filepath={str(self.filepath)!r})"


def create_post_view(site, item: ContentItem) -> PostView:
    """
    Build the view model for a content item.

    Args:
        site: SiteContext (provides the content root and parser)
        item: ContentItem from the resource store

    Returns:
        PostView
    """
    return PostView(
        title=item.title,
        content=item.content,
        filepath=item.filepath,
        root=site.config.source,
        parser=site.registry.parser,
        meta=item.meta,
        template=item.template,
        iframes=item.iframes,
        date=item.date,
    )
