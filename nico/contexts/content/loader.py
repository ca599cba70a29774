"""
Content Loader

Walks the source directory and builds the Resource store:
- Markdown files with a `date` in their front matter become posts
  (secret when `public: false` or `status: secret|draft`)
- Markdown files without a date become pages
- Every other file is recorded for verbatim copying

Hidden files and anything under a directory starting with "_" or "." are skipped,
as is the output directory when it lives inside the source tree.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional

import frontmatter
import yaml

from nico.contexts.content.logger import _log_debug, _log_warning, log_resource_loaded
from nico.contexts.content.models import ContentItem, Resource

MARKDOWN_SUFFIXES = {".md", ".markdown", ".mkd"}


def _sort_key(item: ContentItem) -> datetime:
    value = item.date
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime(value.year, value.month, value.day)


def _coerce_date(value) -> Optional[datetime]:
    if value is None or isinstance(value, (datetime, date)):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def parse_document(path: Path, encoding: str = "utf-8") -> ContentItem:
    """
    Parse a markdown document with optional YAML front matter.

    Args:
        path: Markdown file
        encoding: File encoding

    Returns:
        ContentItem (title falls back to the file stem)
    """
    try:
        post = frontmatter.loads(path.read_text(encoding=encoding))
        meta = dict(post.metadata or {})
        body = post.content
    except yaml.YAMLError as e:
        _log_warning(f"Ignoring malformed front matter in {path}: {e}")
        meta, body = {}, path.read_text(encoding=encoding)

    raw_date = meta.pop("date", None)
    item_date = _coerce_date(raw_date)
    if raw_date is not None and item_date is None:
        _log_warning(f"Unparseable date '{raw_date}' in {path}; treating it as a page")

    iframes = meta.pop("iframes", None)
    title = str(meta.pop("title", path.stem))
    template = meta.pop("template", None)

    return ContentItem(
        title=title,
        content=body,
        filepath=path,
        meta=meta,
        template=template,
        iframes=dict(iframes) if iframes else None,
        date=item_date,
    )


def _is_skipped(relative: Path, exclude: Iterable[str]) -> bool:
    if any(part.startswith((".", "_")) for part in relative.parts):
        return True
    return any(relative.match(pattern) for pattern in exclude)


def load_resource(
    source: Path,
    output: Optional[Path] = None,
    exclude: Iterable[str] = (),
    encoding: str = "utf-8",
) -> Resource:
    """
    Load the resource store from a source directory.

    Args:
        source: Content root
        output: Output root (skipped if it is inside source)
        exclude: Glob patterns, relative to source, to skip
        encoding: Source file encoding

    Returns:
        Resource with posts newest first and pages sorted by path
    """
    source = Path(source)
    exclude = list(exclude)
    resource = Resource()

    if not source.is_dir():
        _log_warning(f"Source directory not found: {source}")
        return resource

    output = Path(output).resolve() if output is not None else None

    posts: List[ContentItem] = []
    for path in sorted(source.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(source)
        if _is_skipped(relative, exclude):
            continue
        if output is not None and path.resolve().is_relative_to(output):
            continue

        if path.suffix.lower() not in MARKDOWN_SUFFIXES:
            resource.files.append(relative.as_posix())
            continue

        item = parse_document(path, encoding)
        _log_debug(f"Parsed {relative} ({'post' if item.is_post else 'page'})")
        if item.is_post:
            posts.append(item)
        else:
            resource.pages.append(item)

    posts.sort(key=_sort_key, reverse=True)
    resource.public_posts = [p for p in posts if p.is_public]
    resource.secret_posts = [p for p in posts if not p.is_public]

    log_resource_loaded(source, resource)
    return resource
