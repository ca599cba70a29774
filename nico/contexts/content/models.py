"""
Content data structures.

ContentItem is one parsed source document; Resource is the store the writers
read from. Writers never mutate either.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


@dataclass
class ContentItem:
    """
    A source document (post or page).

    Attributes:
        title: Document title (front matter `title`, else the file stem)
        content: Raw document body (front matter removed)
        filepath: Source file path
        meta: Remaining front matter fields
        template: Template override (front matter `template`)
        iframes: iframe key -> code (front matter `iframes`)
        date: Publication date; documents with a date are posts
    """

    title: str
    content: str
    filepath: Path
    meta: Dict[str, Any] = field(default_factory=dict)
    template: Optional[str] = None
    iframes: Optional[Dict[str, str]] = None
    date: Optional[Union[datetime, date]] = None

    @property
    def is_post(self) -> bool:
        return self.date is not None

    @property
    def is_public(self) -> bool:
        """False for `public: false` or `status: secret|draft`."""
        if self.meta.get("public") is False:
            return False
        return str(self.meta.get("status", "public")).lower() not in {"secret", "draft"}


@dataclass
class Resource:
    """
    Content store for a site.

    Attributes:
        public_posts: Published posts, newest first
        secret_posts: Posts rendered but not listed, newest first
        pages: Undated documents, sorted by path
        files: Non-document files, relative to the source root
    """

    public_posts: List[ContentItem] = field(default_factory=list)
    secret_posts: List[ContentItem] = field(default_factory=list)
    pages: List[ContentItem] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def posts(self) -> List[ContentItem]:
        """Public posts followed by secret posts."""
        return self.public_posts + self.secret_posts
