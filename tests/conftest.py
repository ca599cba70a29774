"""Shared fixtures: a throwaway site tree under tmp_path and a fresh template engine per test."""

from pathlib import Path

import pytest

from nico.config import SiteConfig
from nico.contexts.content.models import ContentItem, Resource
from nico.contexts.writing.engine import reset_engine
from nico.site import SiteContext

POST_TEMPLATE = "<h1>{{ post.title }}</h1>\n{{ post.html }}\n<footer>{{ writer.name }} {{ writer.filepath }}</footer>\n"
PAGE_TEMPLATE = "<article>{{ post.title }}</article>\n"
IFRAME_TEMPLATE = '<div data-key="{{ key }}">{{ code }}</div>\n'


@pytest.fixture(autouse=True)
def fresh_engine():
    """The template engine is process-wide; every test starts without one."""
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """Theme with post, page and iframe templates plus one static file."""
    theme = tmp_path / "theme"
    templates = theme / "templates"
    templates.mkdir(parents=True)
    (templates / "post.html").write_text(POST_TEMPLATE)
    (templates / "page.html").write_text(PAGE_TEMPLATE)
    (templates / "iframe.html").write_text(IFRAME_TEMPLATE)

    static = theme / "static" / "css"
    static.mkdir(parents=True)
    (static / "site.css").write_text("body { margin: 0; }\n")
    return theme


@pytest.fixture
def make_item(tmp_path: Path):
    """Factory for ContentItems rooted in tmp_path/content."""

    def _make_item(name: str, title: str = None, **kwargs) -> ContentItem:
        return ContentItem(
            title=title or name,
            content=kwargs.pop("content", f"Body of {name}"),
            filepath=tmp_path / "content" / f"{name}.md",
            **kwargs,
        )

    return _make_item


@pytest.fixture
def make_site(tmp_path: Path, theme_dir: Path):
    """Factory for SiteContexts using the theme fixture; config keys override defaults."""

    def _make_site(resource: Resource = None, **config) -> SiteContext:
        data = {"theme": str(theme_dir), "permalink": "posts/{{filename}}.html", "parser": lambda text: text}
        data.update(config)
        site_config = SiteConfig.from_mapping(data, base_dir=tmp_path)
        return SiteContext.from_config(site_config, resource if resource is not None else Resource())

    return _make_site
