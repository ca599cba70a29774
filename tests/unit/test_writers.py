"""Unit tests for writers and their lifecycle."""

from datetime import datetime

import pytest

from nico.config import ConfigurationError
from nico.contexts.content.models import Resource
from nico.contexts.writing.exceptions import TemplateRenderError, WriterLifecycleError
from nico.contexts.writing.pipeline import RenderRequest
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


@pytest.fixture
def posts(make_item):
    return Resource(
        public_posts=[
            make_item("a", "A", date=datetime(2026, 3, 1)),
            make_item("b", "B", date=datetime(2026, 2, 1)),
        ],
        secret_posts=[make_item("c", "C", date=datetime(2026, 1, 1), meta={"public": False})],
    )


# ==============================================================================
# Lifecycle
# ==============================================================================


@pytest.mark.unit
def test_lifecycle_states(make_site):
    writer = ArchiveWriter(make_site())
    assert writer.state is WriterState.CREATED

    writer.start()
    assert writer.state is WriterState.STARTED

    writer.run().end()
    assert writer.state is WriterState.ENDED


@pytest.mark.unit
def test_render_before_start_is_rejected(make_site):
    writer = ArchiveWriter(make_site())

    with pytest.raises(WriterLifecycleError, match="render"):
        writer.render(RenderRequest(destination="x", template="page.html"))


@pytest.mark.unit
def test_render_after_end_is_rejected(make_site):
    writer = ArchiveWriter(make_site()).start().end()

    with pytest.raises(WriterLifecycleError):
        writer.render(RenderRequest(destination="x", template="page.html"))


@pytest.mark.unit
def test_double_start_and_early_end(make_site):
    writer = ArchiveWriter(make_site())
    with pytest.raises(WriterLifecycleError):
        writer.end()

    writer.start()
    with pytest.raises(WriterLifecycleError):
        writer.start()


@pytest.mark.unit
def test_creating_writer_requires_template_root(make_site):
    with pytest.raises(ConfigurationError):
        ArchiveWriter(make_site(theme=None))


# ==============================================================================
# Registry
# ==============================================================================


@pytest.mark.unit
def test_builtin_writers_are_registered():
    for name in ("PostWriter", "PageWriter", "ArchiveWriter", "FileWriter", "StaticWriter"):
        assert name in WRITERS


@pytest.mark.unit
def test_register_custom_writer(make_site):
    @register_writer
    class NoteWriter(Writer):
        name = "NoteWriter"

        def run(self):
            self.render(RenderRequest(destination="note", template="page.html", params={"post": {"title": "N"}}))
            return self

    try:
        (writer,) = create_writers(make_site(), ["NoteWriter"])
        writer.start().run().end()
        assert [p.name for p in writer.written] == ["note.html"]
    finally:
        WRITERS.pop("NoteWriter")


@pytest.mark.unit
def test_unknown_writer_name(make_site):
    with pytest.raises(ConfigurationError, match="MissingWriter"):
        create_writers(make_site(), ["PostWriter", "MissingWriter"])


@pytest.mark.unit
def test_default_writer_order(make_site):
    writers = create_writers(make_site())
    assert [w.name for w in writers] == ["PostWriter", "PageWriter", "FileWriter", "StaticWriter"]


# ==============================================================================
# Content writers
# ==============================================================================


@pytest.mark.unit
def test_post_writer_renders_public_then_secret(make_site, posts, tmp_path):
    writer = PostWriter(make_site(posts)).start().run().end()

    out = tmp_path / "_site" / "posts"
    assert writer.written == [out / "a.html", out / "b.html", out / "c.html"]
    assert "<h1>C</h1>" in (out / "c.html").read_text()
    assert "PostWriter posts/a.html" in (out / "a.html").read_text()


@pytest.mark.unit
def test_post_template_override_and_iframes(make_site, make_item, theme_dir, tmp_path):
    (theme_dir / "templates" / "custom.html").write_text("custom {{ post.title }}")
    resource = Resource(public_posts=[make_item("d", "D", date=datetime(2026, 1, 1), template="custom.html", iframes={"demo": "x"})])

    PostWriter(make_site(resource)).start().run().end()

    assert (tmp_path / "_site" / "posts" / "d.html").read_text() == "custom D"
    assert (tmp_path / "_site" / "posts" / "demo.html").exists()


@pytest.mark.unit
def test_optional_front_matter_checks_render(make_site, make_item, theme_dir, tmp_path):
    """Templates may test keys that only some posts or sites define."""
    (theme_dir / "templates" / "post.html").write_text(
        "{% if post.description %}[{{ post.description }}]{% endif %}"
        "{% if config.disqus %}comments{% endif %}{{ post.title }}"
    )
    resource = Resource(
        public_posts=[
            make_item("plain", "Plain", date=datetime(2026, 2, 1)),
            make_item("described", "Described", date=datetime(2026, 1, 1), meta={"description": "Summary"}),
        ]
    )

    PostWriter(make_site(resource)).start().run().end()

    out = tmp_path / "_site" / "posts"
    assert (out / "plain.html").read_text() == "Plain"
    assert (out / "described.html").read_text() == "[Summary]Described"


@pytest.mark.unit
def test_post_writer_stops_at_failing_item(make_site, make_item, theme_dir, tmp_path):
    (theme_dir / "templates" / "broken.html").write_text("{{ post.missing_field.deeper }}")
    resource = Resource(
        public_posts=[
            make_item("first", date=datetime(2026, 3, 1)),
            make_item("bad", date=datetime(2026, 2, 1), template="broken.html"),
            make_item("last", date=datetime(2026, 1, 1)),
        ]
    )
    writer = PostWriter(make_site(resource)).start()

    with pytest.raises(TemplateRenderError):
        writer.run()

    assert [p.name for p in writer.written] == ["first.html"]
    assert not (tmp_path / "_site" / "posts" / "last.html").exists()


@pytest.mark.unit
def test_page_writer_uses_directory_pattern(make_site, make_item, tmp_path):
    about = make_item("about", "About")
    nested = make_item("guide/Setup Notes", "Setup")
    writer = PageWriter(make_site(Resource(pages=[about, nested]))).start().run().end()

    out = tmp_path / "_site"
    assert writer.written == [out / "about.html", out / "guide" / "setup-notes.html"]
    assert (out / "about.html").read_text() == "<article>About</article>\n"


@pytest.mark.unit
def test_archive_writer_writes_nothing(make_site, posts, tmp_path):
    writer = ArchiveWriter(make_site(posts)).start().run().end()

    assert writer.written == []
    assert not (tmp_path / "_site").exists()


# ==============================================================================
# Copy writers
# ==============================================================================


@pytest.mark.unit
def test_file_writer_copies_raw_files(make_site, tmp_path):
    content = tmp_path / "content"
    (content / "img").mkdir(parents=True)
    (content / "img" / "logo.png").write_bytes(b"\x89PNG")
    (content / "robots.txt").write_text("User-agent: *\n")

    writer = FileWriter(make_site(Resource(files=["img/logo.png", "robots.txt"]))).start().run().end()

    out = tmp_path / "_site"
    assert sorted(writer.written) == [out / "img" / "logo.png", out / "robots.txt"]
    assert (out / "img" / "logo.png").read_bytes() == b"\x89PNG"


@pytest.mark.unit
def test_static_writer_layers_local_over_theme(make_site, tmp_path):
    local = tmp_path / "_static" / "css"
    local.mkdir(parents=True)
    (local / "site.css").write_text("body { margin: 1em; }\n")
    (local / "extra.css").write_text("p {}\n")

    StaticWriter(make_site()).start().run().end()

    static = tmp_path / "_site" / "static" / "css"
    assert (static / "site.css").read_text() == "body { margin: 1em; }\n"
    assert (static / "extra.css").exists()


@pytest.mark.unit
def test_static_writer_without_static_dirs(make_site, theme_dir, tmp_path):
    (theme_dir / "static" / "css" / "site.css").unlink()
    (theme_dir / "static" / "css").rmdir()
    (theme_dir / "static").rmdir()

    writer = StaticWriter(make_site()).start().run().end()

    assert writer.written == []
