"""
Integration tests for full site builds - config file, content tree, theme and CLI.
"""

import importlib.util
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from nico.config import ConfigurationError
from nico.contexts.writing import TemplateRenderError, build_site
from nico.site import load_site

SCRIPT_PATH = Path(__file__).parents[2] / "scripts" / "build_site.py"


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def path_prefix(context):
    """Context filter prefixing values with the current output path."""
    return lambda value: f"{context['writer']['filepath']}:{value}"


@pytest.fixture
def project(tmp_path, theme_dir):
    """A small site: two posts (one secret), a page, a raw file and a local static override."""
    write(
        tmp_path / "nico.yaml",
        "sitename: Notebook\n"
        f"theme: {theme_dir}\n"
        "permalink: '{{year}}/{{filename}}.html'\n"
        "engine:\n"
        "  filters:\n"
        "    dumps: json:dumps\n"
        "  contextfilters:\n"
        "    here: test_build_site:path_prefix\n",
    )
    content = tmp_path / "content"
    write(content / "first-post.md", "---\ntitle: First Post\ndate: 2026-01-05\n---\nHello *there*\n")
    write(
        content / "secret.md",
        "---\ntitle: Secret\ndate: 2025-12-01\nstatus: secret\niframes:\n  demo: <canvas></canvas>\n---\nHidden\n",
    )
    write(content / "About Me.md", "---\ntitle: About\n---\nMe\n")
    write(content / "files" / "cv.pdf", "%PDF")
    write(content / "_drafts" / "wip.md", "---\ndate: 2026-02-01\n---\n")
    write(tmp_path / "_static" / "js" / "app.js", "console.log(1)\n")
    return tmp_path


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("build_site_cli", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    yield module.app
    # The CLI installs a console sink bound to the runner's stream
    logger.remove()


@pytest.mark.integration
def test_full_build(project):
    site = load_site(project / "nico.yaml")

    result = build_site(site)

    out = project / "_site"
    assert result.success, result.error
    assert result.counts == {"PostWriter": 3, "PageWriter": 1, "FileWriter": 1, "StaticWriter": 2}

    first = (out / "2026" / "first-post.html").read_text()
    assert "<h1>First Post</h1>" in first
    assert "<em>there</em>" in first
    assert "PostWriter 2026/first-post.html" in first

    assert (out / "2025" / "secret.html").exists()
    assert (out / "2025" / "demo.html").read_text() == '<div data-key="demo"><canvas></canvas></div>\n'
    assert (out / "about-me.html").read_text() == "<article>About</article>\n"
    assert (out / "files" / "cv.pdf").read_text() == "%PDF"
    assert (out / "static" / "css" / "site.css").exists()
    assert (out / "static" / "js" / "app.js").exists()
    assert not (out / "2026" / "wip.html").exists()


@pytest.mark.integration
def test_context_filter_from_config(project, theme_dir):
    (theme_dir / "templates" / "page.html").write_text("{{ post.title|here }} {{ config.sitename }}")
    site = load_site(project / "nico.yaml")

    build_site(site, ["PageWriter"])

    assert (project / "_site" / "about-me.html").read_text() == "about-me.html:About Notebook"


@pytest.mark.integration
def test_rebuild_overwrites_output(project):
    build_site(load_site(project / "nico.yaml"))
    write(project / "content" / "About Me.md", "---\ntitle: About Again\n---\n")

    build_site(load_site(project / "nico.yaml"))

    assert (project / "_site" / "about-me.html").read_text() == "<article>About Again</article>\n"


@pytest.mark.integration
def test_failing_writer_stops_build(project, theme_dir):
    (theme_dir / "templates" / "page.html").write_text("{{ post.no_such_field.deeper }}")

    result = build_site(load_site(project / "nico.yaml"))

    assert not result.success
    assert isinstance(result.error, TemplateRenderError)
    assert result.counts == {"PostWriter": 3, "PageWriter": 0}
    assert not (project / "_site" / "files").exists()


@pytest.mark.integration
def test_missing_template_root_writes_nothing(tmp_path):
    write(tmp_path / "nico.yaml", "sitename: Bare\n")
    write(tmp_path / "content" / "page.md", "Page\n")

    with pytest.raises(ConfigurationError):
        build_site(load_site(tmp_path / "nico.yaml"))

    assert not (tmp_path / "_site").exists()


@pytest.mark.integration
def test_local_templates_without_theme(tmp_path):
    write(tmp_path / "nico.yaml", "writers: [PageWriter]\n")
    write(tmp_path / "_templates" / "page.html", "local {{ post.title }}")
    write(tmp_path / "content" / "index.md", "---\ntitle: Home\n---\n")

    result = build_site(load_site(tmp_path / "nico.yaml"))

    assert result.success
    assert (tmp_path / "_site" / "index.html").read_text() == "local Home"


@pytest.mark.integration
def test_cli_build(project, cli):
    runner = CliRunner()

    result = runner.invoke(cli, ["build", "--config", str(project / "nico.yaml"), "--no-log-file"])

    assert result.exit_code == 0, result.output
    assert (project / "_site" / "2026" / "first-post.html").exists()


@pytest.mark.integration
def test_cli_output_and_writer_options(project, cli):
    runner = CliRunner()
    target = project / "public"

    result = runner.invoke(
        cli,
        ["build", "-c", str(project / "nico.yaml"), "-o", str(target), "-w", "PageWriter", "--no-log-file"],
    )

    assert result.exit_code == 0, result.output
    assert [p.name for p in target.iterdir()] == ["about-me.html"]


@pytest.mark.integration
def test_cli_configuration_error_exit_code(tmp_path, cli):
    write(tmp_path / "nico.yaml", "sitename: Bare\n")

    result = CliRunner().invoke(cli, ["build", "-c", str(tmp_path / "nico.yaml"), "--no-log-file"])

    assert result.exit_code == 1
    assert not (tmp_path / "_site").exists()


@pytest.mark.integration
def test_cli_failed_build_exit_code(project, theme_dir, cli):
    (theme_dir / "templates" / "post.html").write_text("{% include 'nowhere.html' %}")

    result = CliRunner().invoke(cli, ["build", "-c", str(project / "nico.yaml"), "--no-log-file"])

    assert result.exit_code == 1


@pytest.mark.integration
def test_cli_list_writers(cli):
    result = CliRunner().invoke(cli, ["list-writers"])

    assert result.exit_code == 0
    assert "PostWriter" in result.output
    assert "StaticWriter" in result.output
