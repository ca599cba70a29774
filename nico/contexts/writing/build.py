"""
Build driver.

Runs the configured writers one after another over a shared SiteContext.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from nico.contexts.writing.engine import ensure_initialized
from nico.contexts.writing.logger import log_build_result
from nico.contexts.writing.writers import create_writers


@dataclass
class BuildResult:
    """
    Outcome of a site build.

    Attributes:
        success: Whether every writer completed
        output: Output root
        written: Every file written, in write order
        counts: Writer name -> number of files it produced
        error: Exception that aborted the build (None on success)
    """

    success: bool
    output: Path
    written: List[Path] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[Exception] = None


def build_site(site, writer_names: Optional[Iterable[str]] = None) -> BuildResult:
    """
    Build a site.

    The template engine is initialized and every writer is created before any
    writer runs, so configuration problems surface before the first file is
    written. Writers then run strictly in order; the first failure stops the
    build and is reported on the result. Writer errors (template, render,
    lifecycle and filesystem errors) are not raised: check result.success and
    result.error.

    Args:
        site: SiteContext
        writer_names: Writers to run (defaults to site.config.writers)

    Returns:
        BuildResult

    Raises:
        ConfigurationError: If no template root exists or a writer name is unknown
    """
    start_time = time.time()

    ensure_initialized(site)
    writers = create_writers(site, writer_names)

    result = BuildResult(success=True, output=site.config.output)

    for writer in writers:
        try:
            writer.start()
            writer.run()
            writer.end()
        except Exception as e:
            result.success = False
            result.error = e
            break
        finally:
            result.written.extend(writer.written)
            result.counts[writer.name] = len(writer.written)

    log_build_result(result, time.time() - start_time)
    return result
