"""
Site context shared by every writer during a build.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from nico.config import SiteConfig, load_site_config
from nico.contexts.content.loader import load_resource
from nico.contexts.content.models import Resource
from nico.contexts.writing.registry import FunctionRegistry, build_registry


@dataclass(frozen=True)
class SiteContext:
    """
    Read-only state for one build.

    Attributes:
        config: Resolved site configuration
        resource: Content store (None when the build has no content)
        registry: Resolved template functions and content parser
    """

    config: SiteConfig
    resource: Optional[Resource]
    registry: FunctionRegistry

    @classmethod
    def from_config(cls, config: SiteConfig, resource: Optional[Resource] = None) -> "SiteContext":
        """
        Build a SiteContext, resolving every configured function reference.

        Raises:
            ResolutionError: If a string reference in the configuration cannot be imported
        """
        return cls(config=config, resource=resource, registry=build_registry(config.engine, config.parser))


def load_site(config_path: Path = None, overrides: Optional[List[str]] = None) -> SiteContext:
    """
    Load configuration and content for a build.

    Args:
        config_path: Site configuration file (defaults to NICO_CONFIG_PATH)
        overrides: Dotlist configuration overrides

    Returns:
        SiteContext with the resource store loaded from config.source

    Raises:
        ConfigurationError: If the configuration file is missing or invalid
        ResolutionError: If a configured function reference cannot be imported
    """
    config = load_site_config(config_path, overrides)
    # Resolve references before touching the content tree
    registry = build_registry(config.engine, config.parser)
    resource = load_resource(config.source, config.output, config.exclude, config.engine.encoding)
    return SiteContext(config=config, resource=resource, registry=registry)
