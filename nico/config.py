"""
Site Configuration

Loads the site configuration YAML (default: nico.yaml) with OmegaConf, merges it
over the defaults below and exposes the fields the writers consume.

Examples:
    # Load from the path in NICO_CONFIG_PATH (or ./nico.yaml)
    >>> config = load_site_config()

    # Override single keys from the command line
    >>> config = load_site_config(Path("nico.yaml"), overrides=["output=public", "theme=themes/one"])
"""

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

load_dotenv()
CONFIG_PATH = Path(os.getenv("NICO_CONFIG_PATH", "nico.yaml"))


class ConfigurationError(Exception):
    """
    Exception raised when the site configuration cannot produce any output.

    Raised for a missing or invalid configuration file, a missing template root
    (no configured root, no local _templates directory and no theme), unknown
    writer names and malformed engine options. Treated as fatal by the build driver.
    """

    pass


FunctionRef = Union[str, Callable[..., Any]]

DEFAULT_WRITERS = ["PostWriter", "PageWriter", "FileWriter", "StaticWriter"]

DEFAULT_CONFIG: Dict[str, Any] = {
    "source": "content",
    "output": "_site",
    "theme": None,
    "permalink": "{{directory}}/{{filename}}.html",
    "parser": None,
    "writers": DEFAULT_WRITERS,
    "exclude": [],
    "engine": {
        "root": None,
        "filters": {},
        "globals": {},
        "functions": {},
        "contextfunctions": {},
        "contextfilters": {},
        "encoding": "utf-8",
        "tz_offset": 0,
    },
}


@dataclass
class EngineOptions:
    """
    Template engine options (the `engine:` block of the site configuration).

    Function-valued entries may be callables or "module:attr" string references;
    references are resolved once by the function registry, never at render time.
    """

    root: Optional[List[Path]] = None
    filters: Dict[str, FunctionRef] = field(default_factory=dict)
    globals: Dict[str, Any] = field(default_factory=dict)
    functions: Dict[str, FunctionRef] = field(default_factory=dict)
    contextfunctions: Dict[str, FunctionRef] = field(default_factory=dict)
    contextfilters: Dict[str, FunctionRef] = field(default_factory=dict)
    encoding: str = "utf-8"
    tz_offset: int = 0

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], base_dir: Path) -> "EngineOptions":
        """Build engine options from a plain mapping, resolving root dirs against base_dir."""
        data = dict(data or {})
        # Accept the camelCase spelling used by older configurations
        if "tzOffset" in data:
            data["tz_offset"] = data.pop("tzOffset")

        unknown = set(data) - {f for f in cls.__dataclass_fields__}
        if unknown:
            raise ConfigurationError(f"Unknown engine option(s): {sorted(unknown)}")

        root = data.get("root")
        if isinstance(root, (str, Path)):
            root = [root]
        if root is not None:
            data["root"] = [base_dir / Path(r) for r in root]

        for key in ("filters", "globals", "functions", "contextfunctions", "contextfilters"):
            data[key] = dict(data.get(key) or {})

        return cls(**data)


@dataclass
class SiteConfig:
    """
    Resolved site configuration.

    Attributes:
        base_dir: Directory relative paths are resolved against (config file's directory)
        source: Content root
        output: Output root
        theme: Theme directory (None if no theme is configured)
        permalink: Destination pattern for posts (e.g. "{{year}}/{{filename}}.html")
        parser: Content parser (callable or string reference; None uses markdown)
        writers: Writer names in execution order
        exclude: Glob patterns (relative to source) skipped by the content loader
        engine: Template engine options
        raw: Full configuration mapping, exposed to templates as `config`
    """

    base_dir: Path
    source: Path
    output: Path
    theme: Optional[Path] = None
    permalink: str = DEFAULT_CONFIG["permalink"]
    parser: Optional[FunctionRef] = None
    writers: List[str] = field(default_factory=lambda: list(DEFAULT_WRITERS))
    exclude: List[str] = field(default_factory=list)
    engine: EngineOptions = field(default_factory=EngineOptions)
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def local_templates(self) -> Path:
        """Project-local template directory (_templates)."""
        return self.base_dir / "_templates"

    @property
    def local_static(self) -> Path:
        """Project-local static directory (_static)."""
        return self.base_dir / "_static"

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "SiteConfig":
        """
        Build a SiteConfig from a plain mapping merged over DEFAULT_CONFIG.

        Args:
            data: User configuration (may contain callables for engine functions)
            base_dir: Directory relative paths are resolved against (default: cwd)

        Returns:
            Resolved SiteConfig

        Raises:
            ConfigurationError: If the engine block contains unknown options
        """
        base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

        defaults = copy.deepcopy(DEFAULT_CONFIG)
        merged = {**defaults, **(data or {})}
        merged["engine"] = {**defaults["engine"], **(merged.get("engine") or {})}

        theme = merged.get("theme")

        return cls(
            base_dir=base_dir,
            source=base_dir / Path(merged["source"]),
            output=base_dir / Path(merged["output"]),
            theme=base_dir / Path(theme) if theme else None,
            permalink=merged["permalink"],
            parser=merged.get("parser"),
            writers=list(merged.get("writers") or []),
            exclude=list(merged.get("exclude") or []),
            engine=EngineOptions.from_mapping(merged["engine"], base_dir),
            raw=merged,
        )


def load_site_config(config_path: Path = None, overrides: Optional[List[str]] = None) -> SiteConfig:
    """
    Load a site configuration YAML file.

    Args:
        config_path: Path to the YAML file (defaults to NICO_CONFIG_PATH env variable)
        overrides: Dotlist overrides applied last (e.g. ["output=public", "engine.tz_offset=60"])

    Returns:
        Resolved SiteConfig, with relative paths anchored at the config file's directory

    Raises:
        ConfigurationError: If the file is missing or is not valid YAML
    """
    if config_path is None:
        config_path = CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        conf = OmegaConf.merge(
            OmegaConf.create(DEFAULT_CONFIG),
            OmegaConf.load(config_path),
            OmegaConf.from_dotlist(overrides or []),
        )
        data = OmegaConf.to_container(conf, resolve=True)
    except (OmegaConfBaseException, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    return SiteConfig.from_mapping(data, base_dir=config_path.resolve().parent)
