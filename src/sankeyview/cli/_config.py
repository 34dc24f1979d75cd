"""Project-level configuration from pyproject.toml.

Reads the [tool.sankeyview] section to provide defaults for the CLI::

    [tool.sankeyview]
    color_scheme = "dark"
    library = "cdn"            # "auto" | "bundled" | "cdn"
    asset_dir = "vendor/js"    # inline d3 files from here instead
    host = "127.0.0.1"
    port = 8765

    [tool.sankeyview.options]
    node_width = 18
    link_color_mode = "source-target"
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class SankeyviewConfig:
    """Configuration from [tool.sankeyview] in pyproject.toml."""

    color_scheme: str = "light"
    library: str = "auto"
    asset_dir: str | None = None
    host: str = "127.0.0.1"
    port: int = 0
    options: dict[str, Any] = field(default_factory=dict)


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> SankeyviewConfig:
    """Load [tool.sankeyview] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.sankeyview] section.
    A relative ``asset_dir`` is resolved against the pyproject.toml directory.
    """
    path = find_pyproject(start)
    if path is None:
        return SankeyviewConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return SankeyviewConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("sankeyview", {})
    if not section:
        return SankeyviewConfig()

    asset_dir = section.get("asset_dir")
    if asset_dir is not None:
        asset_dir = str((path.parent / asset_dir).resolve())

    return SankeyviewConfig(
        color_scheme=section.get("color_scheme", "light"),
        library=section.get("library", "auto"),
        asset_dir=asset_dir,
        host=section.get("host", "127.0.0.1"),
        port=section.get("port", 0),
        options=dict(section.get("options", {})),
    )
