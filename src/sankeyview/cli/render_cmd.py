"""CLI commands for rendering and inspecting diagram data.

Provides `sankeyview render` and `sankeyview inspect` as top-level commands.
"""

from __future__ import annotations

import webbrowser
from pathlib import Path
from typing import Annotated, Any

import typer

from sankeyview.assets import LibrarySources
from sankeyview.cli._config import SankeyviewConfig, load_config
from sankeyview.cli._format import format_size, print_json, print_table
from sankeyview.colors import ColorPair, ColorScheme
from sankeyview.data import SankeyData
from sankeyview.exceptions import (
    InvalidColorError,
    InvalidOptionError,
    MissingAssetsError,
    SankeyDataError,
)
from sankeyview.options import SankeyOptions
from sankeyview.view import SankeyView

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

DataArgument = Annotated[Path, typer.Argument(help="Diagram JSON file ({nodes, links})")]
SchemeOption = Annotated[str | None, typer.Option("--scheme", help="'light' or 'dark'")]
LibraryOption = Annotated[str | None, typer.Option("--library", help="'auto', 'bundled' or 'cdn'")]
AssetDirOption = Annotated[
    Path | None, typer.Option("--asset-dir", help="Directory with d3.min.js and d3-sankey.min.js")
]
AlignOption = Annotated[str | None, typer.Option("--align", help="justify, left, right or center")]
NodeWidthOption = Annotated[float | None, typer.Option("--node-width", help="Node width in px")]
NodePaddingOption = Annotated[float | None, typer.Option("--node-padding", help="Gap between nodes in px")]
LinkModeOption = Annotated[
    str | None, typer.Option("--link-color-mode", help="none, source, target or source-target")
]
NodeColorOption = Annotated[str | None, typer.Option("--node-color", help="HEX or LIGHT:DARK")]
LinkColorOption = Annotated[str | None, typer.Option("--link-color", help="HEX or LIGHT:DARK")]
LabelColorOption = Annotated[str | None, typer.Option("--label-color", help="HEX or LIGHT:DARK")]
FontSizeOption = Annotated[float | None, typer.Option("--font-size", help="Label font size in px")]


def load_data(path: Path) -> SankeyData:
    """Load diagram data, exiting with a message on failure."""
    if not path.is_file():
        print(f"Error: '{path}' is not a file")
        raise typer.Exit(1)
    try:
        return SankeyData.from_json(path)
    except SankeyDataError as e:
        print(f"Error: {path}: {e.message}")
        raise typer.Exit(1) from e


def parse_color_flag(raw: str) -> ColorPair:
    """Parse 'HEX' or 'LIGHT:DARK'."""
    light, sep, dark = raw.partition(":")
    return ColorPair(light, dark) if sep else ColorPair.of(light)


def build_options(config: SankeyviewConfig, **flags: Any) -> SankeyOptions:
    """Layer CLI flags over [tool.sankeyview.options]. None flags are ignored."""
    values = dict(config.options)
    try:
        for key, value in flags.items():
            if value is None:
                continue
            if key in ("node_default_color", "link_default_color", "label_color"):
                value = parse_color_flag(value)
            values[key] = value
        return SankeyOptions.from_mapping(values)
    except (InvalidOptionError, InvalidColorError) as e:
        print(f"Error: {e.message}")
        raise typer.Exit(1) from e


def resolve_library(config: SankeyviewConfig, mode: str | None, asset_dir: Path | None) -> LibrarySources:
    try:
        return LibrarySources.from_mode(mode or config.library, asset_dir or config.asset_dir)
    except MissingAssetsError as e:
        print(f"Error: {e.message}")
        raise typer.Exit(1) from e
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e


def resolve_scheme(config: SankeyviewConfig, scheme: str | None) -> ColorScheme:
    try:
        return ColorScheme.coerce(scheme or config.color_scheme)
    except InvalidOptionError as e:
        print(f"Error: {e.message}")
        raise typer.Exit(1) from e


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def register_commands(app: typer.Typer) -> None:
    """Register `render` and `inspect` as top-level commands on the app."""

    @app.command("render")
    def render_cmd(
        data_path: DataArgument,
        output: Annotated[Path | None, typer.Option("--output", "-o", help="HTML file to write")] = None,
        scheme: SchemeOption = None,
        library: LibraryOption = None,
        asset_dir: AssetDirOption = None,
        align: AlignOption = None,
        node_width: NodeWidthOption = None,
        node_padding: NodePaddingOption = None,
        link_color_mode: LinkModeOption = None,
        node_color: NodeColorOption = None,
        link_color: LinkColorOption = None,
        label_color: LabelColorOption = None,
        font_size: FontSizeOption = None,
        open_browser: Annotated[bool, typer.Option("--open", help="Open the file in a browser")] = False,
    ):
        """Render diagram JSON to a standalone HTML file."""
        config = load_config()
        data = load_data(data_path)
        options = build_options(
            config,
            node_alignment=align,
            node_width=node_width,
            node_padding=node_padding,
            link_color_mode=link_color_mode,
            node_default_color=node_color,
            link_default_color=link_color,
            label_color=label_color,
            label_font_size=font_size,
        )
        view = SankeyView(data, options).library(resolve_library(config, library, asset_dir))

        target = output or data_path.with_suffix(".html")
        written = view.save(target, resolve_scheme(config, scheme))
        print(f"Wrote {written} ({format_size(written.stat().st_size)})")

        if open_browser:
            webbrowser.open(written.resolve().as_uri())

    @app.command("inspect")
    def inspect_cmd(
        data_path: DataArgument,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    ):
        """Summarize diagram JSON and report problems d3-sankey would hit."""
        data = load_data(data_path)
        issues = data.find_issues()

        if as_json:
            print_json(
                "inspect",
                {"nodes": len(data.nodes), "links": len(data.links), "issues": issues},
            )
        else:
            print(f"\nNodes: {len(data.nodes)} | Links: {len(data.links)}\n")
            rows = [[str(i + 1), issue] for i, issue in enumerate(issues)]
            for line in print_table(["#", "Issue"], rows):
                print(line)
            if not issues:
                print("  No issues found.")

        if issues:
            raise typer.Exit(1)
