"""`sankeyview vendor`: download the pinned d3 builds for offline documents."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import httpx
import typer

from sankeyview.assets import D3_SANKEY_VERSION, D3_VERSION, download_assets, vendor_directory
from sankeyview.cli._format import format_size


def register_commands(app: typer.Typer) -> None:
    """Register `vendor` as a top-level command on the app."""

    @app.command("vendor")
    def vendor_cmd(
        dest: Annotated[
            Path | None,
            typer.Option("--dest", help="Directory to write into (default: the installed sankeyview.vendor)"),
        ] = None,
        d3_version: Annotated[str, typer.Option("--d3-version")] = D3_VERSION,
        d3_sankey_version: Annotated[str, typer.Option("--d3-sankey-version")] = D3_SANKEY_VERSION,
    ):
        """Download d3.min.js and d3-sankey.min.js so documents embed them."""
        target = dest or vendor_directory()
        try:
            written = download_assets(target, d3_version=d3_version, d3_sankey_version=d3_sankey_version)
        except (httpx.HTTPError, OSError) as e:
            print(f"Error: download failed: {e}")
            raise typer.Exit(1) from e

        for path in written:
            print(f"Saved {path} ({format_size(path.stat().st_size)})")
