"""`sankeyview serve`: show a diagram in the browser and log node taps."""

from __future__ import annotations

import threading
import time
import webbrowser
from pathlib import Path
from typing import Annotated

import typer

from sankeyview.bridge import NodeTapHandler
from sankeyview.cli._config import load_config
from sankeyview.cli.render_cmd import (
    AlignOption,
    AssetDirOption,
    DataArgument,
    LibraryOption,
    LinkModeOption,
    NodeWidthOption,
    SchemeOption,
    build_options,
    load_data,
    resolve_library,
    resolve_scheme,
)
from sankeyview.surface import LocalWebSurface
from sankeyview.view import SankeyView


class ConsoleTapHandler(NodeTapHandler):
    """Print each tapped node id to a rich console.

    Taps arrive on the surface's request threads, so the counter is locked.
    """

    def __init__(self, console=None) -> None:
        from rich.console import Console

        self.console = console or Console()
        self.count = 0
        self._lock = threading.Lock()

    def on_node_tap(self, node_id: str) -> None:
        from rich.markup import escape

        with self._lock:
            self.count += 1
            number = self.count
        self.console.print(f"[dim]#{number}[/dim] tapped [bold cyan]{escape(node_id)}[/bold cyan]")


def register_commands(app: typer.Typer) -> None:
    """Register `serve` as a top-level command on the app."""

    @app.command("serve")
    def serve_cmd(
        data_path: DataArgument,
        host: Annotated[str | None, typer.Option("--host", help="Interface to bind")] = None,
        port: Annotated[int | None, typer.Option("--port", help="Port (0 picks a free one)")] = None,
        scheme: SchemeOption = None,
        library: LibraryOption = None,
        asset_dir: AssetDirOption = None,
        align: AlignOption = None,
        node_width: NodeWidthOption = None,
        link_color_mode: LinkModeOption = None,
        no_open: Annotated[bool, typer.Option("--no-open", help="Do not open a browser")] = False,
    ):
        """Serve the diagram locally and print tapped node ids until Ctrl+C."""
        config = load_config()
        data = load_data(data_path)
        options = build_options(
            config,
            node_alignment=align,
            node_width=node_width,
            link_color_mode=link_color_mode,
        )
        handler = ConsoleTapHandler()
        view = (
            SankeyView(data, options)
            .library(resolve_library(config, library, asset_dir))
            .on_node_tap(handler)
        )

        surface = LocalWebSurface(host or config.host, config.port if port is None else port)
        with surface:
            view.make_surface(surface, resolve_scheme(config, scheme))
            handler.console.print(f"Serving [bold]{Path(data_path).name}[/bold] at {surface.url}")
            handler.console.print("Click nodes to see their ids. Press Ctrl+C to stop.")
            if not no_open:
                webbrowser.open(surface.url)
            try:
                while True:
                    time.sleep(0.5)
            except KeyboardInterrupt:
                handler.console.print(f"\nStopped after {handler.count} tap(s).")
