"""sankeyview CLI: render, serve and inspect Sankey diagram data.

Entry point for the `sankeyview` command. Requires ``pip install sankeyview[cli]``.

Commands:
    render      Write diagram JSON to a standalone HTML file
    serve       Serve a diagram locally and print tapped node ids
    inspect     Summarize diagram JSON and list problems
    vendor      Download the pinned d3 builds for offline documents
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install sankeyview[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from sankeyview.cli import render_cmd, serve_cmd, vendor_cmd

    app = typer.Typer(
        name="sankeyview",
        help="Render Sankey flow diagrams with d3-sankey.",
        no_args_is_help=True,
    )
    render_cmd.register_commands(app)
    serve_cmd.register_commands(app)
    vendor_cmd.register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
