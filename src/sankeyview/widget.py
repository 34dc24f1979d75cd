"""Jupyter widget for Sankey diagrams."""

from __future__ import annotations

import html as html_module
from pathlib import Path

from sankeyview.assets import LibrarySources
from sankeyview.colors import ColorScheme
from sankeyview.data import SankeyData
from sankeyview.html_generator import generate_sankey_html
from sankeyview.options import SankeyOptions


class SankeyWidget:
    """Notebook display of a generated document.

    The document is placed in an iframe ``srcdoc`` with explicit dimensions,
    since the drawing script sizes the diagram from the viewport.
    """

    def __init__(self, html_content: str, width: int, height: int):
        """Create a widget.

        Args:
            html_content: Complete HTML document for the diagram
            width: Widget width in pixels
            height: Widget height in pixels
        """
        self.html_content = html_content
        self.width = width
        self.height = height

    def _repr_html_(self) -> str:
        """Return HTML representation for Jupyter display."""
        escaped_html = html_module.escape(self.html_content, quote=True)
        return (
            f'<iframe srcdoc="{escaped_html}" '
            f'width="{self.width}" height="{self.height}" frameborder="0" '
            f'style="border: none; width: {self.width}px; max-width: 100%; '
            f'height: {self.height}px; display: block; background: transparent;" '
            f'sandbox="allow-scripts">'
            f"</iframe>"
        )


def visualize(
    data: SankeyData,
    options: SankeyOptions | None = None,
    *,
    color_scheme: ColorScheme | str = ColorScheme.LIGHT,
    width: int = 800,
    height: int = 500,
    library: LibrarySources | None = None,
    filepath: str | None = None,
) -> SankeyWidget | None:
    """Render ``data`` for a notebook, or save it as an HTML file.

    Args:
        data: Nodes and links to draw
        options: Appearance (default: ``SankeyOptions()``)
        color_scheme: "light" or "dark" (default: "light")
        width: Widget width in pixels (minimum 200)
        height: Widget height in pixels (minimum 150)
        library: Where the page loads d3/d3-sankey from (default: auto)
        filepath: Path to save HTML file (default: None, display in notebook)

    Returns:
        SankeyWidget if filepath is None, otherwise None (saves to file)

    Example:
        >>> data = SankeyData.from_dict({
        ...     "nodes": [{"id": "a"}, {"id": "b"}],
        ...     "links": [{"source": "a", "target": "b", "value": 3}],
        ... })
        >>> widget = visualize(data, color_scheme="dark")  # Display in notebook
        >>> visualize(data, filepath="flows.html")  # Save to HTML file
    """
    html_content = generate_sankey_html(data, options, color_scheme, library=library)

    if filepath is not None:
        if not filepath.lower().endswith(".html"):
            filepath = filepath + ".html"
        Path(filepath).write_text(html_content, encoding="utf-8")
        return None

    return SankeyWidget(html_content, max(200, width), max(150, height))
