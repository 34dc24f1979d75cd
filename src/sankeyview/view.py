"""SankeyView: an immutable diagram value plus its builder-style modifiers.

Every modifier returns a new view with exactly one field changed::

    view = (
        SankeyView(data)
        .node_width(18)
        .link_color_mode("source-target")
        .on_node_tap(lambda node_id: print("tapped", node_id))
    )

Mounting on a surface (``make_surface``) registers the tap channel, if a
handler is set, and loads the document. Later ``update_surface`` calls only
regenerate and reload the document.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sankeyview.assets import LibrarySources
from sankeyview.bridge import (
    CHANNEL_NAME,
    BridgeState,
    BridgeTransport,
    NodeTapHandler,
    TapMessageReceiver,
    as_tap_handler,
    tap_listener_script,
)
from sankeyview.colors import ColorLike, ColorScheme
from sankeyview.data import SankeyData
from sankeyview.html_generator import generate_sankey_html
from sankeyview.options import LinkColorMode, NodeAlignment, SankeyOptions

if TYPE_CHECKING:
    from sankeyview.surface import WebSurface
    from sankeyview.widget import SankeyWidget

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SankeyView:
    """A Sankey diagram ready to be rendered into a web surface.

    Attributes:
        data: Nodes and links to draw
        options: Appearance, changed through the modifier methods
        tap_handler: Receives tapped node ids; None leaves the bridge closed
        library_sources: Where the page loads d3/d3-sankey from (None = auto)
    """

    data: SankeyData
    options: SankeyOptions = field(default_factory=SankeyOptions)
    tap_handler: NodeTapHandler | None = None
    library_sources: LibrarySources | None = None

    def _with_option(self, **changes: Any) -> SankeyView:
        return dataclasses.replace(self, options=self.options.replace(**changes))

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def node_alignment(self, value: NodeAlignment | str) -> SankeyView:
        return self._with_option(node_alignment=value)

    def node_width(self, value: float) -> SankeyView:
        return self._with_option(node_width=value)

    def node_padding(self, value: float) -> SankeyView:
        return self._with_option(node_padding=value)

    def node_default_color(self, color: ColorLike) -> SankeyView:
        return self._with_option(node_default_color=color)

    def node_opacity(self, value: float) -> SankeyView:
        return self._with_option(node_opacity=value)

    def link_default_color(self, color: ColorLike) -> SankeyView:
        return self._with_option(link_default_color=color)

    def link_opacity(self, value: float) -> SankeyView:
        return self._with_option(link_opacity=value)

    def link_color_mode(self, value: LinkColorMode | str | None) -> SankeyView:
        return self._with_option(link_color_mode=value)

    def label_padding(self, value: float) -> SankeyView:
        return self._with_option(label_padding=value)

    def label_color(self, color: ColorLike) -> SankeyView:
        return self._with_option(label_color=color)

    def label_opacity(self, value: float) -> SankeyView:
        return self._with_option(label_opacity=value)

    def label_font_size(self, value: float) -> SankeyView:
        return self._with_option(label_font_size=value)

    def label_font_family(self, value: str) -> SankeyView:
        return self._with_option(label_font_family=value)

    def on_node_tap(self, handler: NodeTapHandler | Callable[[str], Any]) -> SankeyView:
        """Register the tap handler (a NodeTapHandler or a one-argument callable)."""
        return dataclasses.replace(self, tap_handler=as_tap_handler(handler))

    def library(self, sources: LibrarySources) -> SankeyView:
        return dataclasses.replace(self, library_sources=sources)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @property
    def bridge_state(self) -> BridgeState:
        return BridgeState.UNREGISTERED if self.tap_handler is None else BridgeState.REGISTERED

    def make_coordinator(self) -> TapMessageReceiver | None:
        """Receiver for the tap channel, or None when no handler is set."""
        if self.tap_handler is None:
            return None
        return TapMessageReceiver(self.tap_handler)

    def render_html(
        self,
        color_scheme: ColorScheme | str = ColorScheme.LIGHT,
        transport: BridgeTransport | None = None,
    ) -> str:
        """Generate the full document.

        The tap script is included only when a handler is set and the caller
        says how the page reaches its host (``transport``).
        """
        tap_transport = transport if self.tap_handler is not None else None
        return self._document(color_scheme, tap_transport)

    def _document(self, color_scheme: ColorScheme | str, tap_transport: BridgeTransport | None) -> str:
        tap_script = None
        if tap_transport is not None:
            tap_script = tap_listener_script(tap_transport, CHANNEL_NAME)
        return generate_sankey_html(
            self.data,
            self.options,
            color_scheme,
            library=self.library_sources,
            tap_script=tap_script,
        )

    def make_surface(
        self,
        surface: WebSurface,
        color_scheme: ColorScheme | str = ColorScheme.LIGHT,
    ) -> TapMessageReceiver | None:
        """Mount on ``surface``: open the tap channel if needed, then load.

        Returns the receiver registered on the surface, if any.
        """
        receiver = self.make_coordinator()
        if receiver is not None:
            surface.add_message_handler(CHANNEL_NAME, receiver)
            logger.debug("Registered %r channel on %r", CHANNEL_NAME, surface)
        self._load(surface, color_scheme)
        return receiver

    def update_surface(
        self,
        surface: WebSurface,
        color_scheme: ColorScheme | str = ColorScheme.LIGHT,
    ) -> None:
        """Regenerate and reload. The channel set up by ``make_surface`` is left as is.

        The click script follows the surface's channel, not this view's
        handler: it is injected exactly when a receiver was registered at
        mount, and that receiver keeps the handler it was mounted with.
        """
        self._load(surface, color_scheme)

    def _load(self, surface: WebSurface, color_scheme: ColorScheme | str) -> None:
        registered = surface.handler_for(CHANNEL_NAME) is not None
        surface.load_html(self._document(color_scheme, surface.transport if registered else None))

    def save(self, filepath: str | Path, color_scheme: ColorScheme | str = ColorScheme.LIGHT) -> Path:
        """Write the document to ``filepath`` (``.html`` is appended if missing)."""
        path = Path(filepath)
        if path.suffix.lower() != ".html":
            path = path.with_name(path.name + ".html")
        path.write_text(self.render_html(color_scheme), encoding="utf-8")
        return path

    def widget(
        self,
        color_scheme: ColorScheme | str = ColorScheme.LIGHT,
        width: int = 800,
        height: int = 500,
    ) -> SankeyWidget:
        from sankeyview.widget import SankeyWidget

        return SankeyWidget(self.render_html(color_scheme), width, height)

    def _repr_html_(self) -> str:
        return self.widget()._repr_html_()
