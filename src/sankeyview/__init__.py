"""sankeyview - Sankey flow diagrams in embedded web surfaces, powered by d3-sankey."""

from sankeyview.assets import LibrarySources
from sankeyview.bridge import (
    CHANNEL_NAME,
    BridgeState,
    BridgeTransport,
    CallbackTapHandler,
    NodeTapHandler,
    ScriptMessage,
    TapMessageReceiver,
    tap_listener_script,
)
from sankeyview.colors import ColorPair, ColorScheme
from sankeyview.data import SankeyData, SankeyLink, SankeyNode
from sankeyview.exceptions import (
    InvalidColorError,
    InvalidOptionError,
    MissingAssetsError,
    SankeyDataError,
)
from sankeyview.html_generator import generate_sankey_html
from sankeyview.options import LinkColorMode, NodeAlignment, SankeyOptions
from sankeyview.resolve import Gradient, LinkPaint, RenderPlan, build_render_plan
from sankeyview.surface import LocalWebSurface, WebSurface
from sankeyview.view import SankeyView
from sankeyview.widget import SankeyWidget, visualize

__all__ = [
    # Data and options
    "ColorPair",
    "ColorScheme",
    "LinkColorMode",
    "NodeAlignment",
    "SankeyData",
    "SankeyLink",
    "SankeyNode",
    "SankeyOptions",
    # Rendering
    "Gradient",
    "LibrarySources",
    "LinkPaint",
    "RenderPlan",
    "build_render_plan",
    "generate_sankey_html",
    "SankeyView",
    "SankeyWidget",
    "visualize",
    # Bridge and surfaces
    "CHANNEL_NAME",
    "BridgeState",
    "BridgeTransport",
    "CallbackTapHandler",
    "LocalWebSurface",
    "NodeTapHandler",
    "ScriptMessage",
    "TapMessageReceiver",
    "WebSurface",
    "tap_listener_script",
    # Errors
    "InvalidColorError",
    "InvalidOptionError",
    "MissingAssetsError",
    "SankeyDataError",
]
