"""Color resolution for one render.

Given data, options and the active scheme, pick the concrete color of every
node and the paint of every link. The drawing script only applies what is
resolved here, so swapping the scheme touches nothing but color fields.

Link paint by mode:

* no mode       -> the link's own color, else the default link color
* source        -> resolved color of the source node
* target        -> resolved color of the target node
* source-target -> a two-stop gradient from source color to target color
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sankeyview.colors import ColorScheme
from sankeyview.data import SankeyData, SankeyLink, SankeyNode
from sankeyview.options import LinkColorMode, SankeyOptions


@dataclass(frozen=True)
class Gradient:
    """Two-stop linear gradient spanning source.x1 -> target.x0.

    The page creates one ``<linearGradient>`` per instance, with stops at
    0% (``start``) and 100% (``end``).
    """

    id: str
    start: str
    end: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "start": self.start, "end": self.end}


@dataclass(frozen=True)
class LinkPaint:
    """Either a solid color or a gradient reference; exactly one is set."""

    color: str | None = None
    gradient: Gradient | None = None

    @property
    def css(self) -> str:
        """Value for the ``stroke`` style."""
        if self.gradient is not None:
            return f"url(#{self.gradient.id})"
        return self.color or ""

    def to_dict(self) -> dict[str, Any]:
        if self.gradient is not None:
            return {"gradient": self.gradient.to_dict()}
        return {"color": self.color}


def gradient_id(index: int) -> str:
    return f"grad{index}"


def resolve_node_color(node: SankeyNode | None, options: SankeyOptions, scheme: ColorScheme) -> str:
    """The node's own color for the scheme, falling back to the default."""
    if node is not None and node.color is not None:
        return node.color.for_scheme(scheme)
    return options.node_default_color.for_scheme(scheme)


def resolve_link_paint(
    link: SankeyLink,
    index: int,
    nodes_by_id: dict[str, SankeyNode],
    options: SankeyOptions,
    scheme: ColorScheme,
) -> LinkPaint:
    mode = options.link_color_mode
    default_link = options.link_default_color.for_scheme(scheme)

    if mode is None:
        if link.color is not None:
            return LinkPaint(color=link.color.for_scheme(scheme))
        return LinkPaint(color=default_link)

    # Unknown endpoints fall back to the default node color; d3-sankey
    # rejects them in the page anyway.
    source_color = resolve_node_color(nodes_by_id.get(link.source), options, scheme)
    target_color = resolve_node_color(nodes_by_id.get(link.target), options, scheme)

    if mode is LinkColorMode.SOURCE:
        return LinkPaint(color=source_color)
    if mode is LinkColorMode.TARGET:
        return LinkPaint(color=target_color)
    if mode is LinkColorMode.SOURCE_TARGET:
        return LinkPaint(gradient=Gradient(gradient_id(index), source_color, target_color))
    return LinkPaint(color=default_link)


@dataclass(frozen=True)
class RenderPlan:
    """Everything the drawing script needs besides the raw data.

    Layout fields (alignment, node width/padding) and opacities are copied
    from the options; color fields are resolved for ``scheme``.
    """

    scheme: ColorScheme
    node_align: str
    node_width: float
    node_padding: float
    node_opacity: float
    link_opacity: float
    label_padding: float
    label_color: str
    label_opacity: float
    label_font_size: float
    label_font_family: str
    node_colors: tuple[str, ...]
    link_paints: tuple[LinkPaint, ...]

    @property
    def gradients(self) -> list[Gradient]:
        return [p.gradient for p in self.link_paints if p.gradient is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isDark": self.scheme.is_dark,
            "nodeWidth": self.node_width,
            "nodePadding": self.node_padding,
            "nodeOpacity": self.node_opacity,
            "linkOpacity": self.link_opacity,
            "labelPadding": self.label_padding,
            "labelColor": self.label_color,
            "labelOpacity": self.label_opacity,
            "labelFontSize": self.label_font_size,
            "labelFontFamily": self.label_font_family,
            "nodeColors": list(self.node_colors),
            "linkPaints": [p.to_dict() for p in self.link_paints],
        }


def build_render_plan(
    data: SankeyData,
    options: SankeyOptions,
    scheme: ColorScheme | str,
) -> RenderPlan:
    """Resolve every color in ``data`` for ``scheme``.

    ``node_colors`` and ``link_paints`` are index-aligned with
    ``data.nodes`` and ``data.links``.
    """
    scheme = ColorScheme.coerce(scheme)
    nodes_by_id = data.nodes_by_id

    return RenderPlan(
        scheme=scheme,
        node_align=options.node_alignment.d3_function,
        node_width=options.node_width,
        node_padding=options.node_padding,
        node_opacity=options.node_opacity,
        link_opacity=options.link_opacity,
        label_padding=options.label_padding,
        label_color=options.label_color.for_scheme(scheme),
        label_opacity=options.label_opacity,
        label_font_size=options.label_font_size,
        label_font_family=options.label_font_family,
        node_colors=tuple(resolve_node_color(n, options, scheme) for n in data.nodes),
        link_paints=tuple(
            resolve_link_paint(link, i, nodes_by_id, options, scheme)
            for i, link in enumerate(data.links)
        ),
    )
