"""Render options for the Sankey drawing script.

``SankeyOptions`` is immutable: every change produces a new value through
``replace``. Colors are light/dark pairs resolved at render time.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sankeyview.colors import ColorPair
from sankeyview.exceptions import InvalidOptionError


class NodeAlignment(Enum):
    """Horizontal node alignment, one per d3-sankey alignment function."""

    JUSTIFY = "Justify"
    LEFT = "Left"
    RIGHT = "Right"
    CENTER = "Center"

    @property
    def d3_function(self) -> str:
        return f"d3.sankey{self.value}"

    @classmethod
    def coerce(cls, value: NodeAlignment | str) -> NodeAlignment:
        if isinstance(value, NodeAlignment):
            return value
        if isinstance(value, str):
            for member in cls:
                if value.strip().lower() in (member.value.lower(), member.name.lower()):
                    return member
        raise InvalidOptionError(
            "node_alignment", value, f"expected one of {[m.name.lower() for m in cls]}"
        )


class LinkColorMode(Enum):
    """How link ribbons are colored. ``None`` (no mode) uses link colors."""

    SOURCE = "source"
    TARGET = "target"
    SOURCE_TARGET = "source-target"

    @classmethod
    def coerce(cls, value: LinkColorMode | str | None) -> LinkColorMode | None:
        if value is None or isinstance(value, LinkColorMode):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("_", "-")
            if normalized in ("", "none"):
                return None
            try:
                return cls(normalized)
            except ValueError:
                pass
        raise InvalidOptionError(
            "link_color_mode", value, f"expected None or one of {[m.value for m in cls]}"
        )


_NUMERIC_FIELDS = ("node_width", "node_padding", "label_padding", "label_font_size")
_OPACITY_FIELDS = ("node_opacity", "link_opacity", "label_opacity")
_COLOR_FIELDS = ("node_default_color", "link_default_color", "label_color")


@dataclass(frozen=True)
class SankeyOptions:
    """Appearance of a rendered diagram.

    Attributes:
        node_alignment: Column assignment strategy for nodes
        node_width: Width of node rectangles in pixels
        node_padding: Vertical gap between nodes in a column
        node_default_color: Fill/stroke for nodes without their own color
        node_opacity: Opacity of node fill and stroke
        link_default_color: Stroke for links without their own color
        link_opacity: Stroke opacity of link ribbons
        link_color_mode: Source/target/gradient coloring, or None
        label_padding: Gap between a node and its label
        label_color: Label text color
        label_opacity: Label opacity
        label_font_size: Label size in pixels
        label_font_family: CSS font-family for labels
    """

    node_alignment: NodeAlignment = NodeAlignment.JUSTIFY
    node_width: float = 24.0
    node_padding: float = 8.0
    node_default_color: ColorPair = field(default_factory=lambda: ColorPair("#4f46e5", "#818cf8"))
    node_opacity: float = 1.0
    link_default_color: ColorPair = field(default_factory=lambda: ColorPair("#94a3b8", "#64748b"))
    link_opacity: float = 0.5
    link_color_mode: LinkColorMode | None = None
    label_padding: float = 6.0
    label_color: ColorPair = field(default_factory=lambda: ColorPair("#0f172a", "#f1f5f9"))
    label_opacity: float = 1.0
    label_font_size: float = 12.0
    label_font_family: str = "system-ui, -apple-system, sans-serif"

    def __post_init__(self) -> None:
        object.__setattr__(self, "node_alignment", NodeAlignment.coerce(self.node_alignment))
        object.__setattr__(self, "link_color_mode", LinkColorMode.coerce(self.link_color_mode))
        for name in _COLOR_FIELDS:
            object.__setattr__(self, name, ColorPair.coerce(getattr(self, name)))
        for name in _NUMERIC_FIELDS:
            value = _as_number(name, getattr(self, name))
            if value < 0:
                raise InvalidOptionError(name, value, "must be >= 0")
            object.__setattr__(self, name, value)
        for name in _OPACITY_FIELDS:
            value = _as_number(name, getattr(self, name))
            if not 0.0 <= value <= 1.0:
                raise InvalidOptionError(name, value, "must be between 0 and 1")
            object.__setattr__(self, name, value)
        if not isinstance(self.label_font_family, str) or not self.label_font_family.strip():
            raise InvalidOptionError("label_font_family", self.label_font_family, "must be a non-empty string")

    def replace(self, **changes: Any) -> SankeyOptions:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> SankeyOptions:
        """Build options from a config table, e.g. ``[tool.sankeyview.options]``.

        Keys may use dashes or underscores. Unknown keys raise InvalidOptionError.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.replace("-", "_")
            if name not in known:
                raise InvalidOptionError(key, value, "unknown option")
            kwargs[name] = value
        return cls(**kwargs)


def _as_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionError(name, value, "must be a number")
    return float(value)
