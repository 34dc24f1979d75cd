"""Diagram data: nodes, links, and the JSON shape the page consumes.

The wire format matches what the drawing script reads::

    {
      "nodes": [{"id": "a", "label": "Salary", "hex": {"light": "#..", "dark": "#.."}}],
      "links": [{"source": "a", "target": "b", "value": 10, "hex": {...}}]
    }

Link endpoints are not validated when data is built or rendered; d3-sankey
reports unknown ids inside the page. ``SankeyData.find_issues`` runs the same
checks on demand.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import networkx as nx

from sankeyview.colors import ColorPair
from sankeyview.exceptions import InvalidColorError, SankeyDataError


@dataclass(frozen=True)
class SankeyNode:
    """An entity in the flow graph.

    Attributes:
        id: Identifier links refer to
        label: Display text (falls back to ``id``)
        name: Secondary identifier, posted on tap when ``id`` is empty
        color: Optional per-node color overriding the configured default
    """

    id: str
    label: str | None = None
    name: str | None = None
    color: ColorPair | None = None

    def __post_init__(self) -> None:
        if self.color is not None:
            object.__setattr__(self, "color", ColorPair.coerce(self.color))

    @property
    def display_label(self) -> str:
        return self.label or self.id

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id}
        if self.label is not None:
            result["label"] = self.label
        if self.name is not None:
            result["name"] = self.name
        if self.color is not None:
            result["hex"] = self.color.to_dict()
        return result


@dataclass(frozen=True)
class SankeyLink:
    """A directed flow between two nodes; ribbon width follows ``value``."""

    source: str
    target: str
    value: float
    color: ColorPair | None = None

    def __post_init__(self) -> None:
        if self.color is not None:
            object.__setattr__(self, "color", ColorPair.coerce(self.color))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "source": self.source,
            "target": self.target,
            "value": self.value,
        }
        if self.color is not None:
            result["hex"] = self.color.to_dict()
        return result


@dataclass(frozen=True)
class SankeyData:
    """Nodes and links of one diagram."""

    nodes: tuple[SankeyNode, ...] = field(default_factory=tuple)
    links: tuple[SankeyLink, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))

    @property
    def nodes_by_id(self) -> dict[str, SankeyNode]:
        """Node lookup. With duplicate ids the last node wins."""
        return {n.id: n for n in self.nodes}

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SankeyData:
        """Parse the wire format. ``color`` is accepted as an alias for ``hex``.

        Raises:
            SankeyDataError: If required fields are missing or malformed.
        """
        if not isinstance(payload, Mapping):
            raise SankeyDataError(f"expected an object with 'nodes' and 'links', got {type(payload).__name__}")

        raw_nodes = payload.get("nodes")
        raw_links = payload.get("links")
        if not isinstance(raw_nodes, list):
            raise SankeyDataError("must be a list", path="nodes")
        if not isinstance(raw_links, list):
            raise SankeyDataError("must be a list", path="links")

        nodes = [_parse_node(raw, f"nodes[{i}]") for i, raw in enumerate(raw_nodes)]
        links = [_parse_link(raw, f"links[{i}]") for i, raw in enumerate(raw_links)]
        return cls(nodes=tuple(nodes), links=tuple(links))

    @classmethod
    def from_json(cls, source: str | Path) -> SankeyData:
        """Load from a JSON file path or a JSON string."""
        if isinstance(source, Path) or (not source.lstrip().startswith(("{", "[")) and Path(source).is_file()):
            text = Path(source).read_text(encoding="utf-8")
        else:
            text = source
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise SankeyDataError(f"invalid JSON: {e}") from e
        return cls.from_dict(payload)

    @classmethod
    def from_networkx(
        cls,
        graph: nx.DiGraph,
        *,
        weight: str = "value",
        label: str = "label",
        color: str = "color",
    ) -> SankeyData:
        """Build data from a weighted directed graph.

        Node ids are ``str(node)``. Edge weights are read from the ``weight``
        attribute (default 1). Node and edge colors are read from ``color``
        and may be anything ``ColorPair.coerce`` accepts.
        """
        if not graph.is_directed():
            raise SankeyDataError("Sankey diagrams need a directed graph")

        nodes = []
        for node_id, attrs in graph.nodes(data=True):
            nodes.append(
                SankeyNode(
                    id=str(node_id),
                    label=attrs.get(label),
                    color=attrs.get(color),
                )
            )
        links = []
        for src, dst, attrs in graph.edges(data=True):
            links.append(
                SankeyLink(
                    source=str(src),
                    target=str(dst),
                    value=attrs.get(weight, 1),
                    color=attrs.get(color),
                )
            )
        return cls(nodes=tuple(nodes), links=tuple(links))

    def to_networkx(self) -> nx.DiGraph:
        """Flows as a DiGraph; parallel links are summed into one edge."""
        graph = nx.DiGraph()
        for n in self.nodes:
            graph.add_node(n.id)
        for link in self.links:
            if graph.has_edge(link.source, link.target):
                graph[link.source][link.target]["value"] += link.value
            else:
                graph.add_edge(link.source, link.target, value=link.value)
        return graph

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def find_issues(self) -> list[str]:
        """Report problems d3-sankey would trip over. Never raises.

        Checks duplicate node ids, links to unknown nodes, self-loops,
        non-positive values, and cycles.
        """
        issues: list[str] = []

        counts = Counter(n.id for n in self.nodes)
        for node_id, count in sorted(counts.items()):
            if count > 1:
                issues.append(f"Duplicate node id '{node_id}' ({count} nodes)")

        known = set(counts)
        for i, link in enumerate(self.links):
            for end in ("source", "target"):
                ref = getattr(link, end)
                if ref not in known:
                    issues.append(f"links[{i}] {end} '{ref}' is not a known node")
            if link.source == link.target:
                issues.append(f"links[{i}] is a self-loop on '{link.source}'")
            if link.value <= 0:
                issues.append(f"links[{i}] has non-positive value {link.value}")

        graph = self.to_networkx()
        graph.remove_edges_from(list(nx.selfloop_edges(graph)))
        for cycle in nx.simple_cycles(graph):
            issues.append("Circular flow: " + " -> ".join([*cycle, cycle[0]]))

        return issues


# ----------------------------------------------------------------------
# Parsing helpers
# ----------------------------------------------------------------------


def _parse_color(raw: Mapping[str, Any], path: str) -> ColorPair | None:
    value = raw.get("hex", raw.get("color"))
    if value is None:
        return None
    try:
        return ColorPair.coerce(value)
    except InvalidColorError as e:
        raise SankeyDataError(e.message, path=f"{path}.hex") from e


def _parse_node(raw: Any, path: str) -> SankeyNode:
    if not isinstance(raw, Mapping):
        raise SankeyDataError("must be an object", path=path)
    node_id = raw.get("id")
    if node_id is None or node_id == "":
        raise SankeyDataError("missing 'id'", path=path)
    return SankeyNode(
        id=str(node_id),
        label=_optional_str(raw.get("label")),
        name=_optional_str(raw.get("name")),
        color=_parse_color(raw, path),
    )


def _parse_link(raw: Any, path: str) -> SankeyLink:
    if not isinstance(raw, Mapping):
        raise SankeyDataError("must be an object", path=path)
    for key in ("source", "target"):
        if raw.get(key) is None:
            raise SankeyDataError(f"missing '{key}'", path=path)
    value = raw.get("value")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SankeyDataError(f"'value' must be a number, got {value!r}", path=path)
    return SankeyLink(
        source=str(raw["source"]),
        target=str(raw["target"]),
        value=value,
        color=_parse_color(raw, path),
    )


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)
