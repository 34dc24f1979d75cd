"""Tests for diagram data parsing, conversion and diagnostics."""

import json

import networkx as nx
import pytest

from sankeyview import ColorPair, SankeyData, SankeyDataError, SankeyLink, SankeyNode

from conftest import BUDGET_PAYLOAD


class TestFromDict:
    def test_parses_nodes_and_links(self, budget_data):
        assert [n.id for n in budget_data.nodes] == ["salary", "bonus", "budget", "rent", "savings"]
        assert len(budget_data.links) == 4
        assert budget_data.nodes[0].color == ColorPair("#16a34a", "#4ade80")
        assert budget_data.nodes[1].color is None
        assert budget_data.links[1].color == ColorPair("#eab308", "#facc15")

    def test_round_trips_wire_format(self, budget_data):
        assert budget_data.to_dict() == BUDGET_PAYLOAD

    def test_color_alias(self):
        data = SankeyData.from_dict(
            {"nodes": [{"id": "a", "color": "#fff"}], "links": []}
        )
        assert data.nodes[0].color == ColorPair.of("#ffffff")

    def test_unknown_endpoints_are_accepted(self):
        data = SankeyData.from_dict(
            {"nodes": [{"id": "a"}], "links": [{"source": "a", "target": "ghost", "value": 1}]}
        )
        assert data.links[0].target == "ghost"

    @pytest.mark.parametrize(
        "payload, path",
        [
            ({"links": []}, "nodes"),
            ({"nodes": [], "links": {}}, "links"),
            ({"nodes": [{"label": "x"}], "links": []}, "nodes[0]"),
            ({"nodes": [], "links": [{"target": "b", "value": 1}]}, "links[0]"),
            ({"nodes": [], "links": [{"source": "a", "target": "b", "value": "3"}]}, "links[0]"),
            ({"nodes": [], "links": [{"source": "a", "target": "b", "value": True}]}, "links[0]"),
            ({"nodes": [{"id": "a", "hex": "blue"}], "links": []}, "nodes[0].hex"),
        ],
    )
    def test_malformed_payloads(self, payload, path):
        with pytest.raises(SankeyDataError) as exc_info:
            SankeyData.from_dict(payload)
        assert exc_info.value.path == path
        assert exc_info.value.message.startswith(path)

    def test_non_mapping_payload(self):
        with pytest.raises(SankeyDataError):
            SankeyData.from_dict([1, 2, 3])


class TestFromJson:
    def test_from_string(self):
        data = SankeyData.from_json(json.dumps(BUDGET_PAYLOAD))
        assert len(data.nodes) == 5

    def test_from_path(self, tmp_path):
        path = tmp_path / "flows.json"
        path.write_text(json.dumps(BUDGET_PAYLOAD))
        assert SankeyData.from_json(path) == SankeyData.from_json(str(path))

    def test_invalid_json(self):
        with pytest.raises(SankeyDataError, match="invalid JSON"):
            SankeyData.from_json("{not json")


class TestNetworkx:
    def test_from_networkx(self):
        graph = nx.DiGraph()
        graph.add_node("a", label="Alpha", color=("#111111", "#eeeeee"))
        graph.add_node("b")
        graph.add_edge("a", "b", value=7, color="#abcdef")
        graph.add_edge("b", 3)

        data = SankeyData.from_networkx(graph)

        assert data.nodes_by_id["a"].label == "Alpha"
        assert data.nodes_by_id["a"].color == ColorPair("#111111", "#eeeeee")
        assert data.nodes_by_id["3"].label is None
        assert data.links[0] == SankeyLink("a", "b", 7, ColorPair.of("#abcdef"))
        assert data.links[1].value == 1

    def test_undirected_graph_rejected(self):
        with pytest.raises(SankeyDataError):
            SankeyData.from_networkx(nx.Graph([("a", "b")]))

    def test_to_networkx_sums_parallel_links(self):
        data = SankeyData(
            nodes=(SankeyNode("a"), SankeyNode("b")),
            links=(SankeyLink("a", "b", 2), SankeyLink("a", "b", 3)),
        )
        graph = data.to_networkx()
        assert graph["a"]["b"]["value"] == 5


class TestFindIssues:
    def test_clean_data(self, budget_data):
        assert budget_data.find_issues() == []

    def test_reports_each_problem(self):
        data = SankeyData(
            nodes=(SankeyNode("a"), SankeyNode("a"), SankeyNode("b"), SankeyNode("c")),
            links=(
                SankeyLink("a", "ghost", 1),
                SankeyLink("b", "b", 1),
                SankeyLink("a", "b", 0),
                SankeyLink("b", "c", 1),
                SankeyLink("c", "a", 1),
            ),
        )
        issues = data.find_issues()

        assert "Duplicate node id 'a' (2 nodes)" in issues
        assert "links[0] target 'ghost' is not a known node" in issues
        assert "links[1] is a self-loop on 'b'" in issues
        assert "links[2] has non-positive value 0" in issues
        assert any(issue.startswith("Circular flow:") for issue in issues)

    def test_self_loop_is_not_reported_as_cycle(self):
        data = SankeyData(nodes=(SankeyNode("a"),), links=(SankeyLink("a", "a", 1),))
        assert not any(i.startswith("Circular flow") for i in data.find_issues())


class TestSankeyNode:
    def test_display_label_falls_back_to_id(self):
        assert SankeyNode("x").display_label == "x"
        assert SankeyNode("x", label="Ex").display_label == "Ex"

    def test_color_coerced(self):
        assert SankeyNode("x", color="#000").color == ColorPair.of("#000000")
