"""Tests for the HTML document generator."""

import json
import re

import pytest

from sankeyview import (
    BridgeTransport,
    LibrarySources,
    SankeyData,
    SankeyNode,
    SankeyOptions,
    generate_sankey_html,
    tap_listener_script,
)


def _embedded_json(html, element_id):
    match = re.search(rf'<script id="{element_id}" type="application/json">(.*?)</script>', html, re.S)
    assert match, f"no #{element_id} element"
    return json.loads(match.group(1))


class TestGenerateHtml:
    def test_document_structure(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)

        assert html.startswith("<!DOCTYPE html>")
        assert 'charset="UTF-8"' in html
        assert '<meta name="viewport" content="width=device-width, initial-scale=1.0">' in html
        assert "<svg></svg>" in html
        assert html.rstrip().endswith("</html>")

    def test_libraries_come_before_drawing_script(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)
        assert html.index("/* d3 stub */") < html.index("/* d3-sankey stub */") < html.index("d3.sankey()")

    def test_cdn_library_tags(self, budget_data):
        html = generate_sankey_html(budget_data, library=LibrarySources.cdn())
        assert '<script src="https://cdn.jsdelivr.net/npm/d3@' in html
        assert '<script src="https://cdn.jsdelivr.net/npm/d3-sankey@' in html

    def test_embeds_data(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)
        assert _embedded_json(html, "sankey-data") == budget_data.to_dict()

    def test_embeds_options(self, budget_data, stub_library):
        options = SankeyOptions(
            node_alignment="right",
            node_width=31,
            node_padding=17,
            label_font_family="Menlo",
            label_font_size=15,
            link_opacity=0.25,
        )
        html = generate_sankey_html(budget_data, options, library=stub_library)
        plan = _embedded_json(html, "sankey-plan")

        assert ".nodeAlign(d3.sankeyRight)" in html
        assert plan["nodeWidth"] == 31
        assert plan["nodePadding"] == 17
        assert plan["labelFontFamily"] == "Menlo"
        assert plan["labelFontSize"] == 15
        assert plan["linkOpacity"] == 0.25

    def test_deterministic(self, budget_data, stub_library):
        options = SankeyOptions(link_color_mode="source-target")
        first = generate_sankey_html(budget_data, options, "dark", library=stub_library)
        second = generate_sankey_html(budget_data, options, "dark", library=stub_library)
        assert first == second

    def test_dispatches_rebuilt_event_and_redraws_on_resize(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)
        assert "dispatchEvent(new Event('sankeyRebuilt'))" in html
        assert "window.addEventListener('resize', draw)" in html

    def test_label_side_follows_midpoint(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)
        assert "d.x0 < width / 2 ? 'start' : 'end'" in html
        assert ".text(d => d.label || d.id)" in html

    def test_script_close_in_label_is_escaped(self, stub_library):
        data = SankeyData(nodes=(SankeyNode("x", label="</script><script>alert(1)</script>"),))
        html = generate_sankey_html(data, library=stub_library)

        assert "</script><script>alert(1)" not in html
        assert _embedded_json(html, "sankey-data")["nodes"][0]["label"].startswith("</script>")

    def test_comment_opener_in_label_keeps_elements_apart(self, stub_library):
        label = "<!--<script> & more -->"
        data = SankeyData(nodes=(SankeyNode("x", label=label),))
        html = generate_sankey_html(data, library=stub_library)

        assert "<!--" not in html
        assert "\\u003c!--\\u003cscript\\u003e \\u0026 more --\\u003e" in html
        assert _embedded_json(html, "sankey-data")["nodes"][0]["label"] == label
        assert _embedded_json(html, "sankey-plan")["nodeWidth"] == 24.0

    def test_placeholder_text_in_data_is_left_alone(self, stub_library):
        data = SankeyData(nodes=(SankeyNode("__TAP_JS__", label="__PLAN_JSON__"),))
        html = generate_sankey_html(data, library=stub_library)
        node = _embedded_json(html, "sankey-data")["nodes"][0]
        assert node == {"id": "__TAP_JS__", "label": "__PLAN_JSON__"}


class TestSchemeOutput:
    def test_scheme_changes_only_color_fields(self, budget_data, stub_library):
        options = SankeyOptions(link_color_mode="source-target")
        light = generate_sankey_html(budget_data, options, "light", library=stub_library)
        dark = generate_sankey_html(budget_data, options, "dark", library=stub_library)

        light_plan = _embedded_json(light, "sankey-plan")
        dark_plan = _embedded_json(dark, "sankey-plan")
        color_keys = {"isDark", "labelColor", "nodeColors", "linkPaints"}
        for key in light_plan.keys() - color_keys:
            assert light_plan[key] == dark_plan[key], key
        assert light_plan["nodeColors"] != dark_plan["nodeColors"]

        strip = lambda h: re.sub(r'<script id="sankey-plan".*?</script>', "", h, flags=re.S)  # noqa: E731
        assert strip(light) == strip(dark)


class TestTapScript:
    def test_no_click_handling_without_tap_script(self, budget_data, stub_library):
        html = generate_sankey_html(budget_data, library=stub_library)
        assert "'click'" not in html
        assert "sankeyNodeTapped" not in html
        assert "messageHandlers" not in html

    def test_tap_script_appended_last(self, budget_data, stub_library):
        script = tap_listener_script(BridgeTransport.WEBKIT)
        html = generate_sankey_html(budget_data, library=stub_library, tap_script=script)

        assert script in html
        assert html.index("d3.sankey()") < html.index(script)

    @pytest.mark.parametrize("scheme", ["light", "dark"])
    def test_tap_script_is_scheme_independent(self, budget_data, stub_library, scheme):
        script = tap_listener_script(BridgeTransport.HTTP)
        html = generate_sankey_html(budget_data, color_scheme=scheme, library=stub_library, tap_script=script)
        assert html.count(script) == 1
