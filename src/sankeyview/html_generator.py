import json
import logging
import re
from typing import Any, Optional, Union

from sankeyview.assets import LibrarySources
from sankeyview.bridge import REBUILT_EVENT
from sankeyview.colors import ColorScheme
from sankeyview.data import SankeyData
from sankeyview.options import SankeyOptions
from sankeyview.resolve import build_render_plan

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"__(?:DRAW_JS|TAP_JS|DATA_JSON|PLAN_JSON)__")


def _script_json(value: Any) -> str:
    """JSON safe to place inside a <script> element.

    ``<``, ``>`` and ``&`` become ``\\u`` escapes, so no text in the data can
    close the element or open a comment.
    """
    return (
        json.dumps(value, sort_keys=True)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def generate_sankey_html(
    data: SankeyData,
    options: Optional[SankeyOptions] = None,
    color_scheme: Union[ColorScheme, str] = ColorScheme.LIGHT,
    *,
    library: Optional[LibrarySources] = None,
    tap_script: Optional[str] = None,
) -> str:
    """Generate a complete HTML document drawing ``data`` with d3-sankey.

    The output depends only on the arguments, so equal inputs give equal
    documents. Every color is resolved for ``color_scheme`` before the page
    sees it. When ``tap_script`` is None the document contains no click
    handling at all.

    Args:
        data: Nodes and links to draw
        options: Appearance; defaults to ``SankeyOptions()``
        color_scheme: Which side of every ColorPair to use
        library: Where d3/d3-sankey come from; defaults to ``LibrarySources.auto()``
        tap_script: Bridge script from ``tap_listener_script``, appended last
    """
    options = options or SankeyOptions()
    library = library or LibrarySources.auto()
    plan = build_render_plan(data, options, color_scheme)

    logger.debug(
        "Generating sankey document: %d nodes, %d links, scheme=%s, tap=%s",
        len(data.nodes),
        len(data.links),
        plan.scheme.value,
        tap_script is not None,
    )

    html_head = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style> body { margin: 0 } svg { width: 100%; height: 100% } </style>
</head>"""

    # Drawing script. Runs inline so the diagram is drawn before
    # DOMContentLoaded, which is when the tap script hooks the node rects.
    draw_js = r"""
  <script>
    (function() {
    'use strict';
    const DATA = JSON.parse(document.getElementById('sankey-data').textContent);
    const PLAN = JSON.parse(document.getElementById('sankey-plan').textContent);
    const isDark = PLAN.isDark;
    const svg = d3.select('svg');

    function draw() {
      const width = window.innerWidth, height = window.innerHeight;
      svg.selectAll('*').remove();
      svg.attr('width', width).attr('height', height);

      const sankey = d3.sankey()
        .nodeId(d => d.id)
        .nodeWidth(PLAN.nodeWidth)
        .nodePadding(PLAN.nodePadding)
        .nodeAlign(__NODE_ALIGN__)
        .size([width, height]);

      // d3-sankey mutates its input; lay out copies carrying resolved paint.
      const {nodes, links} = sankey({
        nodes: DATA.nodes.map((d, i) => Object.assign({}, d, {color: PLAN.nodeColors[i]})),
        links: DATA.links.map((d, i) => Object.assign({}, d, {paint: PLAN.linkPaints[i]})),
      });

      const defs = svg.append('defs');
      const linkStroke = link => {
        const g = link.paint.gradient;
        if (!g) return link.paint.color;
        const grad = defs.append('linearGradient')
          .attr('id', g.id)
          .attr('gradientUnits', 'userSpaceOnUse')
          .attr('x1', link.source.x1)
          .attr('x2', link.target.x0);
        grad.append('stop').attr('offset', '0%').attr('stop-color', g.start);
        grad.append('stop').attr('offset', '100%').attr('stop-color', g.end);
        return 'url(#' + g.id + ')';
      };

      svg.append('g').attr('fill', 'none')
        .selectAll('.link').data(links).enter()
        .append('path').attr('class', 'link')
        .attr('d', d3.sankeyLinkHorizontal())
        .style('stroke', linkStroke)
        .style('stroke-opacity', PLAN.linkOpacity)
        .style('stroke-width', d => Math.max(1, d.width));

      const nodeG = svg.append('g').selectAll('.node')
        .data(nodes).enter().append('g').attr('class', 'node');
      nodeG.append('rect')
        .attr('x', d => d.x0).attr('y', d => d.y0)
        .attr('width', d => d.x1 - d.x0).attr('height', d => d.y1 - d.y0)
        .style('fill', d => d.color)
        .style('opacity', PLAN.nodeOpacity)
        .style('stroke', d => d.color)
        .style('stroke-opacity', PLAN.nodeOpacity);
      nodeG.append('text')
        .attr('font-family', PLAN.labelFontFamily)
        .attr('font-size', PLAN.labelFontSize)
        .attr('fill', PLAN.labelColor)
        .style('opacity', PLAN.labelOpacity)
        .attr('x', d => d.x0 < width / 2 ? d.x1 + PLAN.labelPadding : d.x0 - PLAN.labelPadding)
        .attr('y', d => (d.y1 + d.y0) / 2)
        .attr('dy', '0.35em')
        .attr('text-anchor', d => d.x0 < width / 2 ? 'start' : 'end')
        .text(d => d.label || d.id);

      svg.attr('data-scheme', isDark ? 'dark' : 'light');
      svg.node().dispatchEvent(new Event('__REBUILT_EVENT__'));
    }

    draw();
    window.addEventListener('resize', draw);
    })();
  </script>"""

    html_body = f"""<body>
  <svg></svg>
  {library.script_tags()}
  <script id="sankey-data" type="application/json">__DATA_JSON__</script>
  <script id="sankey-plan" type="application/json">__PLAN_JSON__</script>
  __DRAW_JS__
  __TAP_JS__
</body>
</html>"""

    draw_js = draw_js.replace("__NODE_ALIGN__", plan.node_align).replace("__REBUILT_EVENT__", REBUILT_EVENT)
    tap_js = f"<script>\n{tap_script}\n</script>" if tap_script is not None else ""

    html_template = html_head + "\n" + html_body
    # Single pass, so placeholder-like text inside the data stays untouched.
    replacements = {
        "__DRAW_JS__": draw_js,
        "__TAP_JS__": tap_js,
        "__DATA_JSON__": _script_json(data.to_dict()),
        "__PLAN_JSON__": _script_json(plan.to_dict()),
    }
    return _PLACEHOLDER_RE.sub(lambda m: replacements[m.group(0)], html_template)
