"""SVG and JSON serialization of a GraphLayout."""

import html
import json

from gitlanes.graph.edges import format_number
from gitlanes.graph.layout import (
    BadgePrimitive,
    CirclePrimitive,
    GraphLayout,
    PathPrimitive,
    Primitive,
    TextPrimitive,
)

BACKGROUND = "#1e1e1e"

_DEFS = """  <defs>
    <marker id="arrowhead" markerWidth="10" markerHeight="7" refX="9" refY="3.5" orient="auto">
      <polygon points="0 0, 10 3.5, 0 7" fill="currentColor"/>
    </marker>
    <marker id="merge-arrowhead" markerWidth="12" markerHeight="8" refX="11" refY="4" orient="auto">
      <polygon points="0 0, 12 4, 0 8" fill="currentColor"/>
    </marker>
  </defs>
  <style>
    .commit-text { fill: #ffffff; font-size: 12px; }
    .branch-label { fill: #ffffff; font-size: 10px; font-weight: bold; }
    .side-label { font-size: 12px; font-weight: bold; }
    .commit-node:hover { stroke-width: 3; }
  </style>"""

_TEXT_CLASSES = {
    "commit-info": "commit-text",
    "commit-message": "commit-text",
    "branch-side": "side-label branch-side",
    "tag-side": "side-label tag-side",
}


def _attr(value: object) -> str:
    return html.escape(str(value), quote=True)


def _num(value: float) -> str:
    return format_number(value)


def _path(primitive: PathPrimitive) -> str:
    return (
        f'  <path d="{primitive.path.to_svg_d()}" stroke="{_attr(primitive.color)}" '
        f'stroke-width="{_num(primitive.stroke_width)}" fill="none" '
        f'opacity="{_num(primitive.opacity)}" marker-end="url(#{primitive.marker})"/>'
    )


def _circle(primitive: CirclePrimitive) -> str:
    return (
        f'  <circle cx="{_num(primitive.cx)}" cy="{_num(primitive.cy)}" r="{_num(primitive.r)}" '
        f'fill="{_attr(primitive.fill)}" stroke="{_attr(primitive.stroke)}" '
        f'stroke-width="{_num(primitive.stroke_width)}" class="commit-node" '
        f'data-hash="{_attr(primitive.commit)}"/>'
    )


def _text(primitive: TextPrimitive) -> str:
    css_class = _TEXT_CLASSES.get(primitive.role, "commit-text")
    fill = f' fill="{_attr(primitive.color)}"' if primitive.color else ""
    return (
        f'  <text x="{_num(primitive.x)}" y="{_num(primitive.y)}" class="{css_class}" '
        f'text-anchor="{primitive.anchor.value}"{fill}>{html.escape(primitive.text)}</text>'
    )


def _badge(primitive: BadgePrimitive) -> str:
    left, top, width, height = primitive.rect
    return (
        f'  <rect x="{_num(left)}" y="{_num(top)}" width="{_num(width)}" height="{_num(height)}" '
        f'rx="{_num(height / 2)}" fill="rgba(255,255,255,0.2)" stroke="rgba(255,255,255,0.3)"/>\n'
        f'  <text x="{_num(primitive.x)}" y="{_num(primitive.y + 2)}" class="branch-label" '
        f'text-anchor="middle">{html.escape(primitive.text)}</text>'
    )


def primitive_to_svg(primitive: Primitive) -> str:
    if isinstance(primitive, PathPrimitive):
        return _path(primitive)
    if isinstance(primitive, CirclePrimitive):
        return _circle(primitive)
    if isinstance(primitive, BadgePrimitive):
        return _badge(primitive)
    return _text(primitive)


def layout_to_svg(layout: GraphLayout) -> str:
    """Standalone SVG document for a layout; an empty layout gives an empty <svg>."""
    if layout.is_empty:
        return '<svg xmlns="http://www.w3.org/2000/svg" width="0" height="0" viewBox="0 0 0 0"/>\n'

    min_x, min_y, width, height = layout.view_box
    lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(width)}" height="{_num(height)}" '
        f'viewBox="{_num(min_x)} {_num(min_y)} {_num(width)} {_num(height)}" '
        f"style=\"background: {BACKGROUND}; font-family: 'Segoe UI', sans-serif;\">",
        _DEFS,
    ]
    lines.extend(primitive_to_svg(primitive) for primitive in layout.primitives)
    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def layout_to_json(layout: GraphLayout, indent: int | None = 2) -> str:
    return json.dumps(layout.to_dict(), indent=indent, ensure_ascii=False)
