"""Layout renderer: nodes and edges to drawable primitives.

render_graph() is the single entry point of the layout core. It runs the
whole pipeline on one commit snapshot and returns a GraphLayout that the
SVG/JSON serializers and the Qt view draw without further computation.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from gitlanes.config.settings import LayoutConfig
from gitlanes.graph.builder import build_graph
from gitlanes.graph.edges import EdgePath, build_edge_path, edge_style
from gitlanes.graph.hierarchy import infer_hierarchy
from gitlanes.graph.labels import (
    Anchor,
    LabelBox,
    LabelPlacer,
    SideLabelColumn,
    text_width,
    truncate,
)
from gitlanes.graph.lanes import assign_lanes
from gitlanes.graph.types import (
    BranchHierarchy,
    Commit,
    GraphEdge,
    GraphNode,
    LaneAssignment,
)

logger = logging.getLogger(__name__)

# Space kept between side labels and the graph body / canvas edge
SIDE_LABEL_GAP = 16
VIEW_MARGIN = 8

# Estimated text height above a baseline
TEXT_ASCENT = 12

BADGE_HEIGHT = 16
BADGE_MIN_WIDTH = 40
BADGE_PADDING = 12


def _round(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class PathPrimitive:
    path: EdgePath
    color: str
    stroke_width: float
    opacity: float
    marker: str
    source: str
    target: str

    kind = "path"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "d": self.path.to_svg_d(),
            "color": self.color,
            "strokeWidth": self.stroke_width,
            "opacity": self.opacity,
            "marker": self.marker,
            "from": self.source,
            "to": self.target,
        }


@dataclass(frozen=True)
class CirclePrimitive:
    cx: float
    cy: float
    r: float
    fill: str
    commit: str
    stroke: str = "white"
    stroke_width: float = 2

    kind = "circle"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "cx": _round(self.cx),
            "cy": _round(self.cy),
            "r": _round(self.r),
            "fill": self.fill,
            "stroke": self.stroke,
            "strokeWidth": self.stroke_width,
            "commit": self.commit,
        }


@dataclass(frozen=True)
class TextPrimitive:
    x: float
    y: float
    text: str
    role: str  # commit-info, commit-message, branch-side, tag-side
    anchor: Anchor = Anchor.MIDDLE
    color: str | None = None

    kind = "text"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "x": _round(self.x),
            "y": _round(self.y),
            "text": self.text,
            "role": self.role,
            "anchor": self.anchor.value,
            "color": self.color,
        }


@dataclass(frozen=True)
class BadgePrimitive:
    """Rounded label box carrying a branch name above a node."""

    x: float  # centre
    y: float  # text baseline centre line
    width: float
    text: str
    height: float = BADGE_HEIGHT

    kind = "badge"

    @property
    def rect(self) -> tuple[float, float, float, float]:
        return (self.x - self.width / 2, self.y - self.height / 2, self.width, self.height)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "x": _round(self.x),
            "y": _round(self.y),
            "width": _round(self.width),
            "height": _round(self.height),
            "text": self.text,
        }


Primitive = PathPrimitive | CirclePrimitive | TextPrimitive | BadgePrimitive


@dataclass(frozen=True)
class GraphLayout:
    """Everything needed to draw one commit snapshot."""

    width: float = 0
    height: float = 0
    view_box: tuple[float, float, float, float] = (0, 0, 0, 0)
    primitives: tuple[Primitive, ...] = ()
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    hierarchy: BranchHierarchy = field(default_factory=BranchHierarchy)
    lanes: LaneAssignment = field(default_factory=LaneAssignment)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def primitives_of(self, kind: str) -> list[Primitive]:
        return [primitive for primitive in self.primitives if primitive.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": _round(self.width),
            "height": _round(self.height),
            "viewBox": [_round(v) for v in self.view_box],
            "primitives": [primitive.to_dict() for primitive in self.primitives],
            "nodes": [
                {
                    "hash": node.hash,
                    "x": _round(node.x),
                    "y": _round(node.y),
                    "lane": node.lane,
                    "color": node.color,
                }
                for node in self.nodes
            ],
            "edges": [
                {
                    "from": edge.source.hash,
                    "to": edge.target.hash,
                    "parentIndex": edge.parent_index,
                    "isMerge": edge.is_merge,
                    "isMergeToMain": edge.is_merge_to_root,
                    "mergeDirection": edge.merge_direction.value,
                    "color": edge.color,
                }
                for edge in self.edges
            ],
        }


class LayoutRenderer:
    """Turns positioned nodes and edges into primitives for one render pass."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    def render(
        self,
        nodes: list[GraphNode],
        edges: list[GraphEdge],
        hierarchy: BranchHierarchy,
        lanes: LaneAssignment,
    ) -> GraphLayout:
        if not nodes:
            return GraphLayout(hierarchy=hierarchy, lanes=lanes)

        config = self.config
        padding = config.padding
        max_lane = max(node.lane for node in nodes)
        width = padding.left + padding.right + len(nodes) * config.column_gap
        height = padding.top + padding.bottom + max_lane * config.row_gap

        primitives: list[Primitive] = []
        # Edges first so they sit behind the nodes
        primitives.extend(self._edge_primitives(edges))
        primitives.extend(self._node_primitives(nodes))
        primitives.extend(self._side_labels(nodes))

        return GraphLayout(
            width=width,
            height=height,
            view_box=self._view_box(width, height, primitives),
            primitives=tuple(primitives),
            nodes=tuple(nodes),
            edges=tuple(edges),
            hierarchy=hierarchy,
            lanes=lanes,
        )

    def _edge_primitives(self, edges: Iterable[GraphEdge]) -> list[PathPrimitive]:
        primitives = []
        for edge in edges:
            style = edge_style(edge)
            primitives.append(
                PathPrimitive(
                    path=build_edge_path(edge, self.config),
                    color=edge.color,
                    stroke_width=style.stroke_width,
                    opacity=style.opacity,
                    marker=style.marker,
                    source=edge.source.hash,
                    target=edge.target.hash,
                )
            )
        return primitives

    def _node_primitives(self, nodes: list[GraphNode]) -> list[Primitive]:
        config = self.config
        markers: list[Primitive] = []
        labels: list[Primitive] = []

        # Badges are placed first and never closer than their own height
        badge_placer = LabelPlacer(
            config, spacing=max(config.label_min_spacing, BADGE_HEIGHT), stack=True
        )
        badges = [
            replace(badge, y=badge_placer.place(LabelBox(x=badge.x, y=badge.y, width=badge.width)))
            for node in nodes
            for badge in self._badges(node)
        ]

        # Text labels move around the placed badges
        placer = LabelPlacer(config)
        for box in badge_placer.placed:
            placer.reserve(box)

        for node in nodes:
            commit = node.commit
            markers.append(
                CirclePrimitive(
                    cx=node.x, cy=node.y, r=config.node_radius, fill=node.color, commit=commit.hash
                )
            )

            author = truncate(commit.author or "Unknown", config.author_max)
            info = f"{commit.short_hash} · {author}"
            message = truncate(commit.message or "No message", config.message_max)

            for text, offset, role in (
                (info, config.top_label_offset, "commit-info"),
                (message, config.bottom_label_offset, "commit-message"),
            ):
                box = LabelBox(x=node.x, y=node.y + offset, width=text_width(text, config))
                y = placer.place(box)
                labels.append(TextPrimitive(x=node.x, y=y, text=text, role=role))

        return markers + labels + badges

    def _badges(self, node: GraphNode) -> list[BadgePrimitive]:
        config = self.config
        badges = []
        for i, name in enumerate(node.commit.branch_names[: config.max_ref_badges]):
            width = max(BADGE_MIN_WIDTH, text_width(name, config) + BADGE_PADDING)
            y = node.y + config.badge_offset - i * config.badge_step
            badges.append(BadgePrimitive(x=node.x, y=y, width=width, text=name))
        return badges

    def _side_labels(self, nodes: list[GraphNode]) -> list[TextPrimitive]:
        """One label per distinct branch (left margin) and tag (right margin).

        Each sits on the row of the lane where its name is first seen,
        walking newest to oldest.
        """
        config = self.config
        left_x = config.padding.left - config.node_radius - SIDE_LABEL_GAP
        right_x = nodes[-1].x + config.column_gap / 2

        branch_column = SideLabelColumn(config)
        tag_column = SideLabelColumn(config)
        seen_branches: set[str] = set()
        seen_tags: set[str] = set()
        labels: list[TextPrimitive] = []

        for node in nodes:
            lane_y = config.padding.top + node.lane * config.row_gap
            for name in node.commit.branch_names:
                if name in seen_branches:
                    continue
                seen_branches.add(name)
                labels.append(
                    TextPrimitive(
                        x=left_x,
                        y=branch_column.place(lane_y),
                        text=name,
                        role="branch-side",
                        anchor=Anchor.END,
                        color=node.color,
                    )
                )
            for name in node.commit.tag_names:
                if name in seen_tags:
                    continue
                seen_tags.add(name)
                labels.append(
                    TextPrimitive(
                        x=right_x,
                        y=tag_column.place(lane_y),
                        text=name,
                        role="tag-side",
                        anchor=Anchor.START,
                        color=node.color,
                    )
                )

        return labels

    def _view_box(
        self, width: float, height: float, primitives: list[Primitive]
    ) -> tuple[float, float, float, float]:
        """Canvas bounds widened so side labels and shifted texts stay visible."""
        min_x, min_y, max_x, max_y = 0.0, 0.0, float(width), float(height)

        for primitive in primitives:
            if isinstance(primitive, TextPrimitive):
                box = LabelBox(
                    x=primitive.x,
                    y=primitive.y,
                    width=text_width(primitive.text, self.config),
                    anchor=primitive.anchor,
                )
                min_x = min(min_x, box.left - VIEW_MARGIN)
                max_x = max(max_x, box.right + VIEW_MARGIN)
                min_y = min(min_y, primitive.y - TEXT_ASCENT - VIEW_MARGIN)
                max_y = max(max_y, primitive.y + VIEW_MARGIN)
            elif isinstance(primitive, BadgePrimitive):
                left, top, w, h = primitive.rect
                min_y = min(min_y, top - VIEW_MARGIN)
                min_x = min(min_x, left - VIEW_MARGIN)
                max_x = max(max_x, left + w + VIEW_MARGIN)

        return (min_x, min_y, max_x - min_x, max_y - min_y)


def render_graph(commits: Iterable[Commit], config: LayoutConfig | None = None) -> GraphLayout:
    """Lay out a newest-first commit snapshot.

    Never raises for sparse or malformed input: no commits gives an empty
    layout, no branch labels gives a single-lane one.
    """
    config = config or LayoutConfig()
    snapshot = list(commits)
    if not snapshot:
        return GraphLayout()

    hierarchy = infer_hierarchy(snapshot, config)
    lanes = assign_lanes(snapshot, hierarchy)
    nodes, edges = build_graph(snapshot, lanes, hierarchy, config)
    layout = LayoutRenderer(config).render(nodes, edges, hierarchy, lanes)

    logger.debug(
        "Rendered %d commits, %d edges, %d lanes, root %s",
        len(layout.nodes),
        len(layout.edges),
        lanes.max_lane + 1,
        hierarchy.root,
    )
    return layout
