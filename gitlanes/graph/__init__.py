"""Git graph layout core."""

from gitlanes.graph.builder import build_graph
from gitlanes.graph.hierarchy import infer_hierarchy
from gitlanes.graph.lanes import assign_lanes
from gitlanes.graph.layout import GraphLayout, LayoutRenderer, render_graph
from gitlanes.graph.svg import layout_to_json, layout_to_svg
from gitlanes.graph.types import (
    BranchHierarchy,
    Commit,
    GraphEdge,
    GraphNode,
    LaneAssignment,
    MergeDirection,
    RefKind,
    RefLabel,
)

__all__ = [
    "BranchHierarchy",
    "Commit",
    "GraphEdge",
    "GraphLayout",
    "GraphNode",
    "LaneAssignment",
    "LayoutRenderer",
    "MergeDirection",
    "RefKind",
    "RefLabel",
    "assign_lanes",
    "build_graph",
    "infer_hierarchy",
    "layout_to_json",
    "layout_to_svg",
    "render_graph",
]
