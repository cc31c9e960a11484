"""Graph construction: positioned nodes and classified edges."""

import logging
from collections.abc import Sequence

from gitlanes.config.settings import LayoutConfig
from gitlanes.graph.attribution import attribute, is_merge_message
from gitlanes.graph.index import CommitIndex
from gitlanes.graph.types import (
    BranchHierarchy,
    Commit,
    GraphEdge,
    GraphNode,
    LaneAssignment,
    MergeDirection,
)

logger = logging.getLogger(__name__)


def node_position(slot: int, lane: int, config: LayoutConfig) -> tuple[float, float]:
    """Canvas position of a commit: slot 0 (newest) is leftmost, lane 0 is topmost."""
    x = config.padding.left + slot * config.column_gap
    y = config.padding.top + lane * config.row_gap
    return x, y


def classify_direction(child: GraphNode, parent: GraphNode, config: LayoutConfig) -> MergeDirection:
    """Lane relationship of an edge from its vertical displacement.

    Higher lanes are drawn lower on the canvas, so a parent with a larger
    y than its child sits in a higher lane.
    """
    dy = parent.y - child.y
    threshold = config.direction_threshold * config.row_gap
    if dy > threshold:
        return MergeDirection.UP
    if dy < -threshold:
        return MergeDirection.DOWN
    return MergeDirection.SAME


def is_merge_to_root(
    child: GraphNode,
    parent: GraphNode,
    hierarchy: BranchHierarchy,
) -> bool:
    """True if the edge shows another line being integrated into the trunk.

    The merge commit has to sit on the trunk. A parent that is simply the
    previous trunk commit does not count; otherwise any one of a merge
    message, a lane change, or a parent attributed to another branch is
    enough.
    """
    if not child.commit.is_merge:
        return False

    child_branch = attribute(child.commit, hierarchy).branch
    if not (hierarchy.is_root(child_branch) or child.lane == 0):
        return False

    parent_branch = attribute(parent.commit, hierarchy).branch
    parent_on_root = hierarchy.is_root(parent_branch)
    if parent.lane == child.lane and parent_on_root:
        return False

    return (
        is_merge_message(child.commit.message)
        or parent.lane != child.lane
        or (parent_branch is not None and not parent_on_root)
    )


def build_nodes(
    commits: Sequence[Commit], lanes: LaneAssignment, config: LayoutConfig
) -> list[GraphNode]:
    nodes: list[GraphNode] = []
    seen: set[str] = set()

    for commit in commits:
        if commit.hash in seen:
            continue
        seen.add(commit.hash)

        slot = len(nodes)
        lane = lanes.lane_of(commit.hash)
        x, y = node_position(slot, lane, config)
        nodes.append(
            GraphNode(commit=commit, x=x, y=y, lane=lane, color=config.lane_color(lane), slot=slot)
        )

    return nodes


def build_edges(
    nodes: Sequence[GraphNode], hierarchy: BranchHierarchy, config: LayoutConfig
) -> list[GraphEdge]:
    """One edge per parent link whose parent is inside the snapshot."""
    index = CommitIndex(node.commit for node in nodes)
    by_hash = {node.hash: node for node in nodes}
    edges: list[GraphEdge] = []

    for node in nodes:
        commit = node.commit
        for parent_index, parent_hash in enumerate(commit.parents):
            parent_commit = index.get(parent_hash)
            if parent_commit is None or parent_commit is commit:
                logger.debug("Parent %s of %s is outside the graph", parent_hash, commit.short_hash)
                continue

            parent = by_hash[parent_commit.hash]
            edges.append(
                GraphEdge(
                    source=node,
                    target=parent,
                    parent_index=parent_index,
                    is_merge=commit.is_merge,
                    merge_direction=classify_direction(node, parent, config),
                    # Primary edges keep the child's colour; merged-in lines keep their own
                    color=node.color if parent_index == 0 else parent.color,
                    is_merge_to_root=is_merge_to_root(node, parent, hierarchy),
                )
            )

    return edges


def build_graph(
    commits: Sequence[Commit],
    lanes: LaneAssignment,
    hierarchy: BranchHierarchy,
    config: LayoutConfig | None = None,
) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Position every commit and link it to its parents."""
    config = config or LayoutConfig()
    nodes = build_nodes(commits, lanes, config)
    edges = build_edges(nodes, hierarchy, config)
    return nodes, edges
