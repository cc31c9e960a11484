"""Lane assignment.

Lanes are rows: lane 0 is the trunk, higher lanes hold branches further
from it. Commits are walked oldest to newest so a branch's label can pin
its commits before later history is considered, then the remaining gaps
are filled newest to oldest from children.
"""

import logging
from collections.abc import Sequence

from gitlanes.graph.attribution import attribute
from gitlanes.graph.index import CommitIndex
from gitlanes.graph.types import BranchHierarchy, Commit, LaneAssignment

logger = logging.getLogger(__name__)


def assign_lanes(
    commits: Sequence[Commit],
    hierarchy: BranchHierarchy,
) -> LaneAssignment:
    """Map every commit hash to a lane.

    commits is the newest-first snapshot. The result is a pure function of
    it: no clock, no randomness, no state carried between calls.
    """
    ordered = _unique_commits(commits)
    if not ordered:
        return LaneAssignment()

    index = CommitIndex(ordered)
    lanes, pinned = _primary_pass(ordered, index, hierarchy)
    anchors = _merge_anchors(ordered, index, lanes)
    _backfill(ordered, index, lanes, anchors)

    logger.debug(
        "Assigned %d commits to %d lanes (%d labelled, %d anchored)",
        len(lanes),
        len(set(lanes.values())),
        len(pinned),
        len(anchors),
    )
    return LaneAssignment(lanes=lanes)


def _unique_commits(commits: Sequence[Commit]) -> list[Commit]:
    seen: set[str] = set()
    unique = []
    for commit in commits:
        if commit.hash not in seen:
            seen.add(commit.hash)
            unique.append(commit)
    return unique


def _primary_pass(
    ordered: list[Commit], index: CommitIndex, hierarchy: BranchHierarchy
) -> tuple[dict[str, int], set[str]]:
    """Pin labelled commits to their branch level, oldest first.

    Returns the lane map and the hashes pinned to a non-root branch. A
    commit resolving to the trunk pulls its unpinned first-parent ancestry
    onto the trunk lane so the trunk reads as one continuous line.
    """
    lanes: dict[str, int] = {}
    pinned: set[str] = set()

    for commit in reversed(ordered):
        attribution = attribute(commit, hierarchy)
        if attribution.inferred:
            continue

        lane = hierarchy.level_of(attribution.branch)
        if commit.hash not in lanes:
            lanes[commit.hash] = lane

        if hierarchy.is_root(attribution.branch):
            _propagate_trunk(commit, index, lanes, pinned, lanes[commit.hash])
        else:
            pinned.add(commit.hash)

    return lanes, pinned


def _propagate_trunk(
    commit: Commit,
    index: CommitIndex,
    lanes: dict[str, int],
    pinned: set[str],
    lane: int,
) -> None:
    current = index.first_parent(commit)
    while current is not None:
        if current.hash in pinned or lanes.get(current.hash) == lane:
            break
        lanes[current.hash] = lane
        current = index.first_parent(current)


def _merge_anchors(
    ordered: list[Commit], index: CommitIndex, lanes: dict[str, int]
) -> dict[str, str]:
    """Primary parents left unassigned by the primary pass -> anchoring merge.

    Merges are visited newest first and the first one to claim a parent
    keeps it.
    """
    anchors: dict[str, str] = {}
    for commit in ordered:
        if not commit.is_merge:
            continue
        parent = index.first_parent(commit)
        if parent is None or parent.hash in lanes or parent.hash in anchors:
            continue
        anchors[parent.hash] = commit.hash
    return anchors


def _backfill(
    ordered: list[Commit],
    index: CommitIndex,
    lanes: dict[str, int],
    anchors: dict[str, str],
) -> None:
    """Give every remaining commit a lane inherited from its children, newest first."""
    children: dict[str, list[tuple[int, Commit]]] = {}
    for position, commit in enumerate(ordered):
        for parent in index.parents_of(commit):
            children.setdefault(parent.hash, []).append((position, commit))

    for commit in ordered:
        if commit.hash in lanes:
            continue

        anchor = anchors.get(commit.hash)
        if anchor is not None and anchor in lanes:
            lanes[commit.hash] = lanes[anchor]
            continue

        lanes[commit.hash] = _inherited_lane(commit, children.get(commit.hash, []), index, lanes)


def _inherited_lane(
    commit: Commit,
    children: list[tuple[int, Commit]],
    index: CommitIndex,
    lanes: dict[str, int],
) -> int:
    """Lane of the child that continues this commit's line, else 0.

    A child whose first parent is this commit continues the line; among
    several, the chronologically closest one (largest position in the
    newest-first order) wins. Any child is the fallback.
    """
    assigned = [(position, child) for position, child in children if child.hash in lanes]
    if not assigned:
        return 0

    continuing = [
        (position, child)
        for position, child in assigned
        if index.first_parent(child) is commit
    ]
    _, chosen = max(continuing or assigned, key=lambda item: item[0])
    return lanes[chosen.hash]
