"""Branch hierarchy inference.

No "created on branch" metadata survives in git history, so levels are
guessed from names and from how branch footprints overlap. A branch's
footprint is every commit labelled with it plus the first-parent ancestry
of those commits inside the snapshot.
"""

import logging
from collections.abc import Sequence

from gitlanes.config.settings import LayoutConfig
from gitlanes.constants import UNRESOLVED_BRANCH_LEVEL
from gitlanes.graph.index import CommitIndex
from gitlanes.graph.types import BranchHierarchy, Commit

logger = logging.getLogger(__name__)


def collect_branch_commits(commits: Sequence[Commit]) -> dict[str, list[str]]:
    """Branch name -> hashes of commits labelled with it, in first-seen order."""
    branch_commits: dict[str, list[str]] = {}
    for commit in commits:
        for name in commit.branch_names:
            branch_commits.setdefault(name, []).append(commit.hash)
    return branch_commits


def branch_footprints(
    commits: Sequence[Commit], branch_commits: dict[str, list[str]]
) -> dict[str, set[str]]:
    """Branch name -> labelled commits plus their first-parent ancestry."""
    index = CommitIndex(commits)
    footprints: dict[str, set[str]] = {}

    for branch, hashes in branch_commits.items():
        footprint: set[str] = set()
        for start in hashes:
            current = index.get(start)
            while current is not None and current.hash not in footprint:
                footprint.add(current.hash)
                current = index.first_parent(current)
        footprints[branch] = footprint

    return footprints


def select_root(branch_commits: dict[str, list[str]], trunk_names: Sequence[str]) -> str | None:
    """Trunk branch: first conventional name present, else the most referenced branch."""
    if not branch_commits:
        return None

    for trunk in trunk_names:
        for branch in branch_commits:
            if branch.lower() == trunk.lower():
                return branch

    # max() keeps the first of equal counts, so ties go to the first-seen branch
    return max(branch_commits, key=lambda name: len(branch_commits[name]))


def infer_hierarchy(
    commits: Sequence[Commit], config: LayoutConfig | None = None
) -> BranchHierarchy:
    """Derive branch levels from reference labels across the snapshot."""
    config = config or LayoutConfig()
    branch_commits = collect_branch_commits(commits)
    root = select_root(branch_commits, config.trunk_names)
    if root is None:
        return BranchHierarchy()

    levels: dict[str, int] = {root: 0}

    level_one = {name.lower() for name in config.level_one_names}
    for branch in branch_commits:
        if branch not in levels and branch.lower() in level_one:
            levels[branch] = 1

    order = {branch: i for i, branch in enumerate(branch_commits)}
    footprints = branch_footprints(commits, branch_commits)
    pending = [branch for branch in branch_commits if branch not in levels]

    # Bounded fixed-point loop: each round only looks at branches leveled
    # in earlier rounds, so levels grow breadth-first from the trunk.
    rounds = 0
    progressed = False
    while pending and rounds < config.max_iterations:
        rounds += 1
        leveled = list(levels.items())
        found: dict[str, int] = {}

        for branch in pending:
            parent = _find_parent(branch, leveled, footprints, order)
            if parent is not None:
                found[branch] = levels[parent] + 1

        progressed = bool(found)
        if not progressed:
            break
        levels.update(found)
        pending = [branch for branch in pending if branch not in found]

    if pending:
        # A stalled loop means no shared history; running out of rounds does not
        fallback = UNRESOLVED_BRANCH_LEVEL if progressed else 0
        logger.debug(
            "Hierarchy left %d branches unresolved after %d rounds, using level %d",
            len(pending),
            rounds,
            fallback,
        )
        for branch in pending:
            levels[branch] = fallback

    return BranchHierarchy(levels=levels, root=root)


def _find_parent(
    branch: str,
    leveled: list[tuple[str, int]],
    footprints: dict[str, set[str]],
    order: dict[str, int],
) -> str | None:
    """Best already-leveled branch that branch diverged from, if any.

    A candidate qualifies when the footprints share at least one commit and
    branch has at least one commit of its own. Among qualifying candidates
    the largest overlap wins (the most specific ancestor), then the deeper
    level, then the first-seen branch.
    """
    own = footprints[branch]
    best: tuple[int, int, int] | None = None
    best_name: str | None = None

    for candidate, level in leveled:
        theirs = footprints.get(candidate, set())
        shared = len(own & theirs)
        if not shared or not own - theirs:
            continue
        key = (shared, level, -order[candidate])
        if best is None or key > best:
            best, best_name = key, candidate

    return best_name
