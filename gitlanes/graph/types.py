"""Types and constants for git graph layout."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from gitlanes.constants import SHORT_HASH_LENGTH


class RefKind(Enum):
    """What a reference label points at."""

    BRANCH = "branch"
    TAG = "tag"


class MergeDirection(Enum):
    """Lane relationship between a child commit and one of its parents.

    Lanes are numbered upward from the trunk, so UP means the parent sits
    in a higher lane than the child.
    """

    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True)
class RefLabel:
    """A branch or tag name attached to a commit."""

    name: str
    kind: RefKind

    @property
    def is_branch(self) -> bool:
        return self.kind is RefKind.BRANCH

    @property
    def is_tag(self) -> bool:
        return self.kind is RefKind.TAG

    def __str__(self) -> str:
        prefix = "Branch" if self.is_branch else "Tag"
        return f"{prefix} {self.name}"


def hashes_match(a: str, b: str) -> bool:
    """Exact or prefix equality between two (possibly abbreviated) hashes."""
    if not a or not b:
        return False
    if len(a) <= len(b):
        return b.startswith(a)
    return a.startswith(b)


@dataclass(frozen=True)
class Commit:
    """One history entry, immutable once constructed."""

    hash: str
    parents: tuple[str, ...] = ()
    refs: tuple[RefLabel, ...] = ()
    author: str = ""
    message: str = ""
    timestamp: datetime | None = None
    short_hash: str = ""
    author_email: str = ""
    full_message: str = ""

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the stored value immutable
        object.__setattr__(self, "parents", tuple(self.parents))
        if not all(isinstance(ref, RefLabel) for ref in self.refs):
            from gitlanes.graph.refs import parse_ref_labels

            object.__setattr__(self, "refs", parse_ref_labels(self.refs))
        else:
            object.__setattr__(self, "refs", tuple(self.refs))
        if not self.short_hash:
            object.__setattr__(self, "short_hash", self.hash[:SHORT_HASH_LENGTH])
        if not self.full_message:
            object.__setattr__(self, "full_message", self.message)

    @property
    def branch_names(self) -> list[str]:
        """Branch labels, de-duplicated in first-seen order."""
        return _unique(ref.name for ref in self.refs if ref.is_branch)

    @property
    def tag_names(self) -> list[str]:
        """Tag labels, de-duplicated in first-seen order."""
        return _unique(ref.name for ref in self.refs if ref.is_tag)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def matches(self, other_hash: str) -> bool:
        """True if other_hash names this commit, exactly or by prefix."""
        return hashes_match(self.hash, other_hash)


def _unique(names: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


@dataclass(frozen=True)
class BranchHierarchy:
    """Branch name -> level, 0 being the trunk."""

    levels: Mapping[str, int] = field(default_factory=dict)
    root: str | None = None

    def level_of(self, branch: str | None) -> int:
        """Level of a branch; unknown branches sit on the trunk level."""
        if branch is None:
            return 0
        return self.levels.get(branch, 0)

    def is_root(self, branch: str | None) -> bool:
        return branch is not None and branch == self.root

    def __len__(self) -> int:
        return len(self.levels)

    def __contains__(self, branch: object) -> bool:
        return branch in self.levels


@dataclass(frozen=True)
class LaneAssignment(Mapping[str, int]):
    """Commit hash -> lane (row index)."""

    lanes: Mapping[str, int] = field(default_factory=dict)

    def lane_of(self, commit_hash: str) -> int:
        return self.lanes.get(commit_hash, 0)

    @property
    def max_lane(self) -> int:
        return max(self.lanes.values(), default=0)

    def __getitem__(self, commit_hash: str) -> int:
        return self.lanes[commit_hash]

    def __iter__(self) -> Iterator[str]:
        return iter(self.lanes)

    def __len__(self) -> int:
        return len(self.lanes)


@dataclass(frozen=True)
class GraphNode:
    """A commit with its layout position."""

    commit: Commit
    x: float
    y: float
    lane: int
    color: str
    slot: int = 0

    @property
    def hash(self) -> str:
        return self.commit.hash


@dataclass(frozen=True)
class GraphEdge:
    """Link from a child node to one of its parents."""

    source: GraphNode  # child, newer, further left
    target: GraphNode  # parent, older, further right
    parent_index: int
    is_merge: bool
    merge_direction: MergeDirection
    color: str
    is_merge_to_root: bool = False

    @property
    def is_primary(self) -> bool:
        return self.parent_index == 0
