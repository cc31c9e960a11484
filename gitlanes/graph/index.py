"""Hash lookup with prefix tolerance."""

from collections.abc import Iterable

from gitlanes.constants import MIN_HASH_PREFIX
from gitlanes.graph.types import Commit, hashes_match


class CommitIndex:
    """Resolve full or abbreviated hashes to commits.

    Exact hits come from a plain dict. Abbreviated lookups go through a
    secondary index keyed by the first MIN_HASH_PREFIX characters, so no
    lookup scans the whole commit list unless the query is shorter than
    that prefix.
    """

    def __init__(self, commits: Iterable[Commit]) -> None:
        self._by_hash: dict[str, Commit] = {}
        self._by_prefix: dict[str, list[Commit]] = {}
        self._order: list[Commit] = []

        for commit in commits:
            if commit.hash in self._by_hash:
                continue
            self._by_hash[commit.hash] = commit
            self._by_prefix.setdefault(commit.hash[:MIN_HASH_PREFIX], []).append(commit)
            self._order.append(commit)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, commit_hash: object) -> bool:
        return isinstance(commit_hash, str) and self.get(commit_hash) is not None

    def get(self, commit_hash: str) -> Commit | None:
        """Commit named by commit_hash, or None if it is outside the set."""
        if not commit_hash:
            return None
        exact = self._by_hash.get(commit_hash)
        if exact is not None:
            return exact

        if len(commit_hash) >= MIN_HASH_PREFIX:
            candidates = self._by_prefix.get(commit_hash[:MIN_HASH_PREFIX], [])
        else:
            candidates = self._order
        for commit in candidates:
            if hashes_match(commit.hash, commit_hash):
                return commit
        return None

    def parents_of(self, commit: Commit) -> list[Commit]:
        """Parents present in the set, in parent order; boundary parents are skipped."""
        parents = []
        for parent_hash in commit.parents:
            parent = self.get(parent_hash)
            if parent is not None and parent is not commit:
                parents.append(parent)
        return parents

    def first_parent(self, commit: Commit) -> Commit | None:
        if not commit.parents:
            return None
        parent = self.get(commit.parents[0])
        return parent if parent is not commit else None
