"""
Commit history provider using pygit2
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pygit2

from gitlanes.config.settings import LayoutConfig
from gitlanes.constants import DEFAULT_MAX_COMMITS
from gitlanes.graph.layout import GraphLayout, render_graph
from gitlanes.graph.refs import parse_ref_labels
from gitlanes.graph.types import Commit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryFilters:
    """Which commits to fetch. Hashable so it can key a cache."""

    max_commits: int = DEFAULT_MAX_COMMITS
    branch: str | None = None  # Start from this branch only
    author: str | None = None  # Case-insensitive match on author name or email
    message: str | None = None  # Case-insensitive match on the commit message
    show_merges: bool = True


@dataclass(frozen=True)
class BranchInfo:
    name: str
    target: str
    is_remote: bool = False
    is_current: bool = False


@dataclass(frozen=True)
class TagInfo:
    name: str
    target: str


@dataclass(frozen=True)
class AuthorInfo:
    name: str
    email: str
    commit_count: int


class GitLanesRepository:
    """Reads commit history, branches and tags for graph rendering"""

    def __init__(self, repo_path: str | None = None) -> None:
        """Initialize repository"""
        if repo_path is None:
            repo_path = self._find_repo()

        self.repo = pygit2.Repository(repo_path)

    def _find_repo(self) -> str:
        """Find git repository in current directory or parents"""
        current = Path.cwd()
        while current != current.parent:
            if (current / ".git").exists():
                return str(current)
            current = current.parent
        raise ValueError("Not in a git repository")

    def _current_branch(self) -> str | None:
        if self.repo.head_is_unborn or self.repo.head_is_detached:
            return None
        return self.repo.head.shorthand

    def get_branches(self) -> list[BranchInfo]:
        """Local branches, then remote-tracking branches, each sorted by name"""
        current = self._current_branch()
        branches = []

        for name in sorted(self.repo.branches.local):
            commit = self.repo.branches.local[name].peel(pygit2.Commit)
            branches.append(
                BranchInfo(name=name, target=str(commit.id), is_current=name == current)
            )

        for name in sorted(self.repo.branches.remote):
            if name.endswith("/HEAD"):
                continue
            commit = self.repo.branches.remote[name].peel(pygit2.Commit)
            branches.append(BranchInfo(name=name, target=str(commit.id), is_remote=True))

        return branches

    def get_tags(self) -> list[TagInfo]:
        """Tags sorted by name, annotated tags peeled to their commit"""
        tags = []
        for ref_name in sorted(self.repo.references):
            if not ref_name.startswith("refs/tags/"):
                continue
            try:
                commit = self.repo.references[ref_name].peel(pygit2.Commit)
            except (pygit2.InvalidSpecError, ValueError):
                # Tags on trees or blobs have no place in a commit graph
                logger.debug("Skipping tag %s: does not point at a commit", ref_name)
                continue
            tags.append(TagInfo(name=ref_name[len("refs/tags/") :], target=str(commit.id)))
        return tags

    def _ref_labels(self) -> dict[str, list[str]]:
        """Commit id -> raw reference labels in 'git log --decorate' order"""
        labels: dict[str, list[str]] = {}
        for branch in self.get_branches():
            if branch.is_current:
                raw = f"HEAD -> {branch.name}"
            elif branch.is_remote:
                raw = f"refs/remotes/{branch.name}"
            else:
                raw = f"refs/heads/{branch.name}"
            labels.setdefault(branch.target, []).append(raw)
        for tag in self.get_tags():
            labels.setdefault(tag.target, []).append(f"tag: {tag.name}")
        return labels

    def _start_points(self, branch: str | None) -> list[pygit2.Oid]:
        if branch is not None:
            # Unknown names raise KeyError
            return [self.repo.branches[branch].peel(pygit2.Commit).id]

        tips: dict[str, pygit2.Oid] = {}
        if not self.repo.head_is_unborn:
            head = self.repo.head.peel(pygit2.Commit)
            tips[str(head.id)] = head.id
        for info in self.get_branches():
            tips.setdefault(info.target, pygit2.Oid(hex=info.target))
        for tag in self.get_tags():
            tips.setdefault(tag.target, pygit2.Oid(hex=tag.target))
        return list(tips.values())

    def get_commits(self, filters: HistoryFilters | None = None) -> list[Commit]:
        """Newest-first commits matching filters, at most filters.max_commits"""
        filters = filters or HistoryFilters()
        starts = self._start_points(filters.branch)
        if not starts:
            return []

        labels = self._ref_labels()
        sort = pygit2.enums.SortMode.TOPOLOGICAL | pygit2.enums.SortMode.TIME
        walker = self.repo.walk(starts[0], sort)
        for oid in starts[1:]:
            walker.push(oid)

        commits: list[Commit] = []
        for c in walker:
            if len(commits) >= filters.max_commits:
                break
            if not filters.show_merges and len(c.parent_ids) > 1:
                continue
            if not self._matches(c, filters):
                continue
            commits.append(self._to_commit(c, labels.get(str(c.id), [])))

        logger.info("Loaded %d commits from %s", len(commits), self.repo.workdir or self.repo.path)
        return commits

    def get_authors(self, commits: Iterable[Commit] | None = None) -> list[AuthorInfo]:
        """Authors of the given commits, or of the default history"""
        if commits is None:
            commits = self.get_commits()
        return count_authors(commits)

    def _matches(self, c: pygit2.Commit, filters: HistoryFilters) -> bool:
        if filters.author:
            needle = filters.author.lower()
            if needle not in c.author.name.lower() and needle not in c.author.email.lower():
                return False
        return not (filters.message and filters.message.lower() not in c.message.lower())

    def _to_commit(self, c: pygit2.Commit, raw_labels: list[str]) -> Commit:
        full_message = c.message.strip()
        tz = timezone(timedelta(minutes=c.commit_time_offset))
        return Commit(
            hash=str(c.id),
            parents=tuple(str(p) for p in c.parent_ids),
            refs=parse_ref_labels(raw_labels),
            author=c.author.name,
            author_email=c.author.email,
            message=full_message.split("\n")[0],
            full_message=full_message,
            timestamp=datetime.fromtimestamp(c.commit_time, tz=tz),
        )


def count_authors(commits: Iterable[Commit]) -> list[AuthorInfo]:
    """Distinct authors with commit counts, most active first"""
    counts: Counter[tuple[str, str]] = Counter(
        (commit.author, commit.author_email) for commit in commits
    )
    return [
        AuthorInfo(name=name, email=email, commit_count=count)
        for (name, email), count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def render_repository(
    repo: GitLanesRepository,
    filters: HistoryFilters | None = None,
    config: LayoutConfig | None = None,
) -> GraphLayout:
    """Fetch history from repo and lay it out"""
    return render_graph(repo.get_commits(filters), config)
