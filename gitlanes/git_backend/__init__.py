"""Git backend supplying commit history to the layout"""

from gitlanes.git_backend.cache import CachedHistoryProvider, HistoryCache
from gitlanes.git_backend.repository import (
    AuthorInfo,
    BranchInfo,
    GitLanesRepository,
    HistoryFilters,
    TagInfo,
    count_authors,
    render_repository,
)

__all__ = [
    "AuthorInfo",
    "BranchInfo",
    "CachedHistoryProvider",
    "GitLanesRepository",
    "HistoryCache",
    "HistoryFilters",
    "TagInfo",
    "count_authors",
    "render_repository",
]
