"""Shared fixtures: a small pygit2 repository with a merged feature branch."""

from dataclasses import dataclass

import pygit2
import pytest


@dataclass
class SampleRepo:
    path: str
    root: str  # first main commit, tagged v1
    main_tip: str  # second main commit, tagged v2 (annotated)
    feature: str  # feature commit by Bob
    merge: str  # merge of feature into main


def _signature(name: str, email: str, offset: int) -> pygit2.Signature:
    return pygit2.Signature(name, email, 1_700_000_000 + offset * 60, 0)


@pytest.fixture
def sample_repo(tmp_path) -> SampleRepo:
    """
    main:    root -- main_tip -- merge
                \\                /
    feature:     `-- feature ---'
    """
    repo = pygit2.init_repository(str(tmp_path), initial_head="main")
    tree = repo.TreeBuilder().write()

    alice = _signature("Alice", "alice@example.com", 0)
    root = repo.create_commit("refs/heads/main", alice, alice, "Initial commit", tree, [])

    alice = _signature("Alice", "alice@example.com", 1)
    main_tip = repo.create_commit("refs/heads/main", alice, alice, "Add readme", tree, [root])

    bob = _signature("Bob", "bob@example.com", 2)
    feature = repo.create_commit("refs/heads/feature", bob, bob, "Add feature", tree, [root])

    alice = _signature("Alice", "alice@example.com", 3)
    merge = repo.create_commit(
        "refs/heads/main", alice, alice, "Merge branch 'feature'", tree, [main_tip, feature]
    )

    repo.create_reference("refs/tags/v1", root)
    repo.create_tag("v2", main_tip, pygit2.enums.ObjectType.COMMIT, alice, "Release 2")

    return SampleRepo(
        path=str(tmp_path),
        root=str(root),
        main_tip=str(main_tip),
        feature=str(feature),
        merge=str(merge),
    )
