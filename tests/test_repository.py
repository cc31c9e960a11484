"""Tests for the pygit2-backed history provider."""

import pytest

from gitlanes.git_backend.repository import GitLanesRepository, HistoryFilters, render_repository


class TestGitLanesRepository:
    """History, branches and tags from a real repository."""

    def test_not_in_repository(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ValueError, match="Not in a git repository"):
            GitLanesRepository()

    def test_finds_repository_from_subdirectory(self, sample_repo, tmp_path, monkeypatch):
        subdir = tmp_path / "sub"
        subdir.mkdir()
        monkeypatch.chdir(subdir)
        assert len(GitLanesRepository().get_commits()) == 4

    def test_commits_newest_first(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits()
        hashes = [c.hash for c in commits]
        assert hashes[0] == sample_repo.merge
        assert hashes[-1] == sample_repo.root
        assert set(hashes) == {sample_repo.root, sample_repo.main_tip, sample_repo.feature, sample_repo.merge}

    def test_commit_fields(self, sample_repo):
        commits = {c.hash: c for c in GitLanesRepository(sample_repo.path).get_commits()}
        merge = commits[sample_repo.merge]
        assert merge.parents == (sample_repo.main_tip, sample_repo.feature)
        assert merge.is_merge
        assert merge.author == "Alice"
        assert merge.author_email == "alice@example.com"
        assert merge.message == "Merge branch 'feature'"
        assert merge.timestamp is not None
        assert merge.short_hash == sample_repo.merge[:7]

    def test_ref_labels(self, sample_repo):
        commits = {c.hash: c for c in GitLanesRepository(sample_repo.path).get_commits()}
        assert commits[sample_repo.merge].branch_names == ["main"]
        assert commits[sample_repo.feature].branch_names == ["feature"]
        assert commits[sample_repo.root].tag_names == ["v1"]
        assert commits[sample_repo.main_tip].tag_names == ["v2"]

    def test_max_commits(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(max_commits=2))
        assert len(commits) == 2

    def test_hide_merges(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(show_merges=False))
        assert len(commits) == 3
        assert not any(c.is_merge for c in commits)

    def test_author_filter(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(author="bob"))
        assert [c.hash for c in commits] == [sample_repo.feature]

    def test_message_filter(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(message="README"))
        assert [c.hash for c in commits] == [sample_repo.main_tip]

    def test_branch_filter(self, sample_repo):
        commits = GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(branch="feature"))
        assert [c.hash for c in commits] == [sample_repo.feature, sample_repo.root]

    def test_unknown_branch(self, sample_repo):
        with pytest.raises(KeyError):
            GitLanesRepository(sample_repo.path).get_commits(HistoryFilters(branch="nope"))

    def test_branches(self, sample_repo):
        branches = GitLanesRepository(sample_repo.path).get_branches()
        assert [b.name for b in branches] == ["feature", "main"]
        main = branches[1]
        assert main.is_current
        assert main.target == sample_repo.merge
        assert not main.is_remote

    def test_tags(self, sample_repo):
        tags = GitLanesRepository(sample_repo.path).get_tags()
        assert [(t.name, t.target) for t in tags] == [("v1", sample_repo.root), ("v2", sample_repo.main_tip)]

    def test_authors(self, sample_repo):
        authors = GitLanesRepository(sample_repo.path).get_authors()
        assert [(a.name, a.email, a.commit_count) for a in authors] == [
            ("Alice", "alice@example.com", 3),
            ("Bob", "bob@example.com", 1),
        ]


class TestRenderRepository:
    def test_layout_from_repository(self, sample_repo):
        layout = render_repository(GitLanesRepository(sample_repo.path))
        assert len(layout.nodes) == 4
        assert layout.hierarchy.root == "main"
        assert layout.hierarchy.level_of("feature") == 1
        lanes = {node.hash: node.lane for node in layout.nodes}
        assert lanes[sample_repo.merge] == 0
        assert lanes[sample_repo.main_tip] == 0
        assert lanes[sample_repo.root] == 0
        assert lanes[sample_repo.feature] == 1
        merged = next(e for e in layout.edges if e.target.hash == sample_repo.feature)
        assert merged.is_merge_to_root
