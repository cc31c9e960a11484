"""Tests for reference label parsing."""

import pytest

from gitlanes.graph.refs import parse_decoration, parse_ref_label, parse_ref_labels
from gitlanes.graph.types import Commit, RefKind, RefLabel


class TestParseRefLabel:
    """Every label shape the providers hand in."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Branch main", RefLabel("main", RefKind.BRANCH)),
            ("Tag v1.0", RefLabel("v1.0", RefKind.TAG)),
            ("tag: v2", RefLabel("v2", RefKind.TAG)),
            ("HEAD -> main", RefLabel("main", RefKind.BRANCH)),
            ("refs/heads/feature/login", RefLabel("feature/login", RefKind.BRANCH)),
            ("refs/tags/release-3", RefLabel("release-3", RefKind.TAG)),
            ("refs/remotes/upstream/dev", RefLabel("dev", RefKind.BRANCH)),
            ("origin/feature", RefLabel("feature", RefKind.BRANCH)),
            ("topic", RefLabel("topic", RefKind.BRANCH)),
            ("  Branch padded  ", RefLabel("padded", RefKind.BRANCH)),
        ],
    )
    def test_known_shapes(self, raw, expected):
        assert parse_ref_label(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "HEAD", "origin/HEAD", "refs/remotes/origin/HEAD", "has space", "a..b", "x~1", "name.lock", "a -> b"],
    )
    def test_unparseable_labels_are_dropped(self, raw):
        assert parse_ref_label(raw) is None

    def test_non_string_is_dropped(self):
        assert parse_ref_label(42) is None
        assert parse_ref_label(None) is None

    def test_ref_label_passes_through(self):
        label = RefLabel("main", RefKind.BRANCH)
        assert parse_ref_label(label) is label

    def test_str_form(self):
        assert str(RefLabel("main", RefKind.BRANCH)) == "Branch main"
        assert str(RefLabel("v1", RefKind.TAG)) == "Tag v1"


class TestParseMany:
    """Batches of labels and decoration strings."""

    def test_duplicates_removed_in_order(self):
        labels = parse_ref_labels(["Branch main", "origin/main", "tag: v1", "Branch main"])
        assert labels == (RefLabel("main", RefKind.BRANCH), RefLabel("v1", RefKind.TAG))

    def test_decoration_string(self):
        labels = parse_decoration("HEAD -> main, origin/main, origin/HEAD, tag: v1.2")
        assert labels == (RefLabel("main", RefKind.BRANCH), RefLabel("v1.2", RefKind.TAG))

    def test_empty_decoration(self):
        assert parse_decoration("") == ()

    def test_commit_parses_string_refs(self):
        """Garbage labels never make Commit construction fail."""
        commit = Commit(hash="abc1234", refs=["Branch main", "bad label", "Tag v1"])
        assert commit.branch_names == ["main"]
        assert commit.tag_names == ["v1"]


class TestCommit:
    """Commit value defaults and hash matching."""

    def test_defaults(self):
        commit = Commit(hash="0123456789abcdef", parents=["aaaa"], message="Fix it")
        assert commit.short_hash == "0123456"
        assert commit.full_message == "Fix it"
        assert commit.parents == ("aaaa",)
        assert not commit.is_merge

    def test_merge(self):
        assert Commit(hash="m", parents=("a", "b")).is_merge

    def test_prefix_matching_both_ways(self):
        commit = Commit(hash="abcdef123456")
        assert commit.matches("abcdef1")
        assert commit.matches("abcdef123456")
        assert not commit.matches("abcdee")
        assert Commit(hash="abcd").matches("abcdef123456")
        assert not commit.matches("")
