"""Tests for graph building: positions, parent lookup and edge classification."""

from gitlanes.config.settings import DEFAULT_PALETTE, LayoutConfig
from gitlanes.graph.builder import build_graph, classify_direction, node_position
from gitlanes.graph.hierarchy import infer_hierarchy
from gitlanes.graph.index import CommitIndex
from gitlanes.graph.lanes import assign_lanes
from gitlanes.graph.types import Commit, GraphNode, LaneAssignment, MergeDirection


def commit(hash, parents=(), branches=(), message=""):
    return Commit(hash=hash, parents=parents, refs=[f"Branch {b}" for b in branches], message=message)


def build(commits, config=None):
    hierarchy = infer_hierarchy(commits)
    lanes = assign_lanes(commits, hierarchy)
    return build_graph(commits, lanes, hierarchy, config)


def scenario():
    return [
        commit("D", ("A", "C"), ["main"], "Merge branch 'feature'"),
        commit("C", ("B",), ["feature"]),
        commit("A", ("B",), ["main"]),
        commit("B", (), ["main"]),
    ]


class TestCommitIndex:
    """Exact and prefix hash lookup."""

    def test_exact(self):
        index = CommitIndex([commit("abcdef1234")])
        assert index.get("abcdef1234").hash == "abcdef1234"

    def test_abbreviated_query(self):
        index = CommitIndex([commit("abcdef1234"), commit("abcd999999")])
        assert index.get("abcdef1").hash == "abcdef1234"
        assert index.get("abcd99").hash == "abcd999999"

    def test_abbreviated_stored_hash(self):
        index = CommitIndex([commit("abcdef1")])
        assert index.get("abcdef1234567890").hash == "abcdef1"

    def test_short_query(self):
        index = CommitIndex([commit("f00dbabe")])
        assert index.get("f0").hash == "f00dbabe"

    def test_missing(self):
        index = CommitIndex([commit("abcdef1234")])
        assert index.get("1234567") is None
        assert index.get("") is None
        assert "1234567" not in index
        assert "abcdef" in index

    def test_parents_skip_boundary(self):
        child = commit("cccc1111", ("aaaa1111", "gone0000"))
        index = CommitIndex([child, commit("aaaa1111")])
        assert [p.hash for p in index.parents_of(child)] == ["aaaa1111"]


class TestNodes:
    """Node placement and colour."""

    def test_positions(self):
        nodes, _ = build(scenario())
        config = LayoutConfig()
        for slot, node in enumerate(nodes):
            assert node.slot == slot
            assert node.x == config.padding.left + slot * config.column_gap
            assert node.y == config.padding.top + node.lane * config.row_gap
            assert node.color == DEFAULT_PALETTE[node.lane]

    def test_newest_leftmost(self):
        nodes, _ = build(scenario())
        assert [node.hash for node in nodes] == ["D", "C", "A", "B"]
        assert nodes[0].x < nodes[-1].x

    def test_palette_cycles(self):
        config = LayoutConfig()
        assert config.lane_color(len(config.palette) + 1) == config.palette[1]

    def test_node_position(self):
        x, y = node_position(2, 1, LayoutConfig())
        assert (x, y) == (60 + 360, 96 + 80)


class TestEdges:
    """Edge emission and classification."""

    def test_scenario_edges(self):
        nodes, edges = build(scenario())
        by_pair = {(edge.source.hash, edge.target.hash): edge for edge in edges}
        assert set(by_pair) == {("D", "A"), ("D", "C"), ("C", "B"), ("A", "B")}

        primary = by_pair[("D", "A")]
        assert primary.is_merge
        assert primary.is_primary
        assert primary.merge_direction is MergeDirection.SAME
        assert not primary.is_merge_to_root
        assert primary.color == primary.source.color

        merged = by_pair[("D", "C")]
        assert merged.is_merge
        assert merged.parent_index == 1
        assert merged.merge_direction is MergeDirection.UP
        assert merged.is_merge_to_root
        assert merged.color == merged.target.color == DEFAULT_PALETTE[1]

        plain = by_pair[("C", "B")]
        assert not plain.is_merge
        assert not plain.is_merge_to_root
        assert plain.merge_direction is MergeDirection.DOWN

    def test_boundary_parent_has_no_edge(self):
        nodes, edges = build([commit("bbbb2222", ("aaaa1111",)), commit("cccc3333", ("outside1",))])
        assert len(nodes) == 2
        assert edges == []

    def test_abbreviated_parent_hash(self):
        nodes, edges = build([commit("bbbb2222ffff", ("aaaa111",)), commit("aaaa1111ffff")])
        assert len(edges) == 1
        assert edges[0].target.hash == "aaaa1111ffff"

    def test_no_dangling_edges(self):
        commits = [
            commit("m3", ("m2", "f1"), ["main"]),
            commit("f1", ("m1",), ["feature"]),
            commit("m2", ("m1", "gone")),
            commit("m1", ("older",)),
        ]
        nodes, edges = build(commits)
        hashes = {node.hash for node in nodes}
        assert all(edge.target.hash in hashes and edge.source.hash in hashes for edge in edges)
        assert len(edges) == 4

    def test_single_commit(self):
        nodes, edges = build([commit("only")])
        assert len(nodes) == 1
        assert edges == []

    def test_merge_into_feature_is_not_to_root(self):
        """Only merges that land on the trunk count as merge-to-root."""
        commits = [
            commit("fm", ("f1", "m1"), ["feature"], "Merge branch 'main' into feature"),
            commit("m1", ("base",), ["main"]),
            commit("f1", ("base",), ["feature"]),
            commit("base", (), ["main"]),
        ]
        _, edges = build(commits)
        assert edges
        assert not any(edge.is_merge_to_root for edge in edges)


class TestClassifyDirection:
    """Direction thresholds."""

    def node(self, lane, y=None):
        config = LayoutConfig()
        return GraphNode(
            commit=commit(f"n{lane}"),
            x=0,
            y=y if y is not None else config.padding.top + lane * config.row_gap,
            lane=lane,
            color=config.lane_color(lane),
        )

    def test_up_down_same(self):
        config = LayoutConfig()
        assert classify_direction(self.node(0), self.node(1), config) is MergeDirection.UP
        assert classify_direction(self.node(1), self.node(0), config) is MergeDirection.DOWN
        assert classify_direction(self.node(1), self.node(1), config) is MergeDirection.SAME

    def test_small_displacement_is_same(self):
        config = LayoutConfig()
        child = self.node(0, y=100)
        parent = self.node(0, y=100 + config.direction_threshold * config.row_gap)
        assert classify_direction(child, parent, config) is MergeDirection.SAME

    def test_lane_assignment_defaults(self):
        assert LaneAssignment().lane_of("unknown") == 0
        assert LaneAssignment().max_lane == 0
