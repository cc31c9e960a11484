"""Tests for label placement and collision avoidance."""

from itertools import combinations

from gitlanes.config.settings import LayoutConfig
from gitlanes.graph.labels import (
    Anchor,
    LabelBox,
    LabelPlacer,
    SideLabelColumn,
    candidate_offsets,
    text_width,
    truncate,
)


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("short", 15) == "short"
        assert truncate("x" * 15, 15) == "x" * 15

    def test_long_text(self):
        assert truncate("abcdefghijklmnopqrstuvwxyz", 25) == "abcdefghijklmnopqrstuv..."
        assert len(truncate("a" * 100, 15)) == 15


class TestLabelBox:
    def test_extents(self):
        assert LabelBox(x=100, y=0, width=40).left == 80
        assert LabelBox(x=100, y=0, width=40, anchor=Anchor.START).left == 100
        assert LabelBox(x=100, y=0, width=40, anchor=Anchor.END).right == 100

    def test_text_width(self):
        assert text_width("abcd", LayoutConfig(char_width=5)) == 20


class TestLabelPlacer:
    """Node label placement."""

    def test_offsets_try_up_first(self):
        assert candidate_offsets(LayoutConfig()) == [0, -12, 12, -24, 24, -36, 36, -48, 48]

    def test_free_baseline_kept(self):
        placer = LabelPlacer(LayoutConfig())
        assert placer.place(LabelBox(x=100, y=50, width=60)) == 50

    def test_conflicts_shift_up_then_down(self):
        placer = LabelPlacer(LayoutConfig())
        box = LabelBox(x=100, y=50, width=60)
        assert placer.place(box) == 50
        assert placer.place(box) == 26
        assert placer.place(box) == 74

    def test_distant_labels_do_not_conflict(self):
        placer = LabelPlacer(LayoutConfig())
        placer.place(LabelBox(x=100, y=50, width=60))
        assert placer.place(LabelBox(x=1000, y=50, width=60)) == 50

    def test_non_overlapping_extents_do_not_conflict(self):
        placer = LabelPlacer(LayoutConfig())
        placer.place(LabelBox(x=100, y=50, width=60))
        assert placer.place(LabelBox(x=170, y=50, width=60)) == 50

    def test_reserved_boxes_are_obstacles(self):
        placer = LabelPlacer(LayoutConfig())
        placer.reserve(LabelBox(x=100, y=50, width=40))
        assert placer.place(LabelBox(x=100, y=50, width=60)) == 26

    def test_exhausted_attempts_keep_original(self):
        placer = LabelPlacer(LayoutConfig(label_max_attempts=0))
        box = LabelBox(x=100, y=50, width=60)
        placer.place(box)
        assert placer.place(box) == 50
        assert len(placer.placed) == 2

    def test_custom_spacing(self):
        placer = LabelPlacer(LayoutConfig(), spacing=16)
        box = LabelBox(x=100, y=50, width=60)
        placer.place(box)
        # 12 is enough for the default spacing, not for 16
        assert placer.place(box) == 26

    def test_stacking_goes_above_everything_overlapping(self):
        placer = LabelPlacer(LayoutConfig(label_max_attempts=0), spacing=16, stack=True)
        box = LabelBox(x=100, y=50, width=60)
        assert placer.place(box) == 50
        assert placer.place(box) == 34
        assert placer.place(LabelBox(x=120, y=50, width=60)) == 18
        assert not placer.conflicts(LabelBox(x=100, y=2, width=60))


class TestSideLabelColumn:
    """Margin labels never end up closer than the minimum spacing."""

    def test_shifts(self):
        column = SideLabelColumn(LayoutConfig())
        assert column.place(96) == 96
        assert column.place(96) == 72
        assert column.place(96) == 120

    def test_fallback_below_lowest(self):
        column = SideLabelColumn(LayoutConfig(label_max_attempts=0))
        assert column.place(96) == 96
        assert column.place(96) == 110
        assert column.place(96) == 124

    def test_many_labels_on_one_row(self):
        config = LayoutConfig()
        column = SideLabelColumn(config)
        ys = [column.place(96) for _ in range(20)]
        for a, b in combinations(ys, 2):
            assert abs(a - b) >= config.label_min_spacing
