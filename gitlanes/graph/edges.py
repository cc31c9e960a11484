"""Edge geometry for the git graph - cubic curves between commits."""

from dataclasses import dataclass

from gitlanes.config.settings import LayoutConfig
from gitlanes.graph.types import GraphEdge, MergeDirection

Point = tuple[float, float]

# Fraction of the horizontal span used for the first and second control
# points of a merge curve
MERGE_LEAD = 0.2
MERGE_BEND = 0.5

# Minimum horizontal span of a curve
MIN_SPAN = 10


def format_number(value: float) -> str:
    """Render a coordinate with at most two decimals and no trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


@dataclass(frozen=True)
class EdgeStyle:
    stroke_width: float
    opacity: float
    marker: str


MERGE_STYLE = EdgeStyle(stroke_width=2.5, opacity=0.9, marker="merge-arrowhead")
PLAIN_STYLE = EdgeStyle(stroke_width=2, opacity=0.8, marker="arrowhead")


@dataclass(frozen=True)
class EdgePath:
    """A cubic bezier from start to end."""

    start: Point
    c1: Point
    c2: Point
    end: Point

    def to_svg_d(self) -> str:
        """SVG path data ("M x y C x1 y1, x2 y2, x y")."""
        sx, sy = (format_number(v) for v in self.start)
        ax, ay = (format_number(v) for v in self.c1)
        bx, by = (format_number(v) for v in self.c2)
        ex, ey = (format_number(v) for v in self.end)
        return f"M {sx} {sy} C {ax} {ay}, {bx} {by}, {ex} {ey}"


def edge_style(edge: GraphEdge) -> EdgeStyle:
    return MERGE_STYLE if edge.is_merge else PLAIN_STYLE


def build_edge_path(edge: GraphEdge, config: LayoutConfig) -> EdgePath:
    """
    Curve from the child node (left) to the parent node (right).

    COORDINATE SYSTEM NOTE:
    Time runs right to left: the child is always the newer commit, so
    start.x < end.x. Lanes grow downward: an UP edge (parent in a higher
    lane) ends lower on the canvas than it starts.

    Plain edges use a symmetric S-curve through the midpoint. Merge edges
    bend early toward the parent's lane when the parent is in a higher
    lane, late when it is in a lower one, and arc above the line when both
    share a lane. Merges into the trunk bend earlier still so they stand
    out from lateral merges.
    """
    start = (edge.source.x, edge.source.y)
    end = (edge.target.x, edge.target.y)
    dx = max(MIN_SPAN, end[0] - start[0])

    if not edge.is_merge:
        return EdgePath(
            start=start,
            c1=(start[0] + dx / 2, start[1]),
            c2=(end[0] - dx / 2, end[1]),
            end=end,
        )

    strength = config.merge_curve_strength
    direction = edge.merge_direction

    if direction is MergeDirection.UP:
        lead, bend = MERGE_LEAD, MERGE_BEND
        if edge.is_merge_to_root:
            lead *= 1 - strength
            bend -= strength / 2
        return EdgePath(
            start=start,
            c1=(start[0] + dx * lead, start[1]),
            c2=(start[0] + dx * bend, end[1]),
            end=end,
        )

    if direction is MergeDirection.DOWN:
        return EdgePath(
            start=start,
            c1=(end[0] - dx * MERGE_BEND, start[1]),
            c2=(end[0] - dx * MERGE_LEAD, end[1]),
            end=end,
        )

    # Same lane: lift the curve so it does not hide the straight trunk line
    lift = config.row_gap * strength
    return EdgePath(
        start=start,
        c1=(start[0] + dx / 3, start[1] - lift),
        c2=(end[0] - dx / 3, end[1] - lift),
        end=end,
    )
