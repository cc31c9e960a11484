"""Label placement with collision avoidance.

Text extents are estimated from character counts; no font metrics are
available to the layout core.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from gitlanes.config.settings import LayoutConfig

logger = logging.getLogger(__name__)


class Anchor(Enum):
    """Horizontal anchoring of a text label, as in SVG text-anchor."""

    START = "start"
    MIDDLE = "middle"
    END = "end"


@dataclass(frozen=True)
class LabelBox:
    """Estimated footprint of one text baseline."""

    x: float
    y: float
    width: float
    anchor: Anchor = Anchor.MIDDLE

    @property
    def left(self) -> float:
        if self.anchor is Anchor.START:
            return self.x
        if self.anchor is Anchor.END:
            return self.x - self.width
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.left + self.width

    def at(self, y: float) -> "LabelBox":
        return LabelBox(x=self.x, y=y, width=self.width, anchor=self.anchor)


def text_width(text: str, config: LayoutConfig) -> float:
    return len(text) * config.char_width


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters, ending in '...' when shortened."""
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def candidate_offsets(config: LayoutConfig) -> list[float]:
    """Baseline shifts to try, in order: none, then up and down by growing steps."""
    offsets = [0.0]
    for attempt in range(1, config.label_max_attempts + 1):
        step = attempt * config.label_shift_step
        offsets.extend((-step, step))
    return offsets


class LabelPlacer:
    """Places node labels so nearby baselines stay apart.

    Two labels conflict when their estimated horizontal extents overlap
    within the configured neighbourhood and their baselines are closer
    than the spacing (the configured minimum unless given). A label with
    no free candidate keeps its original baseline, or with stack=True
    goes above every label it overlaps horizontally.
    """

    def __init__(
        self, config: LayoutConfig, spacing: float | None = None, stack: bool = False
    ) -> None:
        self.config = config
        self.spacing = config.label_min_spacing if spacing is None else spacing
        self.stack = stack
        self._placed: list[LabelBox] = []

    @property
    def placed(self) -> list[LabelBox]:
        return list(self._placed)

    def _overlapping(self, box: LabelBox) -> list[LabelBox]:
        reach = self.config.label_neighborhood_x
        return [
            other
            for other in self._placed
            if abs(other.x - box.x) <= reach
            and other.right > box.left
            and box.right > other.left
        ]

    def conflicts(self, box: LabelBox) -> bool:
        return any(abs(other.y - box.y) < self.spacing for other in self._overlapping(box))

    def reserve(self, box: LabelBox) -> None:
        """Record a label that must not move (badges, markers)."""
        self._placed.append(box)

    def place(self, box: LabelBox) -> float:
        """Find a free baseline for box, record it, and return its y."""
        for offset in candidate_offsets(self.config):
            candidate = box.at(box.y + offset)
            if not self.conflicts(candidate):
                self._placed.append(candidate)
                return candidate.y

        if self.stack:
            top = min(other.y for other in self._overlapping(box))
            candidate = box.at(top - self.spacing)
            self._placed.append(candidate)
            return candidate.y

        logger.debug("No free baseline for label at (%s, %s)", box.x, box.y)
        self._placed.append(box)
        return box.y


class SideLabelColumn:
    """Baselines for one margin column of branch or tag names.

    Every label in a column shares the same anchor, so only baselines are
    compared. When no shifted candidate is free the label goes below the
    lowest occupied baseline, so no two labels ever end up closer than the
    minimum spacing.
    """

    def __init__(self, config: LayoutConfig) -> None:
        self.config = config
        self.occupied: list[float] = []

    def is_free(self, y: float) -> bool:
        spacing = self.config.label_min_spacing
        return all(abs(y - other) >= spacing for other in self.occupied)

    def place(self, y: float) -> float:
        for offset in candidate_offsets(self.config):
            candidate = y + offset
            if self.is_free(candidate):
                self.occupied.append(candidate)
                return candidate

        candidate = max(self.occupied) + self.config.label_min_spacing
        self.occupied.append(candidate)
        return candidate
