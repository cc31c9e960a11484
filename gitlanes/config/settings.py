"""
Settings management for gitlanes
"""

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitlanes.constants import (
    DEFAULT_MAX_COMMITS,
    LEVEL_ONE_BRANCH_NAMES,
    MAX_HIERARCHY_ITERATIONS,
    SETTINGS_PATH,
    TRUNK_BRANCH_NAMES,
)

# Palette of the original renderer, trunk first
DEFAULT_PALETTE = (
    "#1A73E8",  # Blue
    "#34A853",  # Green
    "#FBBC05",  # Yellow
    "#E91E63",  # Pink
    "#00ACC1",  # Cyan
    "#8E24AA",  # Purple
    "#F4511E",  # Orange
    "#7CB342",  # Light green
)


@dataclass(frozen=True)
class Padding:
    """Canvas padding around the graph body."""

    top: float = 96
    right: float = 120
    bottom: float = 96
    left: float = 60


@dataclass(frozen=True)
class LayoutConfig:
    """Immutable knobs for one render pass.

    Every pipeline stage takes one of these, so concurrent renders of
    different snapshots never share mutable state.
    """

    column_gap: float = 180
    row_gap: float = 80
    node_radius: float = 7
    padding: Padding = field(default_factory=Padding)
    palette: tuple[str, ...] = DEFAULT_PALETTE

    # Node text
    author_max: int = 15
    message_max: int = 25
    top_label_offset: float = -25
    bottom_label_offset: float = 35
    badge_offset: float = -45
    badge_step: float = 20
    max_ref_badges: int = 3

    # Label collision avoidance
    label_min_spacing: float = 14
    label_shift_step: float = 12
    label_max_attempts: int = 4
    label_neighborhood_x: float = 180
    char_width: float = 6.5

    # Edge classification and geometry
    direction_threshold: float = 0.25
    merge_curve_strength: float = 0.35

    # Hierarchy heuristics
    trunk_names: tuple[str, ...] = TRUNK_BRANCH_NAMES
    level_one_names: tuple[str, ...] = LEVEL_ONE_BRANCH_NAMES
    max_iterations: int = MAX_HIERARCHY_ITERATIONS

    def lane_color(self, lane: int) -> str:
        """Palette colour for a lane, cycling past the palette size."""
        return self.palette[lane % len(self.palette)]


_MISSING = object()


class Settings:
    """Manages application settings"""

    DEFAULT_SETTINGS: dict[str, Any] = {
        "layout": {
            "column_gap": 180,
            "row_gap": 80,
            "node_radius": 7,
            "padding": {"top": 96, "right": 120, "bottom": 96, "left": 60},
            "palette": list(DEFAULT_PALETTE),
            "author_max": 15,
            "message_max": 25,
            "label_min_spacing": 14,
            "label_shift_step": 12,
            "label_max_attempts": 4,
            "label_neighborhood_x": 180,
            "char_width": 6.5,
            "max_ref_badges": 3,
            "direction_threshold": 0.25,
            "merge_curve_strength": 0.35,
        },
        "git": {
            "max_commits": DEFAULT_MAX_COMMITS,
            "cache_ttl": 30.0,  # Seconds a fetched history stays fresh
            "cache_size": 16,
        },
        "hierarchy": {
            "trunk_names": list(TRUNK_BRANCH_NAMES),
            "level_one_names": list(LEVEL_ONE_BRANCH_NAMES),
            "max_iterations": MAX_HIERARCHY_ITERATIONS,
        },
    }

    # Value checks for the keys that end up in LayoutConfig or HistoryFilters
    POSITIVE_NUMBERS = (
        "layout.column_gap",
        "layout.row_gap",
        "layout.node_radius",
        "layout.char_width",
        "layout.label_min_spacing",
        "layout.label_shift_step",
    )
    NON_NEGATIVE_NUMBERS = (
        "layout.padding.top",
        "layout.padding.right",
        "layout.padding.bottom",
        "layout.padding.left",
        "layout.label_neighborhood_x",
        "layout.direction_threshold",
        "layout.merge_curve_strength",
        "git.cache_ttl",
    )
    COUNTS = (
        "layout.author_max",
        "layout.message_max",
        "layout.label_max_attempts",
        "layout.max_ref_badges",
        "git.max_commits",
        "git.cache_size",
        "hierarchy.max_iterations",
    )
    NAME_LISTS = ("layout.palette", "hierarchy.trunk_names", "hierarchy.level_one_names")

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize settings"""
        if config_path is None:
            config_path = Path.home() / SETTINGS_PATH

        self.config_path = config_path
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self) -> None:
        """Load settings from file, rejecting values the layout cannot use"""
        if not self.config_path.exists():
            return

        with open(self.config_path) as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{self.config_path}: settings must be a JSON object")

        # Merge with defaults so older files keep working
        self._merge_settings(self.settings, loaded)
        problems = self.validate()
        if problems:
            raise ValueError(f"{self.config_path}: " + "; ".join(problems))

    def save(self) -> None:
        """Save settings to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            json.dump(self.settings, f, indent=2)

    def _merge_settings(self, base: dict[str, Any], updates: dict[str, Any]) -> None:
        """Recursively merge settings dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_settings(base[key], value)
            else:
                base[key] = value

    def validate(self) -> list[str]:
        """Problems with the current values, one message per bad key"""
        problems = []
        for section in ("layout", "layout.padding", "git", "hierarchy"):
            if not isinstance(self.get(section), dict):
                problems.append(f"{section} must be an object")
        if problems:
            return problems

        for path in self.POSITIVE_NUMBERS + self.NON_NEGATIVE_NUMBERS + self.COUNTS:
            value = self.get(path)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append(f"{path} must be a number, got {value!r}")
            elif path in self.COUNTS and value != int(value):
                problems.append(f"{path} must be a whole number, got {value!r}")
            elif path in self.POSITIVE_NUMBERS and value <= 0:
                problems.append(f"{path} must be greater than 0, got {value!r}")
            elif value < 0:
                problems.append(f"{path} must not be negative, got {value!r}")

        for path in self.NAME_LISTS:
            value = self.get(path)
            if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
                problems.append(f"{path} must be a list of non-empty strings")
        if not self.get("layout.palette"):
            problems.append("layout.palette must name at least one colour")
        if self.get("hierarchy.max_iterations", 1) == 0:
            problems.append("hierarchy.max_iterations must be at least 1")

        return problems

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-separated path (e.g., 'layout.row_gap')"""
        value: Any = self.settings
        for part in path.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set(self, path: str, value: Any) -> None:
        """Set a setting by dot-separated path; layout values are checked right away"""
        parts = path.split(".")
        target: Any = self.settings
        for part in parts[:-1]:
            target = target.setdefault(part, {})

        previous = target.get(parts[-1], _MISSING)
        target[parts[-1]] = value
        problems = self.validate()
        if problems:
            if previous is _MISSING:
                del target[parts[-1]]
            else:
                target[parts[-1]] = previous
            raise ValueError("; ".join(problems))

    def get_max_commits(self) -> int:
        """Get the number of commits requested from the history provider."""
        max_commits: int = int(self.get("git.max_commits", DEFAULT_MAX_COMMITS))
        return max(1, max_commits)  # At least 1

    def get_cache_ttl(self) -> float:
        """Get how long a fetched history snapshot may be reused, in seconds."""
        return max(0.0, float(self.get("git.cache_ttl", 30.0)))

    def get_cache_size(self) -> int:
        """Get the maximum number of cached history snapshots."""
        return max(1, int(self.get("git.cache_size", 16)))

    def layout_config(self) -> LayoutConfig:
        """Build an immutable LayoutConfig from the current settings."""
        layout: dict[str, Any] = self.get("layout", {})
        hierarchy: dict[str, Any] = self.get("hierarchy", {})
        defaults = LayoutConfig()
        padding = layout.get("padding", {})

        return LayoutConfig(
            column_gap=float(layout.get("column_gap", defaults.column_gap)),
            row_gap=float(layout.get("row_gap", defaults.row_gap)),
            node_radius=float(layout.get("node_radius", defaults.node_radius)),
            padding=Padding(
                top=float(padding.get("top", defaults.padding.top)),
                right=float(padding.get("right", defaults.padding.right)),
                bottom=float(padding.get("bottom", defaults.padding.bottom)),
                left=float(padding.get("left", defaults.padding.left)),
            ),
            palette=tuple(layout.get("palette") or defaults.palette),
            author_max=int(layout.get("author_max", defaults.author_max)),
            message_max=int(layout.get("message_max", defaults.message_max)),
            label_min_spacing=float(layout.get("label_min_spacing", defaults.label_min_spacing)),
            label_shift_step=float(layout.get("label_shift_step", defaults.label_shift_step)),
            label_max_attempts=int(layout.get("label_max_attempts", defaults.label_max_attempts)),
            label_neighborhood_x=float(
                layout.get("label_neighborhood_x", defaults.label_neighborhood_x)
            ),
            char_width=float(layout.get("char_width", defaults.char_width)),
            max_ref_badges=int(layout.get("max_ref_badges", defaults.max_ref_badges)),
            direction_threshold=float(
                layout.get("direction_threshold", defaults.direction_threshold)
            ),
            merge_curve_strength=float(
                layout.get("merge_curve_strength", defaults.merge_curve_strength)
            ),
            trunk_names=tuple(hierarchy.get("trunk_names", defaults.trunk_names)),
            level_one_names=tuple(hierarchy.get("level_one_names", defaults.level_one_names)),
            max_iterations=int(hierarchy.get("max_iterations", defaults.max_iterations)),
        )
