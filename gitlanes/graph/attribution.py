"""Branch attribution rules.

A commit rarely says which branch it was created on. The rules below pick
the most plausible branch from its labels and message, in priority order:
explicit label evidence, then message patterns, then the structural
default (the trunk). The table is plain data so it can be inspected and
tested without running a layout.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gitlanes.constants import MERGE_MESSAGE_PATTERNS
from gitlanes.graph.types import BranchHierarchy, Commit

_MERGE_MESSAGE = re.compile("|".join(MERGE_MESSAGE_PATTERNS), re.IGNORECASE)


def is_merge_message(message: str) -> bool:
    """True if the message reads like a merge or integration commit."""
    return bool(message) and _MERGE_MESSAGE.search(message) is not None


@dataclass(frozen=True)
class AttributionContext:
    """Everything a rule may look at for one commit."""

    branches: Sequence[str]
    root: str | None
    message: str


@dataclass(frozen=True)
class Attribution:
    """Outcome of attributing a commit to a branch."""

    branch: str | None
    rule: str
    inferred: bool = False  # True when no label backed the choice


@dataclass(frozen=True)
class AttributionRule:
    name: str
    applies: Callable[[AttributionContext], bool]
    choose: Callable[[AttributionContext], str | None]
    inferred: bool = False


def _first_non_root(ctx: AttributionContext) -> str | None:
    for branch in ctx.branches:
        if branch != ctx.root:
            return branch
    return ctx.branches[0] if ctx.branches else ctx.root


ATTRIBUTION_RULES: tuple[AttributionRule, ...] = (
    AttributionRule(
        name="unlabelled",
        applies=lambda ctx: not ctx.branches,
        choose=lambda ctx: ctx.root,
        inferred=True,
    ),
    AttributionRule(
        name="single-label",
        applies=lambda ctx: len(ctx.branches) == 1,
        choose=lambda ctx: ctx.branches[0],
    ),
    AttributionRule(
        name="root-label",
        applies=lambda ctx: ctx.root is not None and ctx.root in ctx.branches,
        choose=lambda ctx: ctx.root,
    ),
    AttributionRule(
        name="merge-message",
        applies=lambda ctx: ctx.root is not None and is_merge_message(ctx.message),
        choose=lambda ctx: ctx.root,
    ),
    AttributionRule(
        name="non-root-label",
        applies=lambda ctx: True,
        choose=_first_non_root,
    ),
)


def attribute(
    commit: Commit,
    hierarchy: BranchHierarchy,
    rules: Sequence[AttributionRule] = ATTRIBUTION_RULES,
) -> Attribution:
    """Pick the branch a commit most plausibly belongs to."""
    ctx = AttributionContext(
        branches=commit.branch_names,
        root=hierarchy.root,
        message=commit.message,
    )
    for rule in rules:
        if rule.applies(ctx):
            return Attribution(branch=rule.choose(ctx), rule=rule.name, inferred=rule.inferred)
    return Attribution(branch=hierarchy.root, rule="default", inferred=True)
