"""Reference label parsing.

Labels arrive in whatever shape the history provider produced them:
``git log --decorate`` output (``HEAD -> main``, ``tag: v1.0``,
``origin/feature``), full ref names (``refs/heads/main``) or the
``Branch main`` / ``Tag v1.0`` form used by the display layer. Anything
that cannot be read as a branch or tag is dropped rather than raised.
"""

import logging
import re
from collections.abc import Iterable

from gitlanes.graph.types import RefKind, RefLabel

logger = logging.getLogger(__name__)

# Characters and sequences git refuses in ref names
_INVALID_NAME = re.compile(r"[\s~^:?*\[\\]|\.\.|@\{|//")


def _valid_name(name: str) -> bool:
    if not name or name in ("HEAD", "@"):
        return False
    if name.startswith(("/", "-", ".")) or name.endswith(("/", ".", ".lock")):
        return False
    return _INVALID_NAME.search(name) is None


def _strip_remote(name: str) -> str | None:
    """Drop the remote part of '<remote>/<branch>'; None for '<remote>/HEAD'."""
    _, _, branch = name.partition("/")
    if branch == "HEAD":
        return None
    return branch


def parse_ref_label(raw: object) -> RefLabel | None:
    """Parse one label into a RefLabel, or None if it is unusable."""
    if isinstance(raw, RefLabel):
        return raw
    if not isinstance(raw, str):
        logger.debug("Ignoring non-string ref label %r", raw)
        return None

    label = raw.strip()
    kind = RefKind.BRANCH
    name: str | None = label

    if label.startswith("Branch "):
        name = label[len("Branch ") :].strip()
    elif label.startswith("Tag "):
        kind, name = RefKind.TAG, label[len("Tag ") :].strip()
    elif label.startswith("tag: "):
        kind, name = RefKind.TAG, label[len("tag: ") :].strip()
    elif label.startswith("HEAD -> "):
        name = label[len("HEAD -> ") :].strip()
    elif label.startswith("refs/heads/"):
        name = label[len("refs/heads/") :]
    elif label.startswith("refs/tags/"):
        kind, name = RefKind.TAG, label[len("refs/tags/") :]
    elif label.startswith("refs/remotes/"):
        name = _strip_remote(label[len("refs/remotes/") :])
    elif label.startswith("origin/"):
        name = _strip_remote(label)

    if name is None or "->" in name or not _valid_name(name):
        logger.debug("Ignoring unparseable ref label %r", raw)
        return None
    return RefLabel(name=name, kind=kind)


def parse_ref_labels(raw_labels: Iterable[object]) -> tuple[RefLabel, ...]:
    """Parse many labels, dropping unusable ones and duplicates."""
    parsed: dict[RefLabel, None] = {}
    for raw in raw_labels:
        ref = parse_ref_label(raw)
        if ref is not None:
            parsed.setdefault(ref, None)
    return tuple(parsed)


def parse_decoration(decoration: str) -> tuple[RefLabel, ...]:
    """Parse a ``git log %D`` decoration string ('HEAD -> main, tag: v1')."""
    if not decoration:
        return ()
    return parse_ref_labels(part for part in decoration.split(",") if part.strip())
