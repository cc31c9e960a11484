"""
Centralized constants for gitlanes.

Conventional branch names, message patterns and loop bounds used by the
layout heuristics. Everything here can be overridden through settings.
"""

# Trunk candidates in priority order (compared case-insensitively)
TRUNK_BRANCH_NAMES = ("main", "master", "develop", "trunk")

# Conventional non-trunk names promoted straight to level 1
LEVEL_ONE_BRANCH_NAMES = ("dev", "develop", "development", "staging", "stage", "test", "testing")

# Commit message fragments that indicate an integration into the trunk
MERGE_MESSAGE_PATTERNS = (
    r"\bmerge\b",
    r"\bmerged\b",
    r"\bpull request\b",
    r"\bmerge request\b",
    r"\bmerged (?:pr|mr)\b",
)

# Bound for the hierarchy leveling loop
MAX_HIERARCHY_ITERATIONS = 8

# Level for branches still unresolved when the loop bound is hit
UNRESOLVED_BRANCH_LEVEL = 1

# Shortest hash prefix kept in the secondary lookup index
MIN_HASH_PREFIX = 4

# Default length of abbreviated hashes
SHORT_HASH_LENGTH = 7

# Settings file location
SETTINGS_PATH = ".config/gitlanes/settings.json"

# Default commit count requested from the history provider
DEFAULT_MAX_COMMITS = 200
