from __future__ import annotations

# Path grammar markers.
ROOT_MARKER = "root"
VIEWER_LEFT = "left"
VIEWER_RIGHT = "right"
VIEWER_IDS = (VIEWER_LEFT, VIEWER_RIGHT)

# Identity segment separators: "[k1=v1|k2=v2]" in paths, "k1+k2" for the key name.
IDENTITY_ASSIGN = "="
IDENTITY_PAIR_SEPARATOR = "|"
COMPOSITE_KEY_SEPARATOR = "+"

# Identity-key detection heuristics. Neither threshold has a principled
# derivation; both are tunable through DetectorSettings.
MIN_OBJECT_PROPORTION = 0.8
MIN_OVERLAP_RATIO = 0.5
PREFERRED_IDENTITY_KEYS = ("id", "key", "uuid", "name", "_id")
MAX_COMPOSITE_KEY_SIZE = 3

# Diff kinds.
DIFF_ADDED = "added"
DIFF_REMOVED = "removed"
DIFF_CHANGED = "changed"
DIFF_KINDS = (DIFF_ADDED, DIFF_REMOVED, DIFF_CHANGED)

# Highlight classification statuses, in match priority order.
CLASSIFICATION_EXACT = "exact"
CLASSIFICATION_DESCENDANT = "descendant"
CLASSIFICATION_ANCESTOR = "ancestor"
CLASSIFICATION_NONE = "none"

# Observer event names.
EVENT_IDENTITY_KEY_DETECTED = "identity_key_detected"
EVENT_POSITIONAL_ARRAY = "positional_array"
EVENT_DIFF_EMITTED = "diff_emitted"

REPORT_SCHEMA_VERSION = "1"

EXIT_SUCCESS = 0
EXIT_DIFFERENCES = 1
EXIT_INTERNAL_ERROR = 2
