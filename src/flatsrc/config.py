# src/flatsrc/config.py

DEFAULT_MAX_TOKENS = 200000
DEFAULT_DEPTH_LIMIT = 10

# Any dot-prefixed segment hides the file or the whole subtree
HIDDEN_PATTERNS = [
    "# Hidden files and directories",
    ".*",
]

TRUNCATION_MARKER = "... (truncated)"

# Characters counted as separate half-tokens by the heuristic estimator
TOKEN_SYMBOLS = frozenset("{}[]()<>+-*/=,.:;\"'!?@#$%^&")
