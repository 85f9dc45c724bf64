# src/flatsrc/core/ignore.py
import logging
from pathlib import PurePath
from typing import Iterable, Optional, Union

import pathspec

from flatsrc.config import HIDDEN_PATTERNS

logger = logging.getLogger(__name__)

# Kept apart from user rules so a "!pattern" can never re-include hidden paths
HIDDEN_SPEC = pathspec.PathSpec.from_lines("gitwildmatch", HIDDEN_PATTERNS)


def load_ignore_spec(extra_patterns: Optional[Iterable[str]] = None) -> pathspec.PathSpec:
    """
    Builds the PathSpec of user exclude rules (gitignore syntax).
    Hidden paths are handled by HIDDEN_SPEC and are not part of it.
    """
    lines = list(extra_patterns) if extra_patterns else []
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_hidden(rel_path: Union[str, PurePath]) -> bool:
    path = PurePath(rel_path).as_posix()
    if path in (".", ""):
        return False
    return HIDDEN_SPEC.match_file(path)


def is_path_ignored(
    rel_path: Union[str, PurePath],
    spec: pathspec.PathSpec,
    is_directory: bool = False,
) -> bool:
    """Checks a path relative to the search root against hidden and exclude rules."""
    path = PurePath(rel_path).as_posix()
    if path in (".", ""):
        return False
    if is_hidden(path):
        return True
    if is_directory:
        # "build/" style patterns only match with the trailing slash
        path += "/"
    return spec.match_file(path)
