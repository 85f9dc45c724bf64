# src/flatsrc/core/matcher.py
import logging
import os
import re
from typing import Optional, Pattern

from flatsrc.errors import InvalidPatternError

logger = logging.getLogger(__name__)


def wildcard_to_regex(spec: str) -> str:
    """Translates a wildcard such as '*.go' into a regex anchored on both ends."""
    escaped = re.escape(spec)
    escaped = escaped.replace(r"\*", ".*").replace(r"\?", ".")
    return f"^{escaped}$"


class Matcher:
    """
    Inclusion predicate combining a free-form regex (tested against the full path)
    and an optional wildcard extension filter (tested against the base name).
    """

    def __init__(self, pattern: str = "", extension: str = ""):
        self.pattern = pattern
        self.extension = extension

        try:
            self._pattern_re = re.compile(pattern)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

        self._extension_re: Optional[Pattern[str]] = None
        self._extension_broken = False
        if extension:
            try:
                self._extension_re = re.compile(wildcard_to_regex(extension))
            except re.error as e:
                logger.warning(f"Invalid extension filter '{extension}': {e}")
                self._extension_broken = True

    def matches_pattern(self, path: str) -> bool:
        return self._pattern_re.search(path) is not None

    def matches_extension(self, path: str) -> bool:
        if self._extension_broken:
            return False
        if self._extension_re is None:
            return True
        return self._extension_re.fullmatch(os.path.basename(path)) is not None

    def matches(self, path) -> bool:
        path = str(path)
        return self.matches_pattern(path) and self.matches_extension(path)
