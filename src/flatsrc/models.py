# src/flatsrc/models.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from flatsrc.config import DEFAULT_DEPTH_LIMIT, DEFAULT_MAX_TOKENS
from flatsrc.errors import MissingFilterError


@dataclass(frozen=True)
class FlattenRequest:
    """Immutable, fully-resolved options for one flatten run."""
    pattern: str
    extension: str
    max_tokens: int
    depth_limit: int
    base_path: Path
    debug: bool = False
    exclude: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        pattern: str = "",
        extension: str = "",
        max_tokens: Optional[int] = None,
        depth_limit: Optional[int] = None,
        base_path: Union[str, Path, None] = None,
        debug: bool = False,
        exclude: Iterable[str] = (),
    ) -> "FlattenRequest":
        """
        Resolves defaults and validates caller input.
        Non-positive limits fall back to the defaults; an empty path means the cwd.
        """
        pattern = pattern or ""
        extension = extension or ""
        if not pattern and not extension:
            raise MissingFilterError()

        if not max_tokens or max_tokens <= 0:
            max_tokens = DEFAULT_MAX_TOKENS
        if not depth_limit or depth_limit <= 0:
            depth_limit = DEFAULT_DEPTH_LIMIT

        base = Path(base_path) if base_path else Path(os.getcwd())

        return cls(
            pattern=pattern,
            extension=extension,
            max_tokens=max_tokens,
            depth_limit=depth_limit,
            base_path=base,
            debug=debug,
            exclude=tuple(exclude),
        )


@dataclass(frozen=True)
class FileCandidate:
    path: Path
    rel_path: str


@dataclass(frozen=True)
class ArtifactEntry:
    rel_path: str
    content: str
    tokens: int
    truncated: bool = False


@dataclass
class RunState:
    """Running counters owned by a single aggregation pass."""
    current_tokens: int = 0
    included_files: int = 0
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    cutoff: bool = False
    truncated: bool = False


@dataclass
class FlattenResult:
    request: FlattenRequest
    entries: List[ArtifactEntry]
    state: RunState

    @property
    def text(self) -> str:
        from flatsrc.core.formatter import render_artifact
        return render_artifact(self.entries)
