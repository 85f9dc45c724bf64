# src/flatsrc/core/aggregator.py
import logging
from typing import Iterable, List, Optional, Tuple

from flatsrc.config import TRUNCATION_MARKER
from flatsrc.models import ArtifactEntry, FileCandidate, FlattenRequest, RunState
from flatsrc.utils.tokenizer import TokenEstimator, estimate_tokens

logger = logging.getLogger(__name__)


def _join_lines(kept: List[str]) -> str:
    prefix = "".join(kept)
    if prefix and not prefix.endswith("\n"):
        prefix += "\n"
    return prefix


def truncate_content(content: str, max_tokens: int, estimator: TokenEstimator = estimate_tokens) -> str:
    """
    Keeps whole lines while their running estimate fits in max_tokens, then
    appends the truncation marker. At least one line is always cut, and lines
    are dropped until the result is shorter than the input. Content no longer
    than the marker itself comes back as the bare marker.
    """
    lines = content.splitlines(keepends=True)
    kept: List[str] = []
    current = 0

    for line in lines:
        line_tokens = estimator(line)
        if current + line_tokens > max_tokens:
            break
        kept.append(line)
        current += line_tokens

    if lines and len(kept) == len(lines):
        # Per-line estimates undercount the whole file; cut the last line
        kept.pop()

    while kept and len(_join_lines(kept)) + len(TRUNCATION_MARKER) >= len(content):
        kept.pop()

    return _join_lines(kept) + TRUNCATION_MARKER


def _read_text(candidate: FileCandidate, state: RunState) -> Optional[str]:
    try:
        with candidate.path.open("rb") as f:
            raw = f.read()
    except OSError as e:
        logger.debug(f"Skipping {candidate.rel_path} (read error: {e})")
        state.skipped.append((candidate.rel_path, "read error"))
        return None

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Skipping {candidate.rel_path} (not valid UTF-8)")
        state.skipped.append((candidate.rel_path, "not UTF-8"))
        return None


def aggregate(
    candidates: Iterable[FileCandidate],
    request: FlattenRequest,
    estimator: TokenEstimator = estimate_tokens,
) -> Tuple[List[ArtifactEntry], RunState]:
    """
    Accepts candidates in order until the token budget is spent.

    A file that does not fit ends the run once anything has been included.
    Only the very first file may be truncated to fit, and it is then the
    sole entry.
    """
    state = RunState()
    entries: List[ArtifactEntry] = []
    budget = request.max_tokens

    for candidate in candidates:
        content = _read_text(candidate, state)
        if content is None:
            continue

        file_tokens = estimator(content)

        if state.current_tokens + file_tokens <= budget:
            entries.append(ArtifactEntry(candidate.rel_path, content, file_tokens))
            state.current_tokens += file_tokens
            state.included_files += 1

            if state.current_tokens >= budget:
                break
            continue

        if state.included_files > 0:
            state.cutoff = True
            logger.info(
                f"Token limit ({budget}) reached at {candidate.rel_path}; "
                f"included files: {state.included_files}"
            )
            break

        logger.info(
            f"First file '{candidate.rel_path}' is too large "
            f"(estimated {file_tokens} tokens); truncating to {budget}"
        )
        entries.append(
            ArtifactEntry(
                candidate.rel_path,
                truncate_content(content, budget, estimator),
                budget,
                truncated=True,
            )
        )
        state.current_tokens = budget
        state.included_files = 1
        state.truncated = True
        break

    return entries, state
