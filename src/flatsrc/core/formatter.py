# src/flatsrc/core/formatter.py
from typing import Iterable, List

from flatsrc.models import ArtifactEntry, FlattenResult


def render_block(rel_path: str, content: str) -> str:
    return f"### {rel_path}\n```\n{content}\n```\n"


def render_artifact(entries: Iterable[ArtifactEntry]) -> str:
    """Fenced blocks in acceptance order, separated by blank lines."""
    return "\n".join(render_block(e.rel_path, e.content) for e in entries)


def render_summary(result: FlattenResult) -> str:
    request, state = result.request, result.state

    lines: List[str] = [
        "--- flatsrc summary ---",
        f"Files included: {state.included_files}",
        f"Tokens used (est.): {state.current_tokens} / {request.max_tokens}",
        f"Depth limit: {request.depth_limit}",
        f"Search root: {request.base_path}",
    ]
    if request.pattern:
        lines.append(f"Pattern: {request.pattern}")
    if request.extension:
        lines.append(f"Extension filter: {request.extension}")
    if request.exclude:
        lines.append(f"Excluded: {', '.join(request.exclude)}")

    if state.truncated:
        lines.append(f"Note: {result.entries[0].rel_path} was truncated to fit the budget")
    if state.cutoff:
        lines.append("Note: token limit reached, remaining files were not included")
    for rel_path, reason in state.skipped:
        lines.append(f"Skipped: {rel_path} ({reason})")

    return "\n".join(lines) + "\n"
