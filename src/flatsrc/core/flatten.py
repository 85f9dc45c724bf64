# src/flatsrc/core/flatten.py
import logging

from flatsrc.core.aggregator import aggregate
from flatsrc.core.ignore import load_ignore_spec
from flatsrc.core.matcher import Matcher
from flatsrc.core.scanner import ProjectScanner
from flatsrc.errors import InvalidPatternError, NoMatchError
from flatsrc.models import FlattenRequest, FlattenResult
from flatsrc.utils.tokenizer import TokenEstimator, estimate_tokens

logger = logging.getLogger(__name__)


def flatten(request: FlattenRequest, estimator: TokenEstimator = estimate_tokens) -> FlattenResult:
    """
    Runs one flatten pass: match, walk, then fill the token budget.
    Raises InvalidPatternError, TraversalError or NoMatchError.
    """
    matcher = Matcher(request.pattern, request.extension)

    try:
        ignore_spec = load_ignore_spec(request.exclude)
    except ValueError as e:
        raise InvalidPatternError(", ".join(request.exclude), str(e)) from e

    scanner = ProjectScanner(request.base_path, request.depth_limit, matcher, ignore_spec)
    candidates = list(scanner.scan())
    logger.debug(f"Matched {len(candidates)} candidate files under {request.base_path}")

    if not candidates:
        raise NoMatchError(request.pattern, request.extension)

    entries, state = aggregate(candidates, request, estimator)
    return FlattenResult(request=request, entries=entries, state=state)
