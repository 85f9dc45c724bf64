# src/flatsrc/core/scanner.py
import logging
import os
from pathlib import Path
from typing import Iterator, Optional

import pathspec

from flatsrc.core.ignore import is_path_ignored, load_ignore_spec
from flatsrc.core.matcher import Matcher
from flatsrc.errors import TraversalError
from flatsrc.models import FileCandidate

logger = logging.getLogger(__name__)


class ProjectScanner:
    def __init__(
        self,
        root_dir: Path,
        depth_limit: int,
        matcher: Matcher,
        ignore_spec: Optional[pathspec.PathSpec] = None,
    ):
        self.root_dir = Path(root_dir)
        self.depth_limit = depth_limit
        self.matcher = matcher
        self.ignore_spec = ignore_spec if ignore_spec is not None else load_ignore_spec()

    def _on_error(self, err: OSError):
        raise TraversalError(err.filename or str(self.root_dir), err) from err

    def walk(self) -> Iterator[FileCandidate]:
        """
        Depth-first walk yielding every visible file under the root.
        Entries are sorted so repeated runs see the same order.
        """
        if not self.root_dir.is_dir():
            raise TraversalError(
                str(self.root_dir), NotADirectoryError(f"Not a directory: {self.root_dir}")
            )

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_error):
            root_path = Path(root)

            # Prune in place so os.walk never descends into them
            for d in list(dirs):
                dir_rel_path = (root_path / d).relative_to(self.root_dir)

                if is_path_ignored(dir_rel_path, self.ignore_spec, is_directory=True):
                    logger.debug(f"Skipping ignored directory: {dir_rel_path.as_posix()}")
                    dirs.remove(d)
                    continue

                depth = len(dir_rel_path.parts)
                if depth > self.depth_limit:
                    logger.debug(
                        f"Skipping directory beyond depth limit: {dir_rel_path.as_posix()} (depth: {depth})"
                    )
                    dirs.remove(d)
            dirs.sort()

            for f in sorted(files):
                file_abs_path = root_path / f
                rel_path = file_abs_path.relative_to(self.root_dir)

                if is_path_ignored(rel_path, self.ignore_spec):
                    continue

                yield FileCandidate(path=file_abs_path, rel_path=rel_path.as_posix())

    def scan(self) -> Iterator[FileCandidate]:
        """Yields the walked files accepted by the matcher, in traversal order."""
        for candidate in self.walk():
            if self.matcher.matches(candidate.path):
                yield candidate
