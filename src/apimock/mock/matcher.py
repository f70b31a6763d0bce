"""
apimock Path Matcher

Resolves an incoming request path to the mock file that should answer it.

Features:
- Route templates derived from file paths (name.json and name/index.json)
- Wildcard segments (`_`) that capture request path values
- Specificity scoring so literal routes beat wildcard routes
- Tolerant directory walk (unreadable directories are skipped and logged)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger("apimock.mock")

WILDCARD = "_"
MOCK_SUFFIX = ".json"
INDEX_SEGMENT = "index"


@dataclass(frozen=True)
class RouteTemplate:
    """Segment sequence derived from a mock file's location in the store."""

    segments: Tuple[str, ...]
    file_path: Path

    @classmethod
    def from_file(cls, root: Path, file_path: Path) -> 'RouteTemplate':
        """
        Derive a route template from a mock file path.

        `users/index.json` becomes ("users",) and `users/_/created.json`
        becomes ("users", "_", "created").

        Args:
            root: Mock store root directory
            file_path: Path of a .json file under root

        Returns:
            RouteTemplate for the file
        """
        relative = file_path.relative_to(root).as_posix()
        stem = relative[:-len(MOCK_SUFFIX)]
        segments = stem.split("/")
        if segments[-1] == INDEX_SEGMENT:
            segments = segments[:-1]
        return cls(segments=tuple(segments), file_path=file_path)

    @property
    def wildcard_count(self) -> int:
        return sum(1 for segment in self.segments if segment == WILDCARD)

    @property
    def score(self) -> int:
        """Specificity score: segment count minus wildcard count."""
        return len(self.segments) - self.wildcard_count

    def match(self, request_segments: List[str]) -> Optional[List[str]]:
        """
        Match request segments against this template.

        Args:
            request_segments: Request path split on "/"

        Returns:
            Captured wildcard values in template order, or None if the
            template does not match
        """
        if len(request_segments) != len(self.segments):
            return None

        params = []
        for template_segment, request_segment in zip(self.segments, request_segments):
            if template_segment == WILDCARD:
                if not request_segment:
                    return None
                params.append(request_segment)
            elif template_segment != request_segment:
                return None
        return params

    def display(self) -> str:
        return "/" + "/".join(self.segments)


@dataclass
class MatchResult:
    """Result of resolving a request path against the mock store."""

    matched: bool
    file_path: Optional[Path] = None
    params: List[str] = field(default_factory=list)
    template: Optional[RouteTemplate] = None
    score: int = 0
    reason: str = ""


class PathMatcher:
    """
    Finds the mock file that best answers a request path.

    The store is walked on every call; nothing is cached, so edits to the
    mock directory are picked up by the next request.

    Example:
        matcher = PathMatcher('mock')
        result = matcher.find_match('users/42/profile')

        if result.matched:
            print(result.file_path, result.params)  # mock/users/_/profile.json ['42']
    """

    def __init__(self, root: str):
        """
        Initialize path matcher.

        Args:
            root: Mock store root directory
        """
        self.root = Path(root)

    def iter_templates(self):
        """
        Yield route templates for every .json file in the store.

        Directory entries are visited in sorted order, a directory's own
        files before its subdirectories.
        """
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._on_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if not filename.endswith(MOCK_SUFFIX):
                    continue
                yield RouteTemplate.from_file(self.root, Path(dirpath) / filename)

    def find_match(self, path: str) -> MatchResult:
        """
        Find the best-matching mock file for a request path.

        Args:
            path: Request path without the leading "/"

        Returns:
            MatchResult with the winning file and captured params, or no match
        """
        request_segments = path.split("/")

        best: Optional[RouteTemplate] = None
        best_params: List[str] = []

        for template in self.iter_templates():
            params = template.match(request_segments)
            if params is None:
                continue
            # Equal scores keep the first template seen
            if best is None or template.score > best.score:
                best = template
                best_params = params

        if best is None:
            return MatchResult(matched=False, reason=f"No mock file matches /{path}")

        return MatchResult(
            matched=True,
            file_path=best.file_path,
            params=best_params,
            template=best,
            score=best.score,
            reason=f"Matched {best.display()} (score: {best.score})"
        )

    def _on_walk_error(self, error: OSError):
        logger.warning(f"Skipping unreadable path during mock scan: {error.filename} ({error})")
