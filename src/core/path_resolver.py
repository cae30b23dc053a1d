"""
Path Resolver - single authority on sandbox containment for fsgate.

Every fsgate tool hands the caller-supplied path to this module before it
touches the filesystem. The resolver either returns the canonical on-disk
path that the tool must operate on, or raises a typed FsError.

RESOLUTION STRATEGIES:
======================

1. Target exists:
   Canonicalize through the OS (dereferences symlinks, collapses . and ..),
   check containment, then check the type demanded by the intent.

2. Target missing, parent exists (write / move destinations):
   Canonicalize the parent only, check containment, then re-append the
   original final segment.

3. Creatable (mkdir -p):
   Reject any literal . or .. component up front, walk upward collecting
   tail segments until an existing ancestor is found, canonicalize it,
   check containment, then reattach the tail in order.

CONTAINMENT:
============

Containment is a component-wise prefix check on Path.parts. A bare string
prefix would treat /allowed2 as being inside /allowed.

USAGE:
======

    resolver = configure_path_resolver(session_id, [Path("/ws")], max_depth=10)
    resolved = resolver.resolve("/ws/a/b.txt", ResolutionIntent.MUST_BE_FILE)
    resolved.canonical   # Path('/ws/a/b.txt')
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence, Union

from .errors import NotADirectory, NotAFile, NotFound, PathDenied

logger = logging.getLogger(__name__)

RawPath = Union[str, "os.PathLike[str]"]

_TRAVERSAL_COMPONENTS = (".", "..")


# =============================================================================
# Intent and Outcome
# =============================================================================

class ResolutionIntent(Enum):
    """What the caller requires of the target path."""
    MUST_EXIST = "must_exist"
    MUST_BE_FILE = "must_be_file"
    MUST_BE_DIRECTORY = "must_be_directory"
    MAY_NOT_EXIST = "may_not_exist"
    CREATABLE = "creatable"


@dataclass(frozen=True)
class ResolvedPath:
    """
    A successful resolution.

    Attributes:
        original: The path string exactly as the caller supplied it
        canonical: Absolute path inside `root` that the operation must use
        root: The sandbox root that contains `canonical`
        intent: The intent the path was resolved under
    """
    original: str
    canonical: Path
    root: Path
    intent: ResolutionIntent


# =============================================================================
# Resolver
# =============================================================================

class PathResolver:
    """
    Resolves caller paths against an immutable set of sandbox roots.

    Roots must already be canonical absolute directories (see
    FsGateConfig.validated()). The resolver keeps no mutable state, so one
    instance can serve any number of concurrent tool calls.
    """

    def __init__(self, roots: Sequence[Path], max_depth: int = 10):
        self._roots: tuple[Path, ...] = tuple(Path(r) for r in roots)
        self._max_depth = max_depth

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def resolve(self, raw_path: RawPath, intent: ResolutionIntent) -> ResolvedPath:
        """
        Resolve a caller-supplied path under the given intent.

        Args:
            raw_path: Path as supplied by the caller (absolute or relative
                to the process working directory)
            intent: What the caller requires of the target

        Returns:
            ResolvedPath whose canonical path lies under a sandbox root

        Raises:
            PathDenied: Outside every root, a rejected traversal component, or a NUL byte
            NotFound: Target (or for creation, every ancestor) is missing
            NotAFile / NotADirectory: Target exists but has the wrong type
        """
        original = os.fspath(raw_path)
        if not original:
            raise NotFound(original)
        # The OS cannot represent a NUL byte in a path
        if "\x00" in original:
            raise PathDenied(original)

        if intent is ResolutionIntent.CREATABLE:
            if _has_traversal_component(original):
                raise PathDenied(original)
            canonical, root = self._resolve_creatable(original)
            return ResolvedPath(original, canonical, root, intent)

        path = _absolute(original)

        if path.exists():
            canonical, root = self._canonicalize_contained(path, original)
            if intent is ResolutionIntent.MUST_BE_FILE and not canonical.is_file():
                raise NotAFile(original)
            if intent is ResolutionIntent.MUST_BE_DIRECTORY and not canonical.is_dir():
                raise NotADirectory(original)
            return ResolvedPath(original, canonical, root, intent)

        # Missing target: containment is still enforced on the parent first
        # so that paths outside the sandbox always report PathDenied.
        canonical, root = self._resolve_via_parent(path, original)
        if intent is ResolutionIntent.MAY_NOT_EXIST:
            return ResolvedPath(original, canonical, root, intent)
        raise NotFound(original)

    def contains(self, canonical: Path) -> bool:
        """Whether a canonical path lies under any sandbox root."""
        return self._containing_root(canonical) is not None

    def is_root(self, canonical: Path) -> bool:
        """Whether a canonical path is one of the sandbox roots itself."""
        return canonical in self._roots

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _resolve_via_parent(self, path: Path, original: str) -> tuple[Path, Path]:
        if path.name in _TRAVERSAL_COMPONENTS or path.parent == path:
            raise PathDenied(original)

        parent = path.parent
        if not parent.exists():
            raise NotFound(original)

        canonical_parent, root = self._canonicalize_contained(parent, original)
        candidate = canonical_parent / path.name
        self._check_link_target(candidate, original)
        return candidate, root

    def _resolve_creatable(self, original: str) -> tuple[Path, Path]:
        existing = _absolute(original)
        tail: list[str] = []

        while not existing.exists():
            parent = existing.parent
            if parent == existing:
                raise NotFound(original)
            tail.append(existing.name)
            existing = parent

        canonical, root = self._canonicalize_contained(existing, original)
        if not tail:
            return canonical, root

        for segment in reversed(tail):
            canonical = canonical / segment
        self._check_link_target(canonical, original)
        return canonical, root

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _canonicalize_contained(self, path: Path, original: str) -> tuple[Path, Path]:
        try:
            canonical = path.resolve(strict=True)
        except (OSError, RuntimeError):
            raise NotFound(original)

        root = self._containing_root(canonical)
        if root is None:
            raise PathDenied(original)
        return canonical, root

    def _check_link_target(self, candidate: Path, original: str) -> None:
        # A dangling symlink in the not-yet-existing part would otherwise let a
        # write land wherever the link points.
        followed = Path(os.path.realpath(candidate))
        if self._containing_root(followed) is None:
            raise PathDenied(original)

    def _containing_root(self, canonical: Path) -> Path | None:
        parts = canonical.parts
        for root in self._roots:
            root_parts = root.parts
            if parts[: len(root_parts)] == root_parts:
                return root
        return None


def _absolute(raw: str) -> Path:
    """Make a path absolute without normalizing . or .. away."""
    path = Path(raw)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def _has_traversal_component(raw: str) -> bool:
    # Path() silently drops interior "." components, so inspect the raw string.
    normalized = raw.replace(os.altsep, os.sep) if os.altsep else raw
    return any(part in _TRAVERSAL_COMPONENTS for part in normalized.split(os.sep))


# =============================================================================
# Session-Scoped Resolver Management
# =============================================================================

# Session-scoped resolvers (one per connected client session)
_session_resolvers: dict[str, PathResolver] = {}


def configure_path_resolver(
    session_id: str,
    roots: Sequence[Path],
    max_depth: int = 10,
) -> PathResolver:
    """
    Configure and return the path resolver for a session.

    Args:
        session_id: The session ID
        roots: Canonical sandbox root directories
        max_depth: Maximum traversal depth for tree and search tools

    Returns:
        The configured PathResolver
    """
    resolver = PathResolver(roots, max_depth=max_depth)
    _session_resolvers[session_id] = resolver
    logger.info(
        f"PATH_RESOLVER: Configured for session {session_id} "
        f"with roots={[str(r) for r in resolver.roots]} max_depth={max_depth}"
    )
    return resolver


def get_path_resolver(session_id: str) -> PathResolver:
    """
    Get the path resolver for a session.

    Raises:
        RuntimeError: If no resolver is configured for this session
    """
    if session_id not in _session_resolvers:
        raise RuntimeError(
            f"PathResolver not configured for session {session_id}. "
            "Call configure_path_resolver() first."
        )
    return _session_resolvers[session_id]


def has_path_resolver(session_id: str) -> bool:
    return session_id in _session_resolvers


def cleanup_path_resolver(session_id: str) -> None:
    """Remove the path resolver when a session ends."""
    if session_id in _session_resolvers:
        del _session_resolvers[session_id]
        logger.info(f"PATH_RESOLVER: Cleaned up resolver for session {session_id}")
