"""
Bounded directory walks for fsgate.

Both walkers start from a directory that the PathResolver has already
authorized and never leave it: symlinks are neither followed nor listed, so
the walk cannot step outside the tree it was given.

Both walks are bounded twice over:
- depth: directories deeper than max_depth are not descended into
- volume: the tree stops at MAX_TREE_ENTRIES, the search at its result cap

Per-entry OS errors (permission denied, entry deleted mid-walk) are skipped.
A partial listing is returned rather than failing the whole walk. Only a
failure to read the starting directory of the tree is raised to the caller.
"""
from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import PatternError
from .formatting import format_size

logger = logging.getLogger(__name__)

MAX_TREE_ENTRIES: int = 1000

DEFAULT_SEARCH_RESULTS: int = 50
MAX_SEARCH_RESULTS: int = 200

TREE_BRANCH = "├── "
TREE_LAST = "└── "
TREE_PIPE = "│   "
TREE_SPACE = "    "


def truncation_notice(limit: int) -> str:
    return (
        f"... (truncated, exceeded {limit} entries. "
        "Use search_files to find specific files.)"
    )


# =============================================================================
# Directory Tree
# =============================================================================

@dataclass
class TreeResult:
    """Rendered tree lines (without the root header) and walk statistics."""
    lines: list[str] = field(default_factory=list)
    entry_count: int = 0
    truncated: bool = False
    cancelled: bool = False

    def render(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


class _TreeWalker:
    def __init__(
        self,
        max_depth: int,
        max_entries: int,
        cancel_event: Optional[threading.Event],
    ):
        self.max_depth = max_depth
        self.max_entries = max_entries
        self.cancel_event = cancel_event
        self.result = TreeResult()

    @property
    def stopped(self) -> bool:
        return self.result.truncated or self.result.cancelled

    def walk(self, directory: Path, prefix: str, depth: int) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.result.cancelled = True
            return

        try:
            dirs, files = _scan_visible(directory)
        except OSError as e:
            if depth == 0:
                raise
            logger.debug(f"TREE: Skipping unreadable directory {directory}: {e}")
            return

        total = len(dirs) + len(files)
        for index, (name, path) in enumerate(dirs):
            if not self._take_slot(prefix):
                return
            is_last = index == total - 1
            self.result.lines.append(f"{prefix}{TREE_LAST if is_last else TREE_BRANCH}{name}/")

            if depth < self.max_depth:
                child_prefix = prefix + (TREE_SPACE if is_last else TREE_PIPE)
                self.walk(path, child_prefix, depth + 1)
                if self.stopped:
                    return

        for offset, (name, size) in enumerate(files):
            if not self._take_slot(prefix):
                return
            is_last = len(dirs) + offset == total - 1
            connector = TREE_LAST if is_last else TREE_BRANCH
            self.result.lines.append(f"{prefix}{connector}{name} ({format_size(size)})")

    def _take_slot(self, prefix: str) -> bool:
        if self.result.entry_count >= self.max_entries:
            self.result.lines.append(f"{prefix}{truncation_notice(self.max_entries)}")
            self.result.truncated = True
            return False
        self.result.entry_count += 1
        return True


def build_directory_tree(
    root: Path,
    max_depth: int,
    max_entries: int = MAX_TREE_ENTRIES,
    cancel_event: Optional[threading.Event] = None,
) -> TreeResult:
    """
    Render the subtree under an authorized directory.

    Directories come before files at every level, each group sorted by
    name. Dot-prefixed entries are skipped along with everything below
    them. A max_depth of 0 lists the immediate children without descending.

    Args:
        root: Canonical directory returned by the PathResolver
        max_depth: Deepest level to descend into
        max_entries: Ceiling on emitted entries across the whole walk
        cancel_event: Checked once per directory; when set the walk stops

    Returns:
        TreeResult with at most max_entries entries and, when the ceiling
        was hit, exactly one truncation notice as the last line.

    Raises:
        OSError: If the root directory itself cannot be read
    """
    walker = _TreeWalker(max_depth, max_entries, cancel_event)
    walker.walk(root, "", 0)
    return walker.result


def _scan_visible(directory: Path) -> tuple[list[tuple[str, Path]], list[tuple[str, int]]]:
    dirs: list[tuple[str, Path]] = []
    files: list[tuple[str, int]] = []

    with os.scandir(directory) as it:
        for entry in it:
            if entry.name.startswith("."):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    dirs.append((entry.name, Path(entry.path)))
                elif entry.is_file(follow_symlinks=False):
                    files.append((entry.name, entry.stat(follow_symlinks=False).st_size))
            except OSError:
                continue

    dirs.sort(key=lambda item: item[0])
    files.sort(key=lambda item: item[0])
    return dirs, files


# =============================================================================
# Glob Search
# =============================================================================

def compile_glob(pattern: str) -> re.Pattern[str]:
    """
    Compile a glob into a regex matched against '/'-separated relative paths.

    Supported syntax:
        *       any run of characters within one path segment
        ?       one character within a segment
        [...]   character class, [!...] or [^...] negated
        **      any number of whole segments (must be a segment on its own)
        {a,b}   alternation (not nested)
        \\x      literal x

    Raises:
        PatternError: If the pattern is empty or malformed
    """
    if not pattern:
        raise PatternError("pattern must not be empty", pattern)

    regex = _translate_glob(pattern)
    try:
        return re.compile(regex)
    except re.error as e:
        raise PatternError(f"{pattern!r}: {e}", pattern)


def _translate_glob(pattern: str) -> str:
    out: list[str] = []
    in_group = False
    i = 0
    n = len(pattern)

    while i < n:
        c = pattern[i]

        if c == "*" and pattern[i + 1:i + 2] == "*":
            at_segment_start = i == 0 or pattern[i - 1] == "/"
            after = pattern[i + 2:i + 3]
            if not at_segment_start or after not in ("", "/"):
                raise PatternError(
                    f"{pattern!r}: '**' must be a whole path segment", pattern
                )
            if after == "/":
                out.append("(?:.*/)?")
                i += 3
            else:
                out.append(".*")
                i += 2
            continue

        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = _class_end(pattern, i)
            if end < 0:
                raise PatternError(f"{pattern!r}: unclosed character class", pattern)
            body = pattern[i + 1:end]
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            i = end
        elif c == "{":
            if in_group:
                raise PatternError(
                    f"{pattern!r}: nested alternate groups are not allowed", pattern
                )
            in_group = True
            out.append("(?:")
        elif c == "," and in_group:
            out.append("|")
        elif c == "}" and in_group:
            in_group = False
            out.append(")")
        elif c == "\\":
            if i + 1 >= n:
                raise PatternError(f"{pattern!r}: dangling escape", pattern)
            i += 1
            out.append(re.escape(pattern[i]))
        else:
            out.append(re.escape(c))
        i += 1

    if in_group:
        raise PatternError(f"{pattern!r}: unclosed alternate group", pattern)

    return "(?s:" + "".join(out) + r")\Z"


def _class_end(pattern: str, start: int) -> int:
    """Index of the ']' closing the class opened at `start`, or -1."""
    j = start + 1
    if pattern[j:j + 1] in ("!", "^"):
        j += 1
    # A ']' right after the opening bracket is a literal member
    if pattern[j:j + 1] == "]":
        j += 1
    return pattern.find("]", j)


@dataclass
class SearchMatch:
    path: Path
    size: int


@dataclass
class SearchResult:
    root: Path
    pattern: str
    matches: list[SearchMatch] = field(default_factory=list)
    truncated: bool = False


def clamp_max_results(requested: Optional[int]) -> int:
    """Apply the default and the hard ceiling to a caller's result limit."""
    if requested is None:
        return DEFAULT_SEARCH_RESULTS
    return max(1, min(int(requested), MAX_SEARCH_RESULTS))


def search_files(
    root: Path,
    pattern: str,
    max_depth: int,
    max_results: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SearchResult:
    """
    Find regular files under `root` whose relative path matches `pattern`.

    The walk is an explicit stack rather than recursion. Entries at each
    level are visited in name order, so the same tree always yields the same
    results in the same order.

    Args:
        root: Canonical directory returned by the PathResolver
        pattern: Glob pattern (see compile_glob)
        max_depth: Directories deeper than this are not descended into
        max_results: Requested cap, defaulted and clamped by clamp_max_results
        cancel_event: Checked once per directory; when set the walk stops

    Raises:
        PatternError: If the pattern cannot be compiled
        OSError: If `root` itself cannot be read; unreadable subdirectories
            are skipped
    """
    matcher = compile_glob(pattern)
    limit = clamp_max_results(max_results)
    result = SearchResult(root=root, pattern=pattern)

    stack: list[tuple[Path, int]] = [(root, 0)]
    while stack:
        if cancel_event is not None and cancel_event.is_set():
            break

        directory, depth = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            if depth == 0:
                raise
            logger.debug(f"SEARCH: Skipping unreadable directory {directory}: {e}")
            continue

        subdirs: list[Path] = []
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    if depth < max_depth:
                        subdirs.append(Path(entry.path))
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
                size = entry.stat(follow_symlinks=False).st_size
            except OSError:
                continue

            entry_path = Path(entry.path)
            relative = entry_path.relative_to(root).as_posix()
            if matcher.match(relative):
                result.matches.append(SearchMatch(path=entry_path, size=size))
                if len(result.matches) >= limit:
                    result.truncated = True
                    return result

        # Reversed so the smallest name is popped first
        for subdir in reversed(subdirs):
            stack.append((subdir, depth + 1))

    return result
