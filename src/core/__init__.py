"""
Core sandbox primitives: path resolution, typed errors and bounded walks.
"""
from .errors import (
    BinaryFile,
    EditFailed,
    FileTooLarge,
    FsError,
    NotADirectory,
    NotAFile,
    NotFound,
    PathDenied,
    PatternError,
    io_error_message,
)
from .path_resolver import (
    PathResolver,
    ResolutionIntent,
    ResolvedPath,
    cleanup_path_resolver,
    configure_path_resolver,
    get_path_resolver,
    has_path_resolver,
)

__all__ = [
    "BinaryFile",
    "EditFailed",
    "FileTooLarge",
    "FsError",
    "NotADirectory",
    "NotAFile",
    "NotFound",
    "PathDenied",
    "PatternError",
    "io_error_message",
    "PathResolver",
    "ResolutionIntent",
    "ResolvedPath",
    "cleanup_path_resolver",
    "configure_path_resolver",
    "get_path_resolver",
    "has_path_resolver",
]
