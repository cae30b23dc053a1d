"""
Typed rejections raised by the path resolver and the fsgate tools.

Every error carries the original (non-canonical) path string the caller
supplied so it can be shown back to them unchanged. None of these are
retried: a filesystem race is not treated as transient.
"""


class FsError(Exception):
    """Base class for all fsgate errors."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class PathDenied(FsError):
    """Path resolves outside every sandbox root, or uses a rejected component."""

    def __init__(self, path: str):
        super().__init__(f"Access denied: {path}", path=path)


class NotFound(FsError):
    """Neither the target nor a usable ancestor could be located."""

    def __init__(self, path: str):
        super().__init__(f"Not found: {path}", path=path)


class NotAFile(FsError):
    def __init__(self, path: str):
        super().__init__(f"Not a file: {path}", path=path)


class NotADirectory(FsError):
    def __init__(self, path: str):
        super().__init__(f"Not a directory: {path}", path=path)


class FileTooLarge(FsError):
    """File exceeds the configured read limit."""

    def __init__(self, path: str, size: int, max_size: int):
        super().__init__(
            f"File too large: {path} ({size} bytes, max {max_size} bytes)",
            path=path,
        )
        self.size = size
        self.max_size = max_size


class BinaryFile(FsError):
    def __init__(self, path: str):
        super().__init__(
            f"Binary file detected: {path}. "
            "Use get_file_info to inspect its metadata.",
            path=path,
        )


class PatternError(FsError):
    """Glob pattern could not be compiled."""

    def __init__(self, detail: str, pattern: str = ""):
        super().__init__(f"Invalid pattern: {detail}")
        self.pattern = pattern


class EditFailed(FsError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Edit failed on {path}: {reason}", path=path)
        self.reason = reason


def io_error_message(err: OSError, path: str) -> str:
    """
    Render an OS error for the caller.

    An OS-level permission failure is worded differently from a sandbox
    PathDenied so the two can be told apart.
    """
    if isinstance(err, PermissionError):
        return f"Permission denied by operating system: {path}"
    return str(err)
