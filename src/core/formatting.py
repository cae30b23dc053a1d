"""Human-readable rendering helpers shared by the fsgate tools."""
import os
import stat
from datetime import datetime, timezone


def format_size(size: int) -> str:
    """Format file size in human-readable format."""
    if size < 1024:
        return f"{size} B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    elif size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    else:
        return f"{size / (1024 * 1024 * 1024):.1f} GB"


def format_date(timestamp: float) -> str:
    """Format a POSIX timestamp as a UTC YYYY-MM-DD date."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def format_permissions(st: os.stat_result) -> str:
    """Octal mode on POSIX, a read-only/read-write flag elsewhere."""
    if os.name == "posix":
        return format(st.st_mode, "o")
    if st.st_mode & stat.S_IWRITE:
        return "read-write"
    return "readonly"
