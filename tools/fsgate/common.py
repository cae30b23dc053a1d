"""
Helpers shared by the fsgate tool modules.

Result dicts follow the MCP content shape that claude_agent_sdk tools
return: a list of text blocks, with "is_error" set on failures.
"""
import asyncio
import threading
from functools import partial
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def tool_result(text: str) -> dict[str, Any]:
    """Create a successful result response."""
    return {"content": [{"type": "text", "text": text}]}


def tool_error(message: str) -> dict[str, Any]:
    """Create an error response."""
    return {"content": [{"type": "text", "text": f"**Error:** {message}"}], "is_error": True}


def result_text(response: dict[str, Any]) -> str:
    """Concatenate the text blocks of a tool response."""
    return "\n".join(
        block.get("text", "")
        for block in response.get("content", [])
        if block.get("type") == "text"
    )


def optional_int(value: Any, name: str) -> int | None:
    """
    Coerce an optional integer argument.

    MCP clients sometimes send numbers as strings; anything that is not an
    integer after coercion is rejected with ValueError.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if number < 0:
        raise ValueError(f"{name} must not be negative")
    return number


async def run_walk(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking directory walk in the default executor.

    The walk receives a threading.Event as `cancel_event`. If the awaiting
    task is cancelled the event is set, so the worker thread stops at its
    next directory instead of running to completion.
    """
    cancel_event = threading.Event()
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(
            None, partial(func, *args, cancel_event=cancel_event, **kwargs)
        )
    except asyncio.CancelledError:
        cancel_event.set()
        raise
