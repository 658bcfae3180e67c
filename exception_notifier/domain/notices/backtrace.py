"""
Backtrace capture and sanitization.

Frames are rendered as ``"<path>:<lineno>:in <function>"``, oldest first,
matching the order of a Python traceback. Sanitizing strips the
application root prefix and normalizes each path so that traces are
relocatable and do not leak the deployment directory.
"""

import os
import posixpath
import traceback
from collections.abc import Iterable
from types import TracebackType
from typing import Optional


def clean_root(root: str) -> str:
    """Return the absolute, normalized form of an application root path."""
    return posixpath.normpath(os.path.abspath(root))


def format_frame(frame: traceback.FrameSummary) -> str:
    return f"{frame.filename}:{frame.lineno}:in {frame.name}"


def sanitize_backtrace(trace: Iterable[str], root: str) -> list[str]:
    """Strip ``<root>/`` from each frame and normalize the path.

    Idempotent: sanitizing an already sanitized trace returns it unchanged.

    Args:
        trace: Frame strings.
        root: Application root directory.

    Returns:
        The sanitized frames, in the same order.
    """
    prefix = clean_root(root).rstrip("/") + "/"
    sanitized = []
    for line in trace:
        line = posixpath.normpath(line)
        if line.startswith(prefix):
            line = line[len(prefix):]
        sanitized.append(posixpath.normpath(line))
    return sanitized


def traceback_frames(tb: Optional[TracebackType]) -> list[str]:
    """Format the frames of an exception traceback (empty if never raised)."""
    if tb is None:
        return []
    return [format_frame(frame) for frame in traceback.extract_tb(tb)]


def current_stack(skip: int = 0) -> list[str]:
    """Format the current call stack, excluding this function's frame.

    Args:
        skip: Number of additional innermost frames to drop.
    """
    frames = traceback.extract_stack()[: -(skip + 1)]
    return [format_frame(frame) for frame in frames]
