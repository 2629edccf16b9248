"""Stack frame extraction."""

import os
import sys
import linecache
from types import FrameType, TracebackType
from typing import List, Optional, Tuple

from .models import StackFrame

_STDLIB_ROOT = os.path.dirname(os.path.abspath(os.__file__))


def guess_in_app(path: str) -> bool:
    # crude heuristic similar to how many SDKs differentiate framework vs app frames
    # Treat stdlib, site-packages and synthetic files as not in_app
    if not path or path.startswith("<"):
        return False
    abs_path = os.path.abspath(path)
    parts = abs_path.split(os.sep)
    if "site-packages" in parts or "dist-packages" in parts:
        return False
    if abs_path.startswith(_STDLIB_ROOT + os.sep):
        return False
    return True


def source_context(
    abs_path: str, lineno: Optional[int], context_lines: int
) -> Tuple[List[str], Optional[str], List[str]]:
    """Return (pre_context, context_line, post_context) around `lineno`."""
    if not abs_path or lineno is None or context_lines < 0:
        return [], None, []
    # Ensure linecache has fresh view
    linecache.checkcache(abs_path)
    line = linecache.getline(abs_path, lineno)
    if not line:
        return [], None, []
    start = max(1, lineno - context_lines)
    pre = [
        linecache.getline(abs_path, i).rstrip("\n") for i in range(start, lineno)
    ]
    post = [
        linecache.getline(abs_path, i).rstrip("\n")
        for i in range(lineno + 1, lineno + context_lines + 1)
    ]
    return pre, line.rstrip("\n"), post


def create_frame(frame: FrameType, lineno: int, context_lines: int = 3) -> StackFrame:
    f_code = frame.f_code
    filename = f_code.co_filename
    abs_path = filename if filename.startswith("<") else os.path.abspath(filename)
    pre, line, post = source_context(abs_path, lineno, context_lines)

    return StackFrame(
        abs_path=abs_path,
        filename=os.path.basename(abs_path),
        function=f_code.co_name,
        module=frame.f_globals.get("__name__", None),
        lineno=lineno,
        in_app=guess_in_app(abs_path),
        colno=None,  # Python doesn't provide column by default
        context_line=line,
        pre_context=pre,
        post_context=post,
    )


def extract_frames(
    exc: BaseException, *, limit: Optional[int] = None, context_lines: int = 3
) -> List[StackFrame]:
    """
    Walk the traceback of `exc` and return its frames top-of-stack first.

    Parameters:
      exc: the exception whose `__traceback__` is walked.
      limit: keep at most this many frames, counted from the top of the stack.
      context_lines: how many pre/post source lines to include per frame.
    """
    tb: Optional[TracebackType] = exc.__traceback__
    stack = []
    while tb is not None:
        stack.append((tb.tb_frame, tb.tb_lineno))
        tb = tb.tb_next
    # Oldest -> newest, flip to newest first
    stack.reverse()
    if limit is not None:
        stack = stack[:limit]
    return [create_frame(frame, lineno, context_lines) for frame, lineno in stack]


def current_traceback(depth: int = 1) -> Optional[TracebackType]:
    """
    Build a traceback of the live call stack, oldest frame first.

    `depth` selects the newest frame: 1 is the caller of this function, 2 its
    caller, and so on.
    """
    frame: Optional[FrameType] = sys._getframe(depth)
    tb: Optional[TracebackType] = None
    while frame is not None:
        tb = TracebackType(tb, frame, frame.f_lasti, frame.f_lineno or 0)
        frame = frame.f_back
    return tb


def attach_current_stack(exc: BaseException, depth: int = 1) -> BaseException:
    """Give a never-raised exception the current call stack as its traceback."""
    return exc.with_traceback(current_traceback(depth + 1))
