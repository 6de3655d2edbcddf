"""Terminal error formatting for request failures.

Replaces raw ``logger.exception()`` with output that highlights the
useful frames. Verbosity is controlled by the ``LECTERN_TRACEBACK``
environment variable:

- ``compact`` (default): error summary plus application frames
- ``full``: the complete Python traceback
- ``minimal``: one line with the innermost location

Kida template errors are printed with ``exc.format_compact()`` when the
engine provides it.
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lectern.http.request import Request

logger = logging.getLogger("lectern.server")

TRACEBACK_ENV = "LECTERN_TRACEBACK"

_BANNER_WIDTH = 65
_STDLIB_PREFIX = os.path.dirname(os.__file__)


def _is_kida_error(exc: BaseException) -> bool:
    module = type(exc).__module__ or ""
    return module.startswith("kida")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename or filename.startswith("<"):
        return False
    return not filename.startswith(_STDLIB_PREFIX)


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    """Format a kida template error inside a banner with the route."""
    parts = [f"-- Template Error {'-' * (_BANNER_WIDTH - 18)}"]
    format_compact = getattr(exc, "format_compact", None)
    parts.append(format_compact() if callable(format_compact) else str(exc))
    if request is not None:
        parts.append("")
        parts.append(f"  Route: {request.method} {request.path}")
    parts.append("-" * _BANNER_WIDTH)
    return "\n".join(parts)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus at most five application frames.

    Falls back to the last three frames when none belong to the
    application. Chained causes are summarized on one line each.
    """
    frames = _traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    cause = exc.__cause__
    while cause is not None:
        parts.append(f"  Caused by {type(cause).__name__}: {cause}")
        cause = cause.__cause__

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary."""
    frames = _traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def traceback_style() -> str:
    style = os.environ.get(TRACEBACK_ENV, "compact").lower()
    return style if style in ("compact", "full", "minimal") else "compact"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log an internal error using the configured verbosity."""
    prefix = f"500 {request.method} {request.path}" if request is not None else "Server error"

    if _is_kida_error(exc):
        logger.error("%s\n%s", prefix, format_template_error(exc, request))
        return

    style = traceback_style()
    if style == "full":
        logger.error(prefix, exc_info=exc)
    elif style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
