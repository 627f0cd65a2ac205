import logging
import posixpath
import time
from urllib.parse import urlsplit, urlunsplit

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


def format_duration(seconds: float) -> str:
    """Human readable duration, e.g. ``812µs``, ``101.4ms``, ``2.031s``."""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f}µs"
    if seconds < 1.0:
        return f"{seconds * 1e3:.1f}ms"
    return f"{seconds:.3f}s"


# ────────────────────────────────
# URL Helpers
# ────────────────────────────────


def join_url(host: str, path: str) -> str:
    """Append ``path`` to the path component of ``host``.

    Segments are joined and cleaned the way a filesystem path would be, so
    ``http://h/api/`` + ``/v1//run`` gives ``http://h/api/v1/run``.
    """
    parts = urlsplit(host)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"not an absolute URL: {host!r}")
    joined = posixpath.join(parts.path or "/", path.lstrip("/")) if path else parts.path
    cleaned = posixpath.normpath(joined) if joined else ""
    if cleaned == ".":
        cleaned = ""
    if cleaned and not cleaned.startswith("/"):
        cleaned = "/" + cleaned
    logger.debug(f"Joined {host} + {path} → {cleaned}")
    return urlunsplit((parts.scheme, parts.netloc, cleaned, parts.query, parts.fragment))
