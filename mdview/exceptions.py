"""
Exceptions raised by the Markdown rendering pipeline.

Only path filtering and origin fetching fail a request. Problems inside a
document (bad selectors, malformed JSON-LD) are recovered where they occur
and never reach these types.
"""

from typing import Optional


class MarkdownError(Exception):
    """Base exception for all mdview errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PathExcluded(MarkdownError):
    """The requested path is rejected by the include/exclude globs."""

    def __init__(self, path: str):
        super().__init__(f"Path excluded from markdown: {path}", {"path": path})
        self.path = path


# --- origin fetch failures: terminal for the request ---

class OriginFetchError(MarkdownError):
    """Base for failures to obtain HTML from the primary and fallback origins."""


class OriginUnreachable(OriginFetchError):
    """No origin produced a response; carries the last transport error."""

    def __init__(self, error: Optional[BaseException], url: Optional[str] = None):
        reason = str(error) if error is not None else "Unknown error"
        super().__init__(f"Failed to fetch page: {reason}", {"url": url})
        self.error = error
        self.url = url


class OriginHttpError(OriginFetchError):
    """Every attempted origin answered with a non-success status."""

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(
            f"Failed to fetch page: {status_code}",
            {"status_code": status_code, "url": url},
        )
        self.status_code = status_code
        self.url = url
