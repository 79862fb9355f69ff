"""Exceptions raised by gitlogjson."""

from typing import Optional


class GitLogJSONError(Exception):
    """Base class for all gitlogjson errors."""


class MalformedInputError(GitLogJSONError):
    """
    The tagged stream cannot be turned into valid JSON.

    Raised for a close tag without an open field, a nested open tag, or a
    stream that ends while a field is open.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class UpstreamFailureError(GitLogJSONError):
    """The git log invocation failed to enumerate commits."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
