"""Exceptions raised at the fetch boundary of a recipe import.

Content-level problems (bad durations, malformed JSON-LD blocks, missing
images) are never raised; they are collected as warnings on the result.
"""

from enum import Enum
from typing import Optional


class RecipeImportError(Exception):
    """Base exception for recipe import errors."""


class InvalidUrlError(RecipeImportError, ValueError):
    """Raised before any network activity when the URL is not importable."""


class FetchErrorKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"


class FetchError(RecipeImportError):
    """Raised when the page could not be retrieved. Never retried."""

    def __init__(self, kind: FetchErrorKind, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
