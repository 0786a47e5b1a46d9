"""
Errors
======

Exception taxonomy for the decoding and pagination layer.

Every error raised by this package derives from `NotionError`, so callers
can catch the whole family in one place. A field that is simply missing
from a record is *not* an error: record lookups return a zero value and
log a warning instead (see `notion_tables.models.Record`).
"""

from __future__ import annotations

from typing import Any


class NotionError(Exception):
    """Base class for every error raised by notion_tables."""


class UnsupportedKindError(NotionError):
    """A property declared a type discriminator outside the known set."""

    def __init__(self, kind: str):
        super().__init__(f"Unknown/unsupported property type: {kind!r}")
        self.kind = kind


class ConversionError(NotionError, ValueError):
    """A value was present but could not be coerced to the requested type."""

    def __init__(self, value: Any, target: str, detail: str | None = None):
        message = f"Cannot convert {value!r} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.value = value
        self.target = target


class MalformedEnvelopeError(NotionError):
    """A response did not match the expected `object`/`results` shape."""


class MalformedBlockError(NotionError):
    """A block node could not be interpreted against its declared type."""

    def __init__(self, message: str, block_id: str | None = None):
        super().__init__(message)
        self.block_id = block_id


class TransportError(NotionError):
    """A request failed at the network level or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
