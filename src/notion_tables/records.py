"""
Record Decoding
===============

Builds `Record` objects from Notion page payloads and `Table` objects from
database query pages.

Decoding is all-or-nothing per record: if any cell fails, the whole record
(and therefore the page it belongs to) fails. There is no per-cell
placeholder substitution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .cells import decode_cell
from .envelopes import list_results, load_envelope
from .errors import MalformedEnvelopeError
from .models import Record, Table


@dataclass(frozen=True)
class RecordPage:
    """One decoded page of a database query plus its continuation data."""

    table: Table
    has_more: bool
    next_cursor: str | None


def decode_record(record_id: str, external_ref: str, properties: dict[str, Any]) -> Record:
    """Decode a property bag, keeping the order of its entries."""
    cells = tuple(decode_cell(name, raw) for name, raw in properties.items())
    return Record(id=record_id, external_ref=external_ref, cells=cells)


def decode_page_item(item: dict[str, Any]) -> Record:
    """Decode one page object (a database row) into a record."""
    try:
        record_id = item["id"]
        properties = item["properties"]
    except (KeyError, TypeError) as e:
        raise MalformedEnvelopeError(f"Result item is missing {e}") from e
    if not isinstance(properties, dict):
        raise MalformedEnvelopeError("Result item 'properties' is not an object")
    return decode_record(record_id, item.get("url") or "", properties)


def decode_record_page(text: str | dict[str, Any]) -> RecordPage:
    """
    Decode a ``"list"`` envelope of pages.

    Records keep the order the API returned them in. A missing ``has_more``
    (or null) is treated as false.
    """
    envelope = load_envelope(text, "list")
    records = tuple(decode_page_item(item) for item in list_results(envelope))
    has_more = envelope.get("has_more")
    if has_more is None:
        has_more = False
    elif not isinstance(has_more, bool):
        raise MalformedEnvelopeError(f"'has_more' is not a boolean: {has_more!r}")
    next_cursor = envelope.get("next_cursor") or None
    if next_cursor is not None and not isinstance(next_cursor, str):
        raise MalformedEnvelopeError(f"'next_cursor' is not a string: {next_cursor!r}")
    return RecordPage(
        table=Table(records=records, pages=1, has_more=has_more),
        has_more=has_more,
        next_cursor=next_cursor,
    )


def decode_single_item(text: str | dict[str, Any]) -> Record:
    """Decode a ``"page"`` envelope into one record."""
    return decode_page_item(load_envelope(text, "page"))
