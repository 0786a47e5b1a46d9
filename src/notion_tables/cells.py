"""
Cell Decoding
=============

Turns one raw Notion property value into a typed `Cell`.

A property value is a JSON object whose shape depends on its ``type``
discriminator, e.g.::

    {"id": "abc", "type": "select", "select": {"name": "Done", "color": "green"}}

Decoding dispatches on the discriminator through a fixed table of rules,
one per `CellKind`. An unknown discriminator is an error rather than a
best-effort guess: the decoder has never seen that schema, and returning a
wrongly typed value would be worse than stopping.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

from .errors import ConversionError, MalformedEnvelopeError
from .models import Cell, CellKind, CellValue


def decode_cell(name: str, raw: dict[str, Any]) -> Cell:
    """
    Decode a single property value.

    A payload without a ``type`` key yields a cell with no kind and a None
    value instead of failing.
    """
    if not isinstance(raw, dict):
        raise MalformedEnvelopeError(f"Property {name!r} is not an object")
    raw_source = json.dumps(raw, ensure_ascii=False)
    tag = raw.get("type")
    if tag is None:
        return Cell(name=name, kind=None, value=None, raw_source=raw_source)

    kind = CellKind.parse(tag)
    value = _DECODERS[kind](raw.get(kind.value))
    return Cell(name=name, kind=kind, value=value, raw_source=raw_source)


def plain_text(fragments: list[dict[str, Any]] | None) -> str:
    """Concatenate the text of rich-text fragments in list order."""
    if not fragments:
        return ""
    parts = []
    for fragment in _list_of_objects(fragments, "rich text"):
        text = fragment.get("plain_text")
        if text is None:
            # Request payloads carry text.content but no plain_text
            content = fragment.get("text") or {}
            if not isinstance(content, dict):
                raise ConversionError(content, "rich text")
            text = content.get("content") or ""
        parts.append(str(text))
    return "".join(parts)


def _list_of_objects(value: Any, target: str) -> list[dict[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ConversionError(value, target, "expected a list of objects")
    return value


def _object(value: Any, target: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConversionError(value, target, "expected an object")
    return value


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 date or datetime as returned by the API."""
    if not isinstance(value, str):
        raise ConversionError(value, "datetime")
    try:
        # fromisoformat rejects a bare "Z" before Python 3.11
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ConversionError(value, "datetime") from None


def _decode_text(sub: Any) -> str:
    return plain_text(sub)


def _decode_names(sub: Any) -> tuple[str, ...]:
    if not sub:
        return ()
    items = _list_of_objects(sub, "names")
    return tuple(str(item.get("name") or item.get("id") or "") for item in items)


def _decode_ids(sub: Any) -> tuple[str, ...]:
    if not sub:
        return ()
    items = _list_of_objects(sub, "ids")
    return tuple(str(item.get("id") or "") for item in items)


def _decode_option(sub: Any) -> str:
    if sub is None:
        return ""
    return _object(sub, "option").get("name") or ""


def _decode_number(sub: Any) -> int | float:
    if sub is None:
        return 0
    if isinstance(sub, bool):
        raise ConversionError(sub, "number")
    if isinstance(sub, (int, float)):
        return sub
    if isinstance(sub, str):
        try:
            return int(sub)
        except ValueError:
            pass
        try:
            return float(sub)
        except ValueError:
            raise ConversionError(sub, "number") from None
    raise ConversionError(sub, "number")


def _decode_date(sub: Any) -> datetime | str:
    if sub is None:
        return ""
    return parse_timestamp(_object(sub, "date").get("start"))


def _decode_timestamp(sub: Any) -> datetime:
    return parse_timestamp(sub)


def _decode_checkbox(sub: Any) -> bool:
    if isinstance(sub, bool):
        return sub
    if isinstance(sub, str) and sub.strip().lower() in ("true", "false"):
        return sub.strip().lower() == "true"
    raise ConversionError(sub, "bool", "checkbox value must be present")


def _decode_scalar(sub: Any) -> str:
    if sub is None:
        return ""
    return str(sub)


def _decode_placeholder(sub: Any) -> None:
    # files and rollup are recognised but not decoded
    return None


def _decode_formula(sub: Any) -> str:
    if not sub:
        return ""
    sub = _object(sub, "formula")
    if sub.get("string") is not None:
        return str(sub["string"])
    number = sub.get("number")
    if number is not None and not isinstance(number, bool):
        if isinstance(number, float) and number.is_integer():
            number = int(number)
        return str(number)
    return ""


_DECODERS: dict[CellKind, Callable[[Any], CellValue]] = {
    CellKind.TITLE: _decode_text,
    CellKind.TEXT: _decode_text,
    CellKind.RICH_TEXT: _decode_text,
    CellKind.MULTI_SELECT: _decode_names,
    CellKind.PEOPLE: _decode_names,
    CellKind.RELATION: _decode_ids,
    CellKind.SELECT: _decode_option,
    CellKind.STATUS: _decode_option,
    CellKind.NUMBER: _decode_number,
    CellKind.DATE: _decode_date,
    CellKind.CREATED_TIME: _decode_timestamp,
    CellKind.LAST_EDITED_TIME: _decode_timestamp,
    CellKind.CHECKBOX: _decode_checkbox,
    CellKind.URL: _decode_scalar,
    CellKind.EMAIL: _decode_scalar,
    CellKind.PHONE_NUMBER: _decode_scalar,
    CellKind.FILES: _decode_placeholder,
    CellKind.ROLLUP: _decode_placeholder,
    CellKind.FORMULA: _decode_formula,
}
