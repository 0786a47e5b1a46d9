"""
Block Decoding
==============

Decodes page content blocks and builds block payloads for upload.

A block node carries its text under a sub-object named after its type::

    {"id": "...", "type": "paragraph",
     "paragraph": {"rich_text": [{"plain_text": "Hello"}]}}

API versions before 2022-02-22 used ``text`` instead of ``rich_text``;
both are read.
"""

from __future__ import annotations

import json
from typing import Any

from .cells import plain_text
from .envelopes import list_results, load_envelope
from .errors import MalformedBlockError
from .models import Block, Document

FRAGMENT_KEYS = ("rich_text", "text")


def decode_block(node: dict[str, Any]) -> Block:
    """
    Decode one block node.

    Nodes without a ``type`` decode to a block with no text. A node whose
    declared type has no matching sub-object is malformed.
    """
    if not isinstance(node, dict):
        raise MalformedBlockError("Block node is not an object")
    block_id = node.get("id")
    if not block_id:
        raise MalformedBlockError("Block node has no 'id'")

    raw_source = json.dumps(node, ensure_ascii=False)
    has_children = bool(node.get("has_children", False))
    kind = node.get("type")
    if kind is None:
        return Block(
            id=block_id,
            kind=None,
            text=None,
            raw_source=raw_source,
            has_children=has_children,
        )

    if kind not in node:
        raise MalformedBlockError(
            f"Block declares type {kind!r} but has no {kind!r} object",
            block_id=block_id,
        )

    return Block(
        id=block_id,
        kind=kind,
        text=_block_text(node[kind]),
        raw_source=raw_source,
        has_children=has_children,
    )


def _block_text(sub: Any) -> str:
    if not isinstance(sub, dict):
        return ""
    for key in FRAGMENT_KEYS:
        fragments = sub.get(key)
        if isinstance(fragments, list):
            return plain_text(fragments)
    return ""


def decode_block_list(text: str | dict[str, Any]) -> Document:
    """Decode a ``"list"`` envelope of block nodes, in order."""
    envelope = load_envelope(text, "list")
    return Document(blocks=tuple(decode_block(node) for node in list_results(envelope)))


# --- Block payload builders ---


def _rich_text(content: str) -> list[dict[str, Any]]:
    return [{"type": "text", "text": {"content": content}}]


def heading_block(content: str) -> dict[str, Any]:
    """
    Build a heading block from Markdown-style text.

    The number of leading ``#`` picks the level; Notion only has three.
    """
    stripped = content.lstrip()
    level = len(stripped) - len(stripped.lstrip("#"))
    level = min(3, max(1, level))
    kind = f"heading_{level}"
    return {
        "object": "block",
        "type": kind,
        kind: {"rich_text": _rich_text(stripped.lstrip("#").strip())},
    }


def paragraph_block(content: str) -> dict[str, Any]:
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": _rich_text(content)},
    }


def code_block(content: str, language: str = "plain text") -> dict[str, Any]:
    return {
        "object": "block",
        "type": "code",
        "code": {"language": language, "rich_text": _rich_text(content)},
    }


def bulleted_list_block(
    title: str, children: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """Build a bulleted list item, optionally with nested child blocks."""
    item: dict[str, Any] = {"rich_text": _rich_text(title)}
    if children:
        item["children"] = list(children)
    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": item,
    }
