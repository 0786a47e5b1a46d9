"""
Response envelopes.

Every Notion response is a JSON object whose ``object`` field names its
shape: ``"list"`` for paginated results and ``"page"`` for a single page.
These helpers parse raw response text and check that shape before any
item-level decoding happens.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import MalformedEnvelopeError


def load_envelope(text: str | dict[str, Any], expected_object: str) -> dict[str, Any]:
    """
    Parse `text` and ensure its ``object`` field equals `expected_object`.

    Already-parsed dicts are accepted so decoders can be fed fixtures directly.
    """
    if isinstance(text, dict):
        envelope = text
    else:
        try:
            envelope = json.loads(text)
        except (TypeError, ValueError) as e:
            raise MalformedEnvelopeError(f"Response is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise MalformedEnvelopeError("Response is not a JSON object")

    object_type = envelope.get("object")
    if object_type != expected_object:
        raise MalformedEnvelopeError(
            f"Expected object {expected_object!r}, got {object_type!r}"
        )
    return envelope


def list_results(envelope: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the ``results`` sequence of a list envelope."""
    results = envelope.get("results")
    if not isinstance(results, list):
        raise MalformedEnvelopeError("List response has no 'results' array")
    return results
