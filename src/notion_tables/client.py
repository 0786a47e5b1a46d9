"""
Notion API Client
=================

This module provides the high-level client most callers use. It wires a
`NotionTransport` to a `PagedFetcher` and exposes the read operations
(database queries, single pages, block children) as typed results, plus
the handful of write operations needed to maintain a database: renaming
it, patching it, appending blocks and deleting blocks.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Iterable

import structlog

from .config import Settings
from .errors import TransportError
from .fetcher import PagedFetcher
from .models import Block, Document, Record, Table
from .transport import NotionTransport, Transport
from .utils import normalize_id

log = structlog.get_logger(__name__)


class NotionClient:
    """A client for reading and maintaining Notion databases and pages."""

    def __init__(
        self,
        settings: Settings,
        transport: Transport | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.settings = settings
        self._owns_transport = transport is None
        self.transport = transport or NotionTransport(settings)
        self.fetcher = PagedFetcher(
            self.transport,
            page_size=settings.PAGE_SIZE,
            cancel_event=cancel_event,
        )

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "NotionClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _url(self, path: str) -> str:
        return f"{self.settings.NOTION_URL}/{path.lstrip('/')}"

    def query_database(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> Table:
        """
        Return every row of a database, following pagination.

        The table may be partial if a page failed; see `Table.complete`.
        """
        body: dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        url = self._url(f"databases/{normalize_id(database_id)}/query")
        return self.fetcher.fetch_table(url, method="POST", body=body)

    def get_page(self, page_id: str) -> Record:
        """Return a single page as a record."""
        return self.fetcher.fetch_record(self._url(f"pages/{normalize_id(page_id)}"))

    def get_block_children(self, block_id: str, recursive: bool = False) -> Document:
        """
        Return the child blocks of a page or block.

        With `recursive`, children of nested blocks are fetched as well and
        attached to their parent's `Block.children`.
        """
        url = self._url(f"blocks/{normalize_id(block_id)}/children")
        document = self.fetcher.fetch_document(url)
        if not recursive:
            return document
        return Document(blocks=tuple(self._with_children(block) for block in document))

    def _with_children(self, block: Block) -> Block:
        if not block.has_children:
            return block
        children = self.get_block_children(block.id, recursive=True)
        return replace(block, children=children.blocks)

    def update_database(
        self, database_id: str, payload: dict[str, Any], method: str = "PATCH"
    ) -> None:
        """Send a raw update to a database."""
        database_id = normalize_id(database_id)
        log.info("Updating database", database_id=database_id, method=method)
        self._send(self._url(f"databases/{database_id}"), method, payload)
        log.info("Database update completed", database_id=database_id)

    def change_database_title(self, database_id: str, title: str) -> None:
        payload = {"title": [{"type": "text", "text": {"content": title}}]}
        self.update_database(database_id, payload)

    def append_block_children(
        self, block_id: str, blocks: list[dict[str, Any]]
    ) -> None:
        """Append block payloads (see `notion_tables.blocks`) to a page or block."""
        url = self._url(f"blocks/{normalize_id(block_id)}/children")
        self._send(url, "PATCH", {"children": list(blocks)})

    def delete_block(self, block_id: str) -> None:
        log.info("Deleting block", block_id=block_id)
        self._send(self._url(f"blocks/{normalize_id(block_id)}"), "DELETE")

    def delete_blocks(self, block_ids: Iterable[str]) -> None:
        """Delete blocks one at a time, stopping at the first failure."""
        block_ids = list(block_ids)
        log.info("Deleting blocks", count=len(block_ids))
        for block_id in block_ids:
            self.delete_block(block_id)
        log.info("All blocks deleted", count=len(block_ids))

    def _send(self, url: str, method: str, body: dict[str, Any] | None = None) -> None:
        response = self.transport.send(url, method, body=body)
        if not response.ok:
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
