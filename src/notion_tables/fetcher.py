"""
Paged Fetching
==============

Drives Notion's cursor-based pagination and folds each decoded page into a
single `Table`.

The records loop is an explicit state machine::

    START -> REQUESTING -> (MERGING -> REQUESTING)* -> DONE

Pages are requested strictly one after another, since each request needs
the cursor returned by the previous one. A page that fails (transport
error, error status, malformed envelope or an undecodable record) is not
retried here; the loop stops and the records merged so far are returned.
The returned table says so through `Table.failure` and `Table.has_more`,
and nothing is raised. Retrying is the transport's job.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import replace
from typing import Any

import structlog

from .blocks import decode_block_list
from .errors import NotionError, TransportError
from .models import Document, Record, Table
from .records import RecordPage, decode_record_page, decode_single_item
from .transport import Transport, TransportResponse

log = structlog.get_logger(__name__)


class RequestKind(enum.Enum):
    RECORDS = "records"
    BLOCKS = "blocks"


class FetchState(enum.Enum):
    START = "start"
    REQUESTING = "requesting"
    MERGING = "merging"
    DONE = "done"


class PagedFetcher:
    """
    Fetches and decodes Notion list endpoints through an injectable transport.

    A fetcher keeps no per-call state, so one instance can serve several
    concurrent `fetch_all` calls for different endpoints.

    Args:
        transport:
            Anything implementing `Transport.send`.
        page_size:
            Requested page size (the API caps it at 100).
        cancel_event:
            Optional event checked before every page request. Once set, the
            loop stops and returns the records merged so far.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        page_size: int = 100,
        cancel_event: threading.Event | None = None,
    ):
        self.transport = transport
        self.page_size = page_size
        self.cancel_event = cancel_event

    def fetch_all(
        self,
        endpoint: str,
        request_kind: RequestKind = RequestKind.RECORDS,
        *,
        method: str = "POST",
        body: dict[str, Any] | None = None,
    ) -> Table | Document:
        """Fetch every record of `endpoint`, or its single page of blocks."""
        if request_kind is RequestKind.BLOCKS:
            return self.fetch_document(endpoint)
        return self.fetch_table(endpoint, method=method, body=body)

    def fetch_table(
        self,
        endpoint: str,
        *,
        method: str = "POST",
        body: dict[str, Any] | None = None,
    ) -> Table:
        """
        Follow ``next_cursor`` until ``has_more`` is false and return all records.

        Records are kept in arrival order, without sorting or deduplication.
        The result may be partial; check `Table.complete`.
        """
        state = FetchState.START
        cursor: str | None = None
        accumulator = Table()
        page: RecordPage | None = None

        while state is not FetchState.DONE:
            log.debug("Pagination state", endpoint=endpoint, state=state.value)

            if state is FetchState.START:
                cursor = None
                accumulator = Table()
                state = FetchState.REQUESTING

            elif state is FetchState.REQUESTING:
                if self._cancelled():
                    log.info(
                        "Pagination cancelled",
                        endpoint=endpoint,
                        pages=accumulator.pages,
                        records=len(accumulator),
                    )
                    accumulator = replace(accumulator, has_more=True)
                    state = FetchState.DONE
                    continue
                try:
                    page = self._request_page(endpoint, method, body, cursor)
                except NotionError as e:
                    log.warning(
                        "Page fetch failed; returning partial table",
                        endpoint=endpoint,
                        pages=accumulator.pages,
                        records=len(accumulator),
                        error=str(e),
                    )
                    accumulator = replace(accumulator, has_more=True, failure=e)
                    state = FetchState.DONE
                    continue
                state = FetchState.MERGING

            elif state is FetchState.MERGING:
                accumulator = accumulator.merge(page.table)
                if page.has_more and page.next_cursor:
                    cursor = page.next_cursor
                    state = FetchState.REQUESTING
                else:
                    if page.has_more:
                        log.warning(
                            "Page reported has_more without a next_cursor",
                            endpoint=endpoint,
                        )
                    state = FetchState.DONE

        log.info(
            "Fetched table",
            endpoint=endpoint,
            pages=accumulator.pages,
            records=len(accumulator),
            complete=accumulator.complete,
        )
        return accumulator

    def fetch_document(self, endpoint: str) -> Document:
        """Fetch one page of block children and decode it into a document."""
        response = self.transport.send(
            endpoint, "GET", params={"page_size": self.page_size}
        )
        return decode_block_list(_checked(response, "GET", endpoint).text)

    def fetch_record(self, endpoint: str) -> Record:
        """Fetch a single page object and decode it into a record."""
        response = self.transport.send(endpoint, "GET")
        return decode_single_item(_checked(response, "GET", endpoint).text)

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _request_page(
        self,
        endpoint: str,
        method: str,
        body: dict[str, Any] | None,
        cursor: str | None,
    ) -> RecordPage:
        if method.upper() == "GET":
            params: dict[str, Any] = {"page_size": self.page_size}
            if cursor:
                params["start_cursor"] = cursor
            response = self.transport.send(endpoint, "GET", params=params)
        else:
            payload = dict(body or {})
            payload["page_size"] = self.page_size
            if cursor:
                payload["start_cursor"] = cursor
            response = self.transport.send(endpoint, method, body=payload)
        return decode_record_page(_checked(response, method, endpoint).text)


def _checked(response: TransportResponse, method: str, endpoint: str) -> TransportResponse:
    if not response.ok:
        raise TransportError(
            f"{method} {endpoint} returned HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )
    return response
