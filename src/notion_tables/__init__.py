"""
Typed access to Notion databases and pages.

This package contains:

- decoders turning Notion property values, pages and blocks into typed
  `Cell`, `Record` and `Block` objects
- a paged fetcher that follows cursor pagination into a `Table`
- a requests-based transport and a high-level `NotionClient`
- environment-driven settings and structlog configuration
"""

from .blocks import decode_block, decode_block_list
from .cells import decode_cell
from .client import NotionClient
from .config import NotionConfig, Settings
from .errors import (
    ConversionError,
    MalformedBlockError,
    MalformedEnvelopeError,
    NotionError,
    TransportError,
    UnsupportedKindError,
)
from .fetcher import PagedFetcher, RequestKind
from .models import Block, Cell, CellKind, Document, Record, Table
from .records import decode_record, decode_record_page, decode_single_item
from .transport import NotionTransport, TransportResponse

__all__ = [
    "Block",
    "Cell",
    "CellKind",
    "ConversionError",
    "Document",
    "MalformedBlockError",
    "MalformedEnvelopeError",
    "NotionClient",
    "NotionConfig",
    "NotionError",
    "NotionTransport",
    "PagedFetcher",
    "Record",
    "RequestKind",
    "Settings",
    "Table",
    "TransportError",
    "TransportResponse",
    "UnsupportedKindError",
    "decode_block",
    "decode_block_list",
    "decode_cell",
    "decode_record",
    "decode_record_page",
    "decode_single_item",
]
