"""
Data Model
==========

Typed containers produced by the decoders.

- `Cell`: one decoded property value, tagged with its `CellKind`.
- `Record`: one database row (a Notion page) made of cells.
- `Table`: an ordered, immutable collection of records.
- `Block`: one node of page content, possibly with nested children.
- `Document`: an ordered collection of blocks with a plain-text rendering.

Everything here is built once by the decoders and never mutated afterwards.
Raw JSON only exists at the decode boundary; past it, callers work with
these types.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Union

import structlog

from .errors import ConversionError, NotionError, UnsupportedKindError

log = structlog.get_logger(__name__)

CellValue = Union[str, int, float, bool, datetime, tuple[str, ...], None]


class CellKind(str, enum.Enum):
    """Closed set of property types the cell decoder knows how to read."""

    TITLE = "title"
    TEXT = "text"
    RICH_TEXT = "rich_text"
    MULTI_SELECT = "multi_select"
    SELECT = "select"
    STATUS = "status"
    NUMBER = "number"
    DATE = "date"
    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"
    CHECKBOX = "checkbox"
    PEOPLE = "people"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    FILES = "files"
    RELATION = "relation"
    ROLLUP = "rollup"
    FORMULA = "formula"

    @classmethod
    def parse(cls, tag: str) -> "CellKind":
        """Resolve a raw discriminator, raising `UnsupportedKindError` if unknown."""
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedKindError(str(tag)) from None


@dataclass(frozen=True)
class Cell:
    """A single decoded property."""

    name: str
    kind: CellKind | None
    value: CellValue
    raw_source: str = field(default="", repr=False)


@dataclass(frozen=True)
class Record:
    """
    A decoded database row.

    Cells keep the order in which the API returned the properties. Lookups
    are by name: the first matching cell wins, and a missing name never
    raises. Schemas evolve and optional columns come and go, so every
    accessor returns a zero value for an absent field and logs a warning.
    """

    id: str
    external_ref: str
    cells: tuple[Cell, ...] = ()

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, name: object) -> bool:
        return any(cell.name == name for cell in self.cells)

    @property
    def names(self) -> list[str]:
        return [cell.name for cell in self.cells]

    def get(self, name: str) -> Cell | None:
        """Return the first cell called `name`, or None when it is missing."""
        for cell in self.cells:
            if cell.name == name:
                return cell
        log.warning("Field missing from record", record_id=self.id, field=name)
        return None

    def get_value(self, name: str) -> CellValue:
        """Return the raw decoded value, or an empty string when missing."""
        cell = self.get(name)
        if cell is None:
            return ""
        return cell.value

    def get_str(self, name: str) -> str:
        cell = self.get(name)
        if cell is None:
            return ""
        return _to_str(cell.value)

    def get_int(self, name: str) -> int:
        cell = self.get(name)
        if cell is None:
            return 0
        return _to_int(cell.value)

    def get_float(self, name: str) -> float:
        cell = self.get(name)
        if cell is None:
            return 0.0
        return _to_float(cell.value)

    def get_bool(self, name: str) -> bool:
        cell = self.get(name)
        if cell is None:
            return False
        return _to_bool(cell.value)


def _to_str(value: CellValue) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, tuple):
        return ", ".join(value)
    return str(value)


def _to_int(value: CellValue) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ConversionError(value, "int")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ConversionError(value, "int", "value has a fractional part")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ConversionError(value, "int") from None
    raise ConversionError(value, "int")


def _to_float(value: CellValue) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ConversionError(value, "float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ConversionError(value, "float") from None
    raise ConversionError(value, "float")


def _to_bool(value: CellValue) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ConversionError(value, "bool")


@dataclass(frozen=True)
class Table:
    """
    An ordered collection of records.

    `pages`, `has_more` and `failure` describe how the table was fetched and
    are excluded from equality. A table built by the paged fetcher with
    `failure` set (or `has_more` still true) is partial.
    """

    records: tuple[Record, ...] = ()
    pages: int = field(default=0, compare=False)
    has_more: bool = field(default=False, compare=False)
    failure: NotionError | None = field(default=None, compare=False, repr=False)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    @property
    def complete(self) -> bool:
        return self.failure is None and not self.has_more

    def merge(self, other: "Table") -> "Table":
        """Return a new table with `other`'s records appended after ours."""
        return Table(
            records=self.records + other.records,
            pages=self.pages + other.pages,
            has_more=other.has_more,
            failure=other.failure or self.failure,
        )

    def find(self, record_id: str) -> Record | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def value(self, row: int, column: str) -> CellValue:
        """Return the value of `column` in the record at position `row`."""
        if row < 0 or row >= len(self.records):
            raise IndexError(f"Row {row} is out of range for {len(self.records)} records")
        return self.records[row].get_value(column)

    def column(self, name: str) -> list[CellValue]:
        return [record.get_value(name) for record in self.records]


@dataclass(frozen=True)
class Block:
    """One node of page content."""

    id: str
    kind: str | None
    text: str | None
    raw_source: str = field(default="", repr=False)
    has_children: bool = False
    children: tuple["Block", ...] = ()

    def walk(self) -> Iterator["Block"]:
        """Yield this block followed by its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Document:
    """An ordered collection of blocks."""

    blocks: tuple[Block, ...] = ()

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def walk(self) -> Iterator[Block]:
        for block in self.blocks:
            yield from block.walk()

    def render(self) -> str:
        """
        Return the plain text of every block, one block per line.

        Each block ends with exactly one newline, empty blocks included.
        """
        return "".join((block.text or "").rstrip("\n") + "\n" for block in self.walk())

    def __str__(self) -> str:
        return self.render()
