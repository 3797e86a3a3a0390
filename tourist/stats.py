"""Byte-weight aggregation per resource category."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Iterator, Optional

from .classify import CATEGORY_MIME_TYPES, CategoryTable, classify
from .resources import ResourceRecord, ResourceRecordSet

TOTAL_NAME = "Document"

_TWO_PLACES = Decimal("0.01")


def _percent(part: int, whole: int) -> float:
    if not whole:
        return 0.0
    value = Decimal(part) * 100 / Decimal(whole)
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class PercentShare:
    """Encoded and decoded share of a whole, in percent."""

    encoded: float
    decoded: float


@dataclass(slots=True)
class ByteTotals:
    """Running sum of transferred and uncompressed bytes."""

    encoded: int = 0
    decoded: int = 0

    @classmethod
    def from_record(cls, record: Optional[ResourceRecord]) -> "ByteTotals":
        if record is None:
            return cls()
        return cls(encoded=record.encoded_bytes, decoded=record.decoded_bytes)

    def add(self, record: ResourceRecord) -> None:
        self.encoded += record.encoded_bytes
        self.decoded += record.decoded_bytes

    def percent_of(self, whole: "ByteTotals") -> PercentShare:
        """Share of ``whole`` rounded half-up to two decimals."""
        return PercentShare(
            encoded=_percent(self.encoded, whole.encoded),
            decoded=_percent(self.decoded, whole.decoded),
        )


@dataclass(slots=True)
class CategoryTotals:
    """Bytes accumulated for one category, plus its largest resource."""

    name: str
    totals: ByteTotals = field(default_factory=ByteTotals)
    largest: Optional[ResourceRecord] = None

    @property
    def encoded(self) -> int:
        return self.totals.encoded

    @property
    def decoded(self) -> int:
        return self.totals.decoded

    def add(self, record: ResourceRecord) -> None:
        self.totals.add(record)
        # Strictly greater: the first resource seen wins a tie.
        if self.largest is None or record.encoded_bytes > self.largest.encoded_bytes:
            self.largest = record

    def percent_of(self, whole: "CategoryTotals") -> PercentShare:
        return self.totals.percent_of(whole.totals)

    def largest_percent_of(self, whole: "CategoryTotals") -> PercentShare:
        return ByteTotals.from_record(self.largest).percent_of(whole.totals)


class DocumentStats:
    """Aggregate byte statistics for one page load.

    Holds a ``total`` bucket that sees every resource and one bucket per
    category of ``table``. A resource matching no category only counts
    toward the total.
    """

    def __init__(self, table: CategoryTable = CATEGORY_MIME_TYPES) -> None:
        self.table = table
        self.total = CategoryTotals(TOTAL_NAME)
        self.categories: Dict[str, CategoryTotals] = {
            name: CategoryTotals(name) for name in table
        }

    def __getitem__(self, name: str) -> CategoryTotals:
        return self.categories[name]

    def __iter__(self) -> Iterator[CategoryTotals]:
        return iter(self.categories.values())

    def add(self, record: ResourceRecord) -> None:
        self.total.add(record)
        for name in classify(record, self.table):
            self.categories[name].add(record)

    def add_all(self, records: Iterable[ResourceRecord]) -> None:
        for record in records:
            self.add(record)


def collect_stats(
    resource_map: ResourceRecordSet,
    table: CategoryTable = CATEGORY_MIME_TYPES,
) -> DocumentStats:
    """Aggregate a resource map in its iteration order."""
    stats = DocumentStats(table)
    stats.add_all(resource_map.values())
    return stats
