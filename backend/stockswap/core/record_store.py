"""Record Store — in-memory id → record mapping loaded once from a JSON document.

Invariants:
    - Keys are unique record ids; insertion order is the document's parse order
    - set_owner is the only mutation; records are never created or deleted here
    - list() filters are conjunctive and limit truncates after filtering
    - portfolio_for() on an owner with no records is empty, never an error

Design Decisions:
    - Plain dict of opaque records: the store only reads id/owned/price/sector,
      every other attribute round-trips untouched
    - No locking here: the transfer engine serializes mutations per record
"""

from dataclasses import dataclass, field

from stockswap.core.domain_types import OwnerId, Record, RecordId


@dataclass
class Portfolio:
    """All records held by one owner and their summed price."""
    owner_id: str
    stock_count: int = 0
    total_value: float = 0
    stocks: list[Record] = field(default_factory=list)

    def to_response(self) -> dict:
        return {
            "ownerId": self.owner_id,
            "stockCount": self.stock_count,
            "totalValue": self.total_value,
            "stocks": self.stocks,
        }


class RecordStore:
    """Mutable mapping of records with read-side queries."""

    def __init__(self, records: dict[str, Record] | None = None):
        self._records: dict[str, Record] = records if records is not None else {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def get(self, record_id: RecordId | str) -> Record | None:
        return self._records.get(record_id)

    def list(
        self,
        sector: str | None = None,
        owner: OwnerId | str | None = None,
        limit: int | None = None,
    ) -> list[Record]:
        """Filter by sector and owner, then truncate to limit when positive."""
        records = [
            r for r in self._records.values()
            if (not sector or r.get("sector") == sector)
            and (not owner or r.get("owned") == owner)
        ]
        if limit and limit > 0:
            records = records[:limit]
        return records

    def portfolio_for(self, owner_id: OwnerId | str) -> Portfolio:
        stocks = [r for r in self._records.values() if r.get("owned") == owner_id]
        return Portfolio(
            owner_id=owner_id,
            stock_count=len(stocks),
            total_value=sum(r.get("price") or 0 for r in stocks),
            stocks=stocks,
        )

    def sector_stats(self) -> dict[str, dict]:
        """Per-sector count, summed and average price, and member ids."""
        stats: dict[str, dict] = {}
        for record in self._records.values():
            sector = stats.setdefault(record.get("sector"), {
                "count": 0, "totalValue": 0, "avgPrice": 0, "stocks": [],
            })
            sector["count"] += 1
            sector["totalValue"] += record.get("price") or 0
            sector["stocks"].append(record.get("id"))
        for sector in stats.values():
            sector["avgPrice"] = sector["totalValue"] / sector["count"]
        return stats

    def set_owner(self, record_id: RecordId | str, owner: OwnerId | str) -> Record:
        """Overwrite the owner in place. Raises KeyError for unknown ids."""
        record = self._records[record_id]
        record["owned"] = owner
        return record

    def as_dict(self) -> dict[str, Record]:
        """Live mapping, for serialization by the persistence sink."""
        return self._records
