"""Ordered, id-keyed collection of discovered leads."""

from typing import Callable, Dict, Iterator, List, Optional

from ..exceptions import DuplicateLeadError
from ..models.leads import LeadRecord


class LeadStore:
    """
    Holds leads in discovery order.

    Discovery appends with ``add``; enrichment replaces single records with
    ``update``. Records are immutable, so every snapshot returned by ``all``
    stays valid after later updates.
    """

    def __init__(self):
        self._order: List[str] = []
        self._records: Dict[str, LeadRecord] = {}

    def add(self, record: LeadRecord) -> None:
        """Append a new lead, preserving arrival order."""
        if record.id in self._records:
            raise DuplicateLeadError(record.id)
        self._order.append(record.id)
        self._records[record.id] = record

    def update(
        self,
        lead_id: str,
        mutator: Callable[[LeadRecord], LeadRecord]
    ) -> Optional[LeadRecord]:
        """
        Replace one lead with ``mutator(lead)``.

        Only the enrichment fields may change; anything else is write-once.

        Returns:
            The stored replacement, or None when the id is unknown
        """
        current = self._records.get(lead_id)
        if current is None:
            return None

        updated = mutator(current)
        if updated.id != lead_id or type(updated) is not type(current):
            raise ValueError(f"Update for lead '{lead_id}' must keep its id and campaign mode")

        before = current.model_dump(exclude=set(LeadRecord.MUTABLE_FIELDS))
        after = updated.model_dump(exclude=set(LeadRecord.MUTABLE_FIELDS))
        if before != after:
            changed = sorted(k for k in before if before[k] != after.get(k))
            raise ValueError(f"Lead '{lead_id}' fields are write-once: {', '.join(changed)}")

        self._records[lead_id] = updated
        return updated

    def by_id(self, lead_id: str) -> Optional[LeadRecord]:
        return self._records.get(lead_id)

    def all(self) -> List[LeadRecord]:
        """Point-in-time snapshot in discovery order."""
        return [self._records[lead_id] for lead_id in self._order]

    def clear(self) -> None:
        """Remove every lead. Only a full pipeline reset may call this."""
        self._order.clear()
        self._records.clear()

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[LeadRecord]:
        return iter(self.all())

    def __contains__(self, lead_id: object) -> bool:
        return lead_id in self._records
