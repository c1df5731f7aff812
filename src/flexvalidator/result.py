"""Immutable, queryable outcome of a validation run."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .rules import Outcome, RuleInfo, RuleRecord


@dataclass(frozen=True)
class ValidationResult:
    """Snapshot of every rule resolved during one run, in resolution order.

    A guid may appear more than once (e.g. the same sub-validator composed
    twice). All records stay enumerable; `outcome_of` reports the most recent
    one.
    """
    records: tuple[RuleRecord, ...] = ()
    _latest: dict[str, RuleRecord] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))
        latest = self._latest
        for record in self.records:
            latest[record.guid] = record

    @classmethod
    def from_records(cls, records: Iterable[RuleRecord]) -> "ValidationResult":
        return cls(tuple(records))

    @property
    def passed(self) -> tuple[RuleInfo, ...]:
        """Rules that passed, in resolution order."""
        return tuple(r.rule for r in self.records if r.passed)

    @property
    def failed(self) -> tuple[RuleInfo, ...]:
        """Rules that failed, in resolution order."""
        return tuple(r.rule for r in self.records if r.failed)

    @property
    def is_valid(self) -> bool:
        return not any(r.failed for r in self.records)

    def has(self, guid: str) -> bool:
        return guid in self._latest

    def outcome_of(self, guid: str) -> Outcome | None:
        """Outcome of the most recent record for guid, or None if it never ran."""
        record = self._latest.get(guid)
        return record.outcome if record is not None else None

    def records_for(self, guid: str) -> tuple[RuleRecord, ...]:
        return tuple(r for r in self.records if r.guid == guid)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, RuleInfo):
            item = item.guid
        return isinstance(item, str) and self.has(item)

    def __iter__(self) -> Iterator[RuleRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "valid": self.is_valid,
            "counters": {
                "total": len(self.records),
                "passed": len(self.passed),
                "failed": len(self.failed),
            },
            "records": [record.to_dict() for record in self.records],
        }
