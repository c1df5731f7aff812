"""Per-run rule state machine.

An EvaluationContext is created fresh for every validation call and passed
explicitly to every procedure. It is never shared between calls, which is
what makes a single validator instance safe to use from many threads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .config import DuplicateRulePolicy
from .errors import ProtocolError
from .result import ValidationResult
from .rules import Assume, Outcome, RuleInfo, RuleRecord

if TYPE_CHECKING:
    from .validators import Validator

logger = logging.getLogger(__name__)


class EvaluationContext:
    """Tracks the currently open rule and the records resolved so far."""

    def __init__(self, duplicate_rules: DuplicateRulePolicy = DuplicateRulePolicy.KEEP_ALL):
        self.duplicate_rules = DuplicateRulePolicy(duplicate_rules)
        self._records: list[RuleRecord] = []
        self._latest: dict[str, RuleRecord] = {}
        self._open: RuleInfo | None = None
        self._provisional: Outcome | None = None

    # Rule lifecycle

    def start(self, rule: RuleInfo | str, message: str | None = None, metadata: Any = None) -> RuleInfo:
        """Open a new rule.

        Args:
            rule: A RuleInfo, or a guid string combined with `message`
            message: Human readable description when `rule` is a guid
            metadata: Optional free-form metadata when `rule` is a guid

        Returns:
            The RuleInfo that is now open

        Raises:
            ProtocolError: If the previous rule was never completed
        """
        if not isinstance(rule, RuleInfo):
            if message is None:
                raise TypeError("start() requires a message when given a guid")
            rule = RuleInfo(rule, message, metadata)

        if self._open is not None:
            raise ProtocolError("rule already open", self._open)

        self._open = rule
        self._provisional = None
        logger.debug(f"Started rule {rule.guid}")
        return rule

    def pass_(self) -> None:
        """Mark the open rule as passed."""
        self._set_outcome(Outcome.PASSED)

    def fail(self) -> None:
        """Mark the open rule as failed."""
        self._set_outcome(Outcome.FAILED)

    def complete(self, assume: Assume | None = None) -> RuleRecord:
        """Resolve and close the open rule.

        An explicit pass_()/fail() always wins; `assume` only applies when
        neither was called.

        Raises:
            ProtocolError: If no rule is open, or no outcome can be determined
        """
        rule = self._open
        if rule is None:
            raise ProtocolError("no rule open")

        outcome = self._provisional
        if outcome is None:
            if assume is None:
                raise ProtocolError("rule left unresolved", rule)
            outcome = Assume(assume).outcome

        record = RuleRecord(rule, outcome)
        self._append(record)
        self._open = None
        self._provisional = None
        logger.debug(f"Completed rule {rule.guid}: {outcome.value}")
        return record

    def _set_outcome(self, outcome: Outcome) -> None:
        if self._open is None:
            raise ProtocolError("no rule open")
        if self._provisional is not None:
            raise ProtocolError("outcome already set", self._open)
        self._provisional = outcome

    def _append(self, record: RuleRecord) -> None:
        if self.duplicate_rules == DuplicateRulePolicy.REJECT and record.guid in self._latest:
            raise ProtocolError("rule resolved more than once", record.rule)
        self._records.append(record)
        self._latest[record.guid] = record

    @property
    def is_open(self) -> bool:
        return self._open is not None

    @property
    def open_rule(self) -> RuleInfo | None:
        return self._open

    def ensure_closed(self, where: str) -> None:
        """Raise if a rule opened inside `where` was never completed."""
        if self._open is not None:
            raise ProtocolError(f"rule left open by {where}", self._open)

    # In-flight queries

    @property
    def records(self) -> tuple[RuleRecord, ...]:
        return tuple(self._records)

    def has(self, guid: str) -> bool:
        return guid in self._latest

    def outcome_of(self, guid: str) -> Outcome | None:
        """Outcome of the most recent record for guid, None if not resolved yet."""
        record = self._latest.get(guid)
        return record.outcome if record is not None else None

    def passed(self, guid: str) -> bool:
        """True only if guid has been resolved and its latest outcome is passed."""
        return self.outcome_of(guid) is Outcome.PASSED

    def failed(self, guid: str) -> bool:
        """True only if guid has been resolved and its latest outcome is failed."""
        return self.outcome_of(guid) is Outcome.FAILED

    def records_for(self, guid: str) -> tuple[RuleRecord, ...]:
        return tuple(r for r in self._records if r.guid == guid)

    # Composition

    def include(self, validator: Validator, *models: Any) -> ValidationResult:
        """Run another validator on a child context and merge its records.

        Returns the child's result so the calling procedure can branch on it.
        """
        child = self.spawn(validator)
        validator.evaluate_all(child, *models)
        result = child.to_result()
        self.merge(result)
        logger.debug(f"Merged {len(result)} records from {validator.name}")
        return result

    def include_section(self, validator: Validator, section: str, *models: Any) -> ValidationResult:
        """Like include(), restricted to a single named section."""
        child = self.spawn(validator)
        validator.evaluate_named(child, section, *models)
        result = child.to_result()
        self.merge(result)
        logger.debug(f"Merged {len(result)} records from {validator.name}[{section}]")
        return result

    def merge(self, result: ValidationResult) -> None:
        """Append the records of a finished result as one contiguous block."""
        if self.duplicate_rules == DuplicateRulePolicy.REJECT:
            seen = set(self._latest)
            for record in result.records:
                if record.guid in seen:
                    raise ProtocolError("rule resolved more than once", record.rule)
                seen.add(record.guid)
        for record in result.records:
            self._append(record)

    @staticmethod
    def spawn(validator: Validator) -> EvaluationContext:
        """Fresh context configured for `validator`."""
        return EvaluationContext(validator.config.duplicate_rules)

    def to_result(self) -> ValidationResult:
        """Snapshot the resolved records.

        Raises:
            ProtocolError: If a rule is still open
        """
        self.ensure_closed("run")
        return ValidationResult.from_records(self._records)

    def __repr__(self) -> str:
        state = f"open={self._open.guid}" if self._open else "idle"
        return f"<EvaluationContext {state} records={len(self._records)}>"
