"""Rule identity and record types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    """Resolved state of a rule."""
    PASSED = "passed"
    FAILED = "failed"


class Assume(str, Enum):
    """Default outcome applied at completion when no explicit outcome was set."""
    PASS = "pass"
    FAIL = "fail"

    @property
    def outcome(self) -> Outcome:
        return Outcome.PASSED if self is Assume.PASS else Outcome.FAILED


@dataclass(frozen=True)
class RuleInfo:
    """Identity of a rule.

    The guid is opaque to the engine. Reusing a guid for a different rule
    corrupts result lookups, so guids should be generated once (uuid4) and
    kept as constants next to the rule.
    """
    guid: str
    message: str
    metadata: Any = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.guid}: {self.message}"


@dataclass(frozen=True)
class RuleRecord:
    """A resolved rule. Only created by the engine."""
    rule: RuleInfo
    outcome: Outcome

    @property
    def guid(self) -> str:
        return self.rule.guid

    @property
    def message(self) -> str:
        return self.rule.message

    @property
    def metadata(self) -> Any:
        return self.rule.metadata

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "guid": self.guid,
            "message": self.message,
            "metadata": self.metadata,
            "outcome": self.outcome.value,
        }
