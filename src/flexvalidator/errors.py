"""Exceptions raised by the flexvalidator engine.

Both error types signal a defect in validator code, never invalid data.
Invalid data is reported as failed rule records.
"""

from .rules import RuleInfo


class FlexValidatorError(Exception):
    """Base class for all flexvalidator errors."""
    pass


class ProtocolError(FlexValidatorError):
    """Raised when the start/pass/fail/complete lifecycle of a rule is violated."""

    def __init__(self, message: str, rule: RuleInfo | None = None):
        self.rule = rule
        if rule is not None:
            message = f"{message}: {rule.guid} ({rule.message})"
        super().__init__(message)


class ConfigurationError(FlexValidatorError):
    """Raised for invalid validator setup, e.g. unknown or duplicate sections."""
    pass
