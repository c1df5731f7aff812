"""flexvalidator - Rule-based validation for complex business models.

Rules are plain Python branching code wrapped in a start/pass/fail/complete
lifecycle. Validators group rules into named sections, compose other
validators, and produce a single queryable ValidationResult.
"""

__version__ = "0.1.0"
__description__ = "Rule-based validation engine with sections and composition"

from flexvalidator.config import EngineConfig, FlexValidatorConfig, load_config
from flexvalidator.context import EvaluationContext
from flexvalidator.errors import ConfigurationError, FlexValidatorError, ProtocolError
from flexvalidator.result import ValidationResult
from flexvalidator.rules import Assume, Outcome, RuleInfo, RuleRecord
from flexvalidator.validators import (
    DirectValidator,
    SectionedValidator,
    Validator,
    run_validation,
    section,
)

__all__ = [
    "__version__",
    "__description__",
    "Assume",
    "ConfigurationError",
    "DirectValidator",
    "EngineConfig",
    "EvaluationContext",
    "FlexValidatorConfig",
    "FlexValidatorError",
    "Outcome",
    "ProtocolError",
    "RuleInfo",
    "RuleRecord",
    "SectionedValidator",
    "ValidationResult",
    "Validator",
    "run_validation",
    "section",
    "load_config",
]
