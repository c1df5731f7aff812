"""Validator dispatch strategies.

Two variants share one protocol: a DirectValidator runs a single procedure
over the whole model, a SectionedValidator runs an ordered set of named
procedures, either all of them or one selected section. Neither keeps any
per-run state; every call gets a fresh EvaluationContext.

A procedure is any callable taking the context followed by the model(s):

    def check_name(ctx, model):
        ctx.start(NAME_REQUIRED)
        if not model.name:
            ctx.fail()
        ctx.complete(Assume.PASS)
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

from .config import EngineConfig
from .context import EvaluationContext
from .errors import ConfigurationError
from .result import ValidationResult

logger = logging.getLogger(__name__)

Procedure = Callable[..., None]

SECTION_ATTR = "_flexvalidator_section"


def section(name: str):
    """Register a SectionedValidator method as the procedure for section `name`.

    Sections run in the order the decorated methods are defined.

    Raises:
        ConfigurationError: If `name` is not a non-empty string
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"section name must be a non-empty string, got {name!r}")

    def decorator(func):
        setattr(func, SECTION_ATTR, name)
        return func
    return decorator


@runtime_checkable
class Validator(Protocol):
    """Capability shared by both dispatch strategies."""

    name: str
    config: EngineConfig

    @property
    def sections(self) -> tuple[str, ...]:
        ...

    def evaluate_all(self, ctx: EvaluationContext, *models: Any) -> None:
        ...

    def evaluate_named(self, ctx: EvaluationContext, section: str, *models: Any) -> None:
        ...

    def validate(self, *models: Any) -> ValidationResult:
        ...

    def validate_section(self, section: str, *models: Any) -> ValidationResult:
        ...


def run_validation(validator: Validator, *models: Any, section: str | None = None) -> ValidationResult:
    """Evaluate `validator` against a fresh context and snapshot the result.

    Args:
        validator: Validator to run
        models: Model instance(s) handed to every procedure
        section: Run only this section instead of all of them

    Returns:
        ValidationResult of this run

    Raises:
        ProtocolError: If a procedure misuses the rule lifecycle
        ConfigurationError: If `section` is not registered
    """
    ctx = EvaluationContext.spawn(validator)
    label = validator.name if section is None else f"{validator.name}[{section}]"

    logger.debug(f"Starting validation with {label}")
    if section is None:
        validator.evaluate_all(ctx, *models)
    else:
        validator.evaluate_named(ctx, section, *models)

    result = ctx.to_result()
    logger.info(f"Validation {label} completed: {len(result.passed)} passed, {len(result.failed)} failed")
    return result


def _invoke(procedure: Procedure, ctx: EvaluationContext, models: tuple, where: str) -> None:
    procedure(ctx, *models)
    ctx.ensure_closed(where)


class DirectValidator:
    """Runs one procedure unconditionally over the full model.

    Either pass the procedure in, or subclass and define
    `rules(self, ctx, *models)`.
    """

    def __init__(self, procedure: Procedure | None = None, *, name: str | None = None,
                 config: EngineConfig | None = None):
        if procedure is None:
            procedure = getattr(self, "rules", None)
        if procedure is None or not callable(procedure):
            raise ConfigurationError(f"{type(self).__name__} has no procedure to run")

        if name is None:
            if type(self) is DirectValidator:
                name = getattr(procedure, "__name__", type(self).__name__)
            else:
                name = type(self).__name__

        self.name = name
        self.config = config or EngineConfig()
        self._procedure = procedure

    @property
    def sections(self) -> tuple[str, ...]:
        return ()

    def evaluate_all(self, ctx: EvaluationContext, *models: Any) -> None:
        _invoke(self._procedure, ctx, models, self.name)

    def evaluate_named(self, ctx: EvaluationContext, section: str, *models: Any) -> None:
        raise ConfigurationError(f"unknown section '{section}' ({self.name} has no sections)")

    def validate(self, *models: Any) -> ValidationResult:
        return run_validation(self, *models)

    def validate_section(self, section: str, *models: Any) -> ValidationResult:
        return run_validation(self, *models, section=section)

    def __repr__(self) -> str:
        return f"<DirectValidator {self.name}>"


class SectionedValidator:
    """Runs named procedures in registration order.

    Sections come from `@section` methods of a subclass, followed by the
    `sections` argument (a mapping or an iterable of (name, procedure) pairs).
    The registry is fixed once the constructor returns.
    """

    def __init__(self, sections: Mapping[str, Procedure] | Iterable[tuple[str, Procedure]] | None = None,
                 *, name: str | None = None, config: EngineConfig | None = None):
        self.name = name or type(self).__name__
        self.config = config or EngineConfig()
        self._sections: Mapping[str, Procedure] = MappingProxyType(self._build_registry(sections))

        logger.debug(f"Registered {len(self._sections)} sections on {self.name}: {', '.join(self._sections)}")

    def _build_registry(self, sections) -> dict[str, Procedure]:
        registry: dict[str, Procedure] = {}

        def register(section_name: str, procedure: Procedure) -> None:
            if not callable(procedure):
                raise ConfigurationError(f"procedure for section '{section_name}' is not callable")
            if section_name in registry and not self.config.allow_section_overwrite:
                raise ConfigurationError(f"duplicate section '{section_name}' on {self.name}")
            registry[section_name] = procedure

        for attr, section_name in _decorated_sections(type(self)).items():
            register(section_name, getattr(self, attr))

        if sections is not None:
            pairs = sections.items() if isinstance(sections, Mapping) else sections
            for section_name, procedure in pairs:
                register(section_name, procedure)

        return registry

    @property
    def sections(self) -> tuple[str, ...]:
        return tuple(self._sections)

    def __contains__(self, section: object) -> bool:
        return section in self._sections

    def _lookup(self, section: str) -> Procedure:
        try:
            return self._sections[section]
        except KeyError:
            raise ConfigurationError(
                f"unknown section '{section}' on {self.name}; known sections: {', '.join(self._sections) or 'none'}"
            ) from None

    def evaluate_all(self, ctx: EvaluationContext, *models: Any) -> None:
        for section_name, procedure in self._sections.items():
            logger.debug(f"Running section {section_name}")
            _invoke(procedure, ctx, models, f"section '{section_name}'")

    def evaluate_named(self, ctx: EvaluationContext, section: str, *models: Any) -> None:
        procedure = self._lookup(section)
        logger.debug(f"Running section {section}")
        _invoke(procedure, ctx, models, f"section '{section}'")

    def validate(self, *models: Any) -> ValidationResult:
        return run_validation(self, *models)

    def validate_section(self, section: str, *models: Any) -> ValidationResult:
        return run_validation(self, *models, section=section)

    def __repr__(self) -> str:
        return f"<SectionedValidator {self.name} sections={list(self._sections)}>"


def _decorated_sections(cls: type) -> dict[str, str]:
    """Map attribute name -> section name for @section methods, base classes first."""
    found: dict[str, str] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            section_name = getattr(value, SECTION_ATTR, None)
            if isinstance(section_name, str):
                found[attr] = section_name
            elif attr in found:
                # Overridden without the decorator
                del found[attr]
    return found
