"""CLI interface for flexvalidator using Typer framework."""

import importlib
import inspect
import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from flexvalidator import __description__, __version__
from flexvalidator.config import EngineConfig, FlexValidatorConfig, LogLevel, OutputFormat, load_config
from flexvalidator.errors import ConfigurationError, FlexValidatorError
from flexvalidator.result import ValidationResult
from flexvalidator.validators import Validator

app = typer.Typer(
    name="flexvalidator",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"flexvalidator version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """flexvalidator - Rule-based validation with sections and composition."""


def _setup_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.to_logging_level(),
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_target(target: str) -> Any:
    """Import `module:attribute` and return the object it names.

    Raises:
        ConfigurationError: If the target cannot be imported
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"target must look like 'package.module:attribute', got '{target}'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"cannot import module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ConfigurationError(f"'{module_name}' has no attribute '{attr_path}'") from None
    return obj


def load_validator(target: str, config: EngineConfig | None = None) -> Validator:
    """Resolve a validator instance from an instance, class or factory target.

    Classes and factories are called with `config` when one is given. An
    instance is used as-is, so its own config must match `config`.
    """
    obj = load_target(target)
    if inspect.isclass(obj) or (callable(obj) and not isinstance(obj, Validator)):
        obj = obj() if config is None else obj(config=config)
    elif config is not None and isinstance(obj, Validator) and obj.config != config:
        raise ConfigurationError(
            f"'{target}' is a validator instance built with a different engine config; "
            "point at its class or factory instead"
        )
    if not isinstance(obj, Validator):
        raise ConfigurationError(f"'{target}' is not a validator")
    return obj


def _engine_config(settings: FlexValidatorConfig) -> EngineConfig | None:
    """Engine section of the loaded config, None when the file does not set one."""
    return settings.engine if "engine" in settings.model_fields_set else None


def load_models(paths: list[Path], model_class: str | None = None) -> list[Any]:
    """Read JSON model files, optionally converting each with `model_class`."""
    factory = load_target(model_class) if model_class else None
    models = []
    for path in paths:
        try:
            with open(path, encoding="utf-8") as f:
                data = jsonlib.load(f)
        except jsonlib.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in model file {path}: {e}")

        if factory is None:
            models.append(data)
        elif hasattr(factory, "model_validate"):
            models.append(factory.model_validate(data))
        else:
            models.append(factory(**data))
    return models


def _output_result(result: ValidationResult, output_format: OutputFormat, show_passed: bool) -> None:
    if output_format == OutputFormat.JSON:
        console.print(jsonlib.dumps(result.to_dict(), indent=2), soft_wrap=True, markup=False, highlight=False)
        return

    if result.is_valid:
        console.print(f"[green]Validation PASSED[/green] ({len(result)} rules)")
    else:
        console.print(f"[red]Validation FAILED[/red] ({len(result.failed)} of {len(result)} rules failed)")

    rows = [r for r in result.records if show_passed or r.failed]
    if not rows:
        return

    table = Table()
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Outcome", style="white")
    table.add_column("Message", style="white")

    for record in rows:
        color = "green" if record.passed else "red"
        table.add_row(escape(record.guid), f"[{color}]{record.outcome.value.upper()}[/{color}]", escape(record.message))

    console.print(table)


@app.command()
def run(
    target: Annotated[
        str,
        typer.Argument(help="Validator to run as 'package.module:attribute' (instance, class or factory)")
    ],
    model: Annotated[
        list[Path],
        typer.Option("--model", "-m", help="JSON model file; repeat for validators taking several models")
    ],
    model_class: Annotated[
        Optional[str],
        typer.Option("--model-class", help="Class used to build each model, as 'package.module:Class'")
    ] = None,
    section_name: Annotated[
        Optional[str],
        typer.Option("--section", "-s", help="Run only this section")
    ] = None,
    format: Annotated[
        Optional[OutputFormat],
        typer.Option("--format", "-f", help="Output format: table, json (default: from config)")
    ] = None,
    show_passed: Annotated[
        bool,
        typer.Option("--show-passed", help="List passed rules as well as failed ones")
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .flexvalidator.json)")
    ] = None,
) -> None:
    """Validate JSON model files with a validator."""
    try:
        settings = load_config(config)
        _setup_logging(settings.logging.level)

        validator = load_validator(target, _engine_config(settings))
        models = load_models(model, model_class)

        if section_name is None:
            result = validator.validate(*models)
        else:
            result = validator.validate_section(section_name, *models)
    except (FlexValidatorError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    except (AttributeError, TypeError) as e:
        console.print(f"[red]Error:[/red] model does not fit {escape(target)}: {escape(str(e))}", highlight=False)
        console.print("[dim]Use --model-class to build models the validator can read[/dim]")
        raise typer.Exit(1)

    _output_result(result, format or settings.output.format, show_passed or settings.output.show_passed)
    raise typer.Exit(0 if result.is_valid else 1)


@app.command()
def sections(
    target: Annotated[
        str,
        typer.Argument(help="Validator as 'package.module:attribute'")
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .flexvalidator.json)")
    ] = None,
) -> None:
    """List the sections a validator registers."""
    try:
        validator = load_validator(target, _engine_config(load_config(config)))
    except (FlexValidatorError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    if not validator.sections:
        console.print(f"[yellow]{validator.name} has no sections[/yellow]")
        return

    table = Table(title=validator.name)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Section", style="cyan")
    for index, name in enumerate(validator.sections, start=1):
        table.add_row(str(index), name)
    console.print(table)


@app.command()
def demo(
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: table, json")
    ] = OutputFormat.TABLE,
) -> None:
    """Validate the bundled example model and print the failed rules."""
    from flexvalidator.examples import SomeModelValidator, create_sample_model

    sample = create_sample_model()
    if format == OutputFormat.TABLE:
        console.print("Using the following model:")
        console.print(sample.model_dump_json(indent=2, by_alias=True), soft_wrap=True, markup=False, highlight=False)
        console.print()

    result = SomeModelValidator().validate(sample)
    _output_result(result, format, show_passed=False)
