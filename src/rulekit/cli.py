from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from rulekit.core.errors import InvalidRuleConfigError
from rulekit.models.base import Model
from rulekit.validation.factory import ValidatorFactory

app = typer.Typer(help="Validate JSON documents against declarative rules.")


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def build_model_class(rules: list[Any]) -> type[Model]:
    """Create a Model subclass declaring the given JSON rules.

    Each JSON rule is a list of [attributes, type] optionally followed by
    an options object.
    """
    if not isinstance(rules, list):
        raise InvalidRuleConfigError("Rules file must contain a list of rules.")
    declared = [tuple(rule) if isinstance(rule, list) else rule for rule in rules]

    class DocumentModel(Model):
        @classmethod
        def rules(cls) -> list[Any]:
            return declared

    return DocumentModel


@app.command("types")
def list_types() -> None:
    """List the registered validator types."""
    for name in ValidatorFactory.available_types():
        typer.echo(name)


@app.command("validate")
def validate_document(
    rules_file: Path = typer.Argument(..., help="JSON file with a list of rules."),
    data_file: Path = typer.Argument(..., help="JSON file with the object to validate."),
    show_data: bool = typer.Option(
        False, "--show-data", help="Print the document after filters were applied."
    ),
) -> None:
    """Validate a JSON object against a JSON list of rules."""
    rules = _load_json(rules_file)
    data = _load_json(data_file)
    if not isinstance(data, dict):
        typer.echo("Data file must contain a JSON object.", err=True)
        raise typer.Exit(code=2)

    try:
        model = build_model_class(rules).model_validate(data)
        valid = model.validate_rules()
    except InvalidRuleConfigError as exc:
        typer.echo(f"Invalid rules: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    if show_data:
        typer.echo(json.dumps(model.model_dump(), indent=2, default=str))

    if valid:
        typer.echo("OK")
        return

    for attribute, messages in model.get_errors().items():
        for message in messages:
            typer.echo(f"{attribute}: {message}")
    raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
