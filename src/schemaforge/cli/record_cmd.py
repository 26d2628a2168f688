"""Record CLI commands — check a record against a declared model."""

import json
from pathlib import Path

import click
import yaml

from schemaforge.exceptions import SchemaDefinitionError
from schemaforge.schema.loader import SchemaLoader


def _read_record(path: Path) -> dict:
    with path.open() as fh:
        if path.suffix == ".json":
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise click.BadParameter(
            f"{path} must contain a mapping of attributes", param_hint="RECORD"
        )
    return data


@click.group()
def record():
    """Record commands."""
    pass


@record.command()
@click.argument("record_path", metavar="RECORD", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(exists=True, path_type=Path),
    help="Declaration file or directory.",
)
@click.option("--model", "model_name", required=True, help="Model to check against.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@click.option("--dump", is_flag=True, default=False, help="Also print the serialized model.")
def check(record_path: Path, schema_path: Path, model_name: str, as_json: bool, dump: bool):
    """Check RECORD (JSON or YAML) against MODEL.

    The record is written through the model's setters before validation,
    so the result reflects what the model would store.
    """
    loader = SchemaLoader(schema_path)
    try:
        loader.load_all()
    except SchemaDefinitionError as e:
        click.echo(click.style(f"Schema resolution failed: {e}", fg="red"), err=True)
        raise SystemExit(1)

    model_class = loader.get_model(model_name)
    if model_class is None:
        click.echo(f"Error: model '{model_name}' not found", err=True)
        raise SystemExit(1)

    model = model_class(_read_record(record_path), silent=True)
    violation = model.check()

    if as_json:
        result = {"valid": violation is None}
        if violation is not None:
            result["error"] = violation.to_dict()
        if dump:
            result["model"] = model.to_json()
        click.echo(json.dumps(result, default=str, indent=2))
    else:
        if dump:
            click.echo(json.dumps(model.to_json(), default=str, indent=2))
        if violation is None:
            click.echo(click.style("valid", fg="green"))
        else:
            click.echo(click.style(violation.message, fg="red"))

    if violation is not None:
        raise SystemExit(1)
