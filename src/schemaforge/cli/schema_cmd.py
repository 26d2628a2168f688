"""Schema CLI commands — validate and show."""

from pathlib import Path

import click

from schemaforge.exceptions import SchemaDefinitionError
from schemaforge.schema.loader import SchemaLoader
from schemaforge.schema.validator import validate_schema_dir, validate_yaml_file


def _load(path: Path) -> SchemaLoader:
    loader = SchemaLoader(path)
    try:
        loader.load_all()
    except SchemaDefinitionError as e:
        click.echo(click.style(f"Schema resolution failed: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


@click.group()
def schema():
    """Schema declaration commands."""
    pass


@schema.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def validate(path: Path):
    """Validate YAML declarations in PATH (a file or directory)."""
    # ── Document shape (JSON Schema) ────────────────────────────────────────
    if path.is_file():
        issues = validate_yaml_file(path)
    else:
        issues = validate_schema_dir(path)

    for issue in issues:
        click.echo(click.style(str(issue), fg="red"))

    if issues:
        click.echo(
            click.style(f"\n{len(issues)} schema error(s) found", fg="red", bold=True)
        )
        raise SystemExit(1)

    # ── Resolution ──────────────────────────────────────────────────────────
    loader = _load(path)

    models = loader.list_models()
    click.echo(f"Loaded {len(models)} model(s):")
    for name in sorted(models):
        model = loader.get_model(name)
        field_count = len(model.schema) if model else 0
        click.echo(f"  ✓ {name} ({field_count} fields)")

    click.echo(click.style("\nAll schemas are valid.", fg="green", bold=True))


@schema.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--model", "model_name", default=None, help="Show a single model.")
def show(path: Path, model_name: str | None):
    """Print the resolved field descriptors declared in PATH."""
    loader = _load(path)

    names = sorted(loader.list_models())
    if model_name is not None:
        if model_name not in names:
            click.echo(f"Error: model '{model_name}' not found", err=True)
            raise SystemExit(1)
        names = [model_name]

    for name in names:
        model = loader.get_model(name)
        click.echo(click.style(name, bold=True))
        for key, field in model.schema.items():
            details = field.to_dict()
            type_name = details.pop("type") or "any"
            flags = ", ".join(f"{k}={v!r}" for k, v in details.items() if k != "required")
            marker = "*" if field.required else " "
            click.echo(f"  {marker} {key}: {type_name}" + (f" ({flags})" if flags else ""))
