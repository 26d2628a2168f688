"""schemaforge CLI entry point."""

import importlib
import logging

import click

from schemaforge.config import ModelConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: SCHEMAFORGE_LOG_LEVEL or WARNING).",
)
@click.option(
    "--accessors",
    "accessor_modules",
    multiple=True,
    metavar="MODULE",
    help="Import MODULE to register named getters/setters. Repeatable.",
)
def cli(log_level, accessor_modules):
    """schemaforge — schema-driven model validation CLI."""
    level = (log_level or ModelConfig.from_env().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    for module in accessor_modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise click.BadParameter(str(e), param_hint="--accessors") from e


# Register subcommand groups
from schemaforge.cli.record_cmd import record  # noqa: E402
from schemaforge.cli.schema_cmd import schema  # noqa: E402

cli.add_command(schema)
cli.add_command(record)
