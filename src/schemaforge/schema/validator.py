"""
schema/validator.py: JSON Schema validation for schemaforge YAML declarations.

Validates model and block YAML files against the JSON Schemas shipped in
``schemas/``. This checks the document shape only; whether the declared
types and accessors resolve is checked by SchemaLoader.

Usage:
    from schemaforge.schema.validator import validate_schema_dir, validate_yaml_file

    issues = validate_schema_dir(Path("schemas"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"

MODEL_SCHEMA = "model.schema.json"
BLOCK_SCHEMA = "block.schema.json"


@dataclass
class ValidationIssue:
    """A single validation finding for a declaration YAML file."""

    file: Path
    message: str
    path: str = ""          # path within the document, e.g. "fields/age/min"
    severity: str = "error"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema(name: str) -> dict[str, Any]:
    schema_path = _SCHEMAS_DIR / name
    with schema_path.open() as fh:
        return json.load(fh)


def _load_registry() -> Registry:
    """Build a jsonschema Registry containing all declaration schemas."""
    resources = []
    for name in ("_defs.schema.json", MODEL_SCHEMA, BLOCK_SCHEMA):
        schema = _load_schema(name)
        resources.append(
            (schema["$id"], Resource(contents=schema, specification=DRAFT202012))
        )
    return Registry().with_resources(resources)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def schema_for(yaml_path: Path) -> str:
    """Pick the schema for a file: blocks/ holds blocks, anything else is a model."""
    return BLOCK_SCHEMA if yaml_path.parent.name == "blocks" else MODEL_SCHEMA


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_yaml_file(
    yaml_path: Path,
    schema_name: str | None = None,
    *,
    registry: Registry | None = None,
) -> list[ValidationIssue]:
    """
    Validate a single YAML file against the named schema.

    Args:
        yaml_path:   Path to the YAML file to validate.
        schema_name: Schema filename; inferred from the file location if omitted.
        registry:    Pre-built schema registry.  Built automatically if omitted.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    if registry is None:
        registry = _load_registry()

    schema = _load_schema(schema_name or schema_for(yaml_path))
    validator = Draft202012Validator(schema, registry=registry)

    issues = [
        ValidationIssue(file=yaml_path, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(raw), key=lambda e: list(map(str, e.path)))
    ]
    logger.debug("Validated %s: %d issue(s)", yaml_path, len(issues))
    return issues


def validate_schema_dir(schema_dir: Path) -> list[ValidationIssue]:
    """
    Validate all declaration YAML files under *schema_dir*.

    Walks ``blocks/`` and ``models/`` (or the directory itself when it has
    no ``models/`` subdirectory).

    Returns:
        A flat list of :class:`ValidationIssue` objects across all files.
        Empty list means all files are valid.
    """
    if not schema_dir.is_dir():
        return [
            ValidationIssue(
                file=schema_dir,
                message=f"Schema directory does not exist: {schema_dir}",
            )
        ]

    try:
        registry = _load_registry()
    except (FileNotFoundError, json.JSONDecodeError) as exc:
        return [
            ValidationIssue(
                file=_SCHEMAS_DIR,
                message=f"Failed to load JSON Schema files: {exc}",
            )
        ]

    files = sorted((schema_dir / "blocks").glob("*.yaml"))
    models_dir = schema_dir / "models"
    files += sorted((models_dir if models_dir.is_dir() else schema_dir).glob("*.yaml"))

    all_issues: list[ValidationIssue] = []
    for yaml_file in files:
        all_issues.extend(validate_yaml_file(yaml_file, registry=registry))
    return all_issues
