"""Load model schema declarations from YAML files.

Layout of a schema directory:

    schemas/
      blocks/address.yaml     reusable field groups
      models/contact.yaml     one model per file

A directory without a ``models/`` subdirectory is read as a flat set of
model files. Model files look like:

    model: Contact
    includes:
      - block: address
        prefix: billing
    fields:
      firstName: String
      tags: [String]
      age: {type: Number, min: 0}
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from schemaforge.config import ModelConfig
from schemaforge.exceptions import SchemaDefinitionError
from schemaforge.model import Model, make_model


@dataclass
class ModelDefinition:
    """A model declaration read from YAML, with blocks expanded."""

    name: str
    fields: dict[str, Any] = field(default_factory=dict)
    description: str = ""
    source: Path | None = None


class SchemaLoader:
    """Loads model and block declarations from YAML files."""

    def __init__(self, schema_path: Path, config: ModelConfig | None = None):
        self.schema_path = schema_path
        self.config = config
        self.definitions: dict[str, ModelDefinition] = {}
        self.blocks: dict[str, dict[str, Any]] = {}
        self.models: dict[str, type[Model]] = {}

    def load_all(self) -> None:
        """Load all blocks and models, resolving every model schema."""
        self._load_blocks()
        if self.schema_path.is_file():
            self._load_model_file(self.schema_path)
        else:
            self._load_models()

    def _model_files(self) -> list[Path]:
        models_path = self.schema_path / "models"
        if models_path.is_dir():
            return sorted(models_path.glob("*.yaml"))
        return sorted(self.schema_path.glob("*.yaml"))

    def _blocks_path(self) -> Path:
        """Blocks live beside models/, or beside a single model file."""
        if self.schema_path.is_dir():
            return self.schema_path / "blocks"
        parent = self.schema_path.parent
        if parent.name == "models":
            return parent.parent / "blocks"
        return parent / "blocks"

    def _load_blocks(self) -> None:
        """Load reusable block definitions."""
        blocks_path = self._blocks_path()
        if not blocks_path.is_dir():
            return

        for yaml_file in sorted(blocks_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not isinstance(data, dict) or not isinstance(data.get("block"), str):
                continue
            self.blocks[data["block"]] = self._fields_of(
                data, f"Block '{data['block']}'", yaml_file
            )

    def _load_models(self) -> None:
        for yaml_file in self._model_files():
            self._load_model_file(yaml_file)

    def _load_model_file(self, yaml_file: Path) -> None:
        with open(yaml_file) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict) or "model" not in data:
            return

        definition = self._resolve_definition(data, yaml_file)
        definition.source = yaml_file
        if definition.name in self.definitions:
            raise SchemaDefinitionError(
                f"Duplicate model '{definition.name}' in {yaml_file} "
                f"(already defined in {self.definitions[definition.name].source})"
            )

        self.definitions[definition.name] = definition
        self.models[definition.name] = make_model(
            definition.name, definition.fields, config=self.config
        )

    def _fields_of(self, data: dict, owner: str, yaml_file: Path) -> dict[str, Any]:
        fields = data.get("fields") or {}
        if not isinstance(fields, dict):
            raise SchemaDefinitionError(
                f"{owner} in {yaml_file}: 'fields' must be a mapping, "
                f"got {type(fields).__name__}"
            )
        for key in fields:
            if not isinstance(key, str):
                raise SchemaDefinitionError(
                    f"{owner} has a non-string field key {key!r}; "
                    "quote keys such as 'on' or 'yes' in YAML"
                )
        return fields

    def _resolve_definition(self, data: dict, yaml_file: Path) -> ModelDefinition:
        """Resolve a model declaration, expanding blocks."""
        name = data["model"]
        if not isinstance(name, str):
            raise SchemaDefinitionError(f"Model name in {yaml_file} must be a string, got {name!r}")
        fields: dict[str, Any] = {}

        includes = data.get("includes") or []
        if not isinstance(includes, list):
            raise SchemaDefinitionError(f"Model '{name}': 'includes' must be a list")

        # Expand included blocks first so the model's own fields override them
        for include in includes:
            if (
                not isinstance(include, dict)
                or not isinstance(include.get("block"), str)
                or not isinstance(include.get("prefix", ""), str)
            ):
                raise SchemaDefinitionError(
                    f"Model '{name}' has a malformed include {include!r}; "
                    "expected {block: <name>, prefix: <optional>}"
                )
            block_name = include["block"]
            prefix = include.get("prefix") or ""
            if block_name not in self.blocks:
                raise SchemaDefinitionError(
                    f"Model '{name}' includes unknown block '{block_name}'"
                )
            for key, declaration in self.blocks[block_name].items():
                fields[self._prefixed(prefix, key)] = declaration

        fields.update(self._fields_of(data, f"Model '{name}'", yaml_file))

        return ModelDefinition(
            name=name,
            fields=fields,
            description=data.get("description", ""),
        )

    def _prefixed(self, prefix: str, key: str) -> str:
        """Prefix a block field key in camelCase (billing + city -> billingCity)."""
        if not prefix:
            return key
        return prefix + key[:1].upper() + key[1:]

    def get_model(self, name: str) -> type[Model] | None:
        """Get a resolved model class by name."""
        return self.models.get(name)

    def list_models(self) -> list[str]:
        """List all model names."""
        return list(self.models.keys())
