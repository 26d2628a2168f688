"""Model configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

SERIALIZE_MODES = ("overlay", "schema")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got '{raw}'")


@dataclass(frozen=True)
class ModelConfig:
    """Behaviour switches for model classes.

    Attributes:
        legacy_array_markers: Treat ``[A, B]`` type markers as plain Array
            instead of rejecting them
        serialize_mode: "overlay" (raw snapshot plus schema keys) or
            "schema" (schema keys only)
        include_cid: Add the instance ``cid`` to serialized output
        log_level: Level name used by the CLI logging setup
    """

    legacy_array_markers: bool = False
    serialize_mode: str = "overlay"
    include_cid: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.serialize_mode not in SERIALIZE_MODES:
            raise ValueError(
                f"Unsupported serialize mode '{self.serialize_mode}'. "
                f"Expected one of: {', '.join(SERIALIZE_MODES)}"
            )

    @classmethod
    def from_env(cls) -> ModelConfig:
        """Create config from environment variables.

        Reads SCHEMAFORGE_LEGACY_ARRAY_MARKERS, SCHEMAFORGE_SERIALIZE_MODE,
        SCHEMAFORGE_INCLUDE_CID and SCHEMAFORGE_LOG_LEVEL; unset variables
        keep their defaults.
        """
        return cls(
            legacy_array_markers=_env_flag("SCHEMAFORGE_LEGACY_ARRAY_MARKERS", False),
            serialize_mode=os.environ.get("SCHEMAFORGE_SERIALIZE_MODE", "overlay").strip().lower(),
            include_cid=_env_flag("SCHEMAFORGE_INCLUDE_CID", True),
            log_level=os.environ.get("SCHEMAFORGE_LOG_LEVEL", "WARNING").strip().upper(),
        )
