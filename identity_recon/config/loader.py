from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_MAX_CANDIDATE_RECORDS,
    DEFAULT_MAX_SOURCE_RECORDS,
    DEFAULT_SIMILARITY_THRESHOLD,
    AbsencePolicy,
    MatchConfig,
    ReconConfig,
)

"""Config loader.

Responsibilities:
- Load YAML (default: config/recon.yml)
- Validate against the bundled JSON schema (unknown keys rejected)
- Apply defaults for every omitted key
- Apply environment overrides (RECON_DEFAULT_SOURCE)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/recon.yml")
DEFAULT_SOURCE_ENV = "RECON_DEFAULT_SOURCE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If any of the following occurs:
            - The schema file does not exist or is not valid JSON.
            - The config data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_dict(data: dict[str, Any]) -> ReconConfig:
    """Build a ReconConfig from already-validated raw data."""
    match = MatchConfig(
        similarity_threshold=data.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD),
        absence_policy=AbsencePolicy(data.get("absence_policy", AbsencePolicy.LENIENT.value)),
    )
    default_source = os.getenv(DEFAULT_SOURCE_ENV) or data.get("default_source")
    return ReconConfig(
        match=match,
        max_source_records=data.get("max_source_records", DEFAULT_MAX_SOURCE_RECORDS),
        max_candidate_records=data.get("max_candidate_records", DEFAULT_MAX_CANDIDATE_RECORDS),
        reject_duplicate_candidates=data.get("reject_duplicate_candidates", False),
        workers=data.get("workers", 1),
        cache_ttl_seconds=float(data.get("cache_ttl_seconds", DEFAULT_CACHE_TTL_SECONDS)),
        default_source=default_source,
        output_directory=data.get("output_directory", "./output"),
    )


def load_config(path: Path | None = None) -> ReconConfig:
    """Load configuration from `path`.

    With no path, config/recon.yml is used when present and built-in defaults
    otherwise. An explicitly given path must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return config_from_dict({})
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping in {path}")

    _validate_config_schema(data)
    return config_from_dict(data)
