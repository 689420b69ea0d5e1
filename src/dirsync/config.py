"""Digest settings loaded from the project YAML configuration."""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CHUNK_SIZE",
    "DigestSettings",
    "SettingsError",
    "load_settings",
]

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DIRSYNC_CONFIG"
DEFAULT_CHUNK_SIZE = 64 * 1024


class SettingsError(RuntimeError):
    """Raised when the configuration file cannot be parsed or validated."""


class DigestSettings(BaseModel):
    """How file content digests are computed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    algorithm: str = "sha1"
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        name = value.strip().lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(f"unsupported digest algorithm: {value!r}")
        if hashlib.new(name).digest_size == 0:
            raise ValueError(f"digest algorithm {value!r} has no fixed length")
        return name


def load_settings(
    config_path: Path | str | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> DigestSettings:
    """Load :class:`DigestSettings` from the ``digest`` section of a YAML file.

    Falls back to ``$DIRSYNC_CONFIG`` when no path is given and to the
    defaults when neither points at an existing file.
    """
    env_mapping = env if env is not None else os.environ
    if config_path is None:
        configured = (env_mapping.get(CONFIG_ENV_VAR) or "").strip()
        if not configured:
            return DigestSettings()
        config_path = configured

    candidate = Path(config_path)
    try:
        with candidate.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        LOGGER.debug("Config file %s not found; using default digest settings", candidate)
        return DigestSettings()
    except yaml.YAMLError as error:
        raise SettingsError(f"Failed to parse config {candidate}: {error}") from error

    if not isinstance(data, Mapping):
        raise SettingsError(f"Configuration must be a mapping at the top level: {candidate}")

    section: Any = data.get("digest")
    if section is None:
        section = {}
    if not isinstance(section, Mapping):
        raise SettingsError(f"'digest' section must be a mapping: {candidate}")

    try:
        return DigestSettings.model_validate(dict(section))
    except ValidationError as error:
        raise SettingsError(f"Invalid digest settings in {candidate}: {error}") from error
