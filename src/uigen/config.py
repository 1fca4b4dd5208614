"""YAML config loader — reads uigen.yml into AppConfig."""

import os
from pathlib import Path

import yaml

from uigen.schemas.config import AppConfig

# Environment variables that override file values
_ENV_OVERRIDES = {
    "BACKEND_URL": "backend_url",
    "UIGEN_BACKEND": "backend",
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate a config file, then apply environment overrides.

    ``path=None`` returns the defaults. Raises ``FileNotFoundError`` if the
    path doesn't exist and ``pydantic.ValidationError`` if the YAML content
    is invalid.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        loaded = yaml.safe_load(path.read_text())
        # An empty file loads as None, meaning "all defaults".
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"Config file must be a YAML mapping, got {type(loaded).__name__}")
        raw = loaded or {}

    # YAML loads lists with only commented-out items as None; normalize to empty list.
    if "cors_origins" in raw:
        if raw["cors_origins"] is None:
            raw["cors_origins"] = []
        elif isinstance(raw["cors_origins"], list):
            raw["cors_origins"] = [item for item in raw["cors_origins"] if item]

    for env_name, key in _ENV_OVERRIDES.items():
        if value := os.environ.get(env_name):
            raw[key] = value

    return AppConfig(**raw)
