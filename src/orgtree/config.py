"""Configuration loading and validation."""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

DEFAULT_CONFIG_PATH = "~/.orgtree/config.yaml"


class RepairConfig(BaseModel):
    preview_chars: int = Field(default=200, ge=0)  # RepairFailure preview length
    strip_fences: bool = True  # Remove ```json markers before repair


class TreeConfig(BaseModel):
    placeholder_name: str = "Unnamed Node"
    id_prefix: str = "node_"
    root_name: str = "Root"  # Wraps a multi-root array
    parse_error_name: str = "Error parsing response"
    invalid_shape_name: str = "Invalid tree structure"


class LoggingConfig(BaseModel):
    level: str = "WARNING"


class OrgTreeConfig(BaseModel):
    repair: RepairConfig = Field(default_factory=RepairConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        return os.environ.get(var_name, "")

    return re.sub(r"\$\{(\w+)\}", replacer, text)


def _config_from_env() -> OrgTreeConfig:
    """Build config from environment variables, falling back to defaults."""
    config = OrgTreeConfig()
    try:
        if "ORGTREE_PREVIEW_CHARS" in os.environ:
            config.repair.preview_chars = int(os.environ["ORGTREE_PREVIEW_CHARS"])
    except ValueError as e:
        raise ConfigError(f"Invalid ORGTREE_PREVIEW_CHARS: {e}") from e
    if "ORGTREE_PLACEHOLDER_NAME" in os.environ:
        config.tree.placeholder_name = os.environ["ORGTREE_PLACEHOLDER_NAME"]
    if "ORGTREE_LOG_LEVEL" in os.environ:
        config.logging.level = os.environ["ORGTREE_LOG_LEVEL"].upper()
    return config


def load_config(path: str | Path | None = None) -> OrgTreeConfig:
    """Load config from YAML file, env vars, or defaults.

    Priority: config.yaml (with ${ENV} interpolation) > env vars > defaults.
    """
    if path is None:
        path = Path(DEFAULT_CONFIG_PATH).expanduser()
    else:
        path = Path(path).expanduser()

    if not path.exists():
        return _config_from_env()

    interpolated = _interpolate_env_vars(path.read_text())
    try:
        data = yaml.safe_load(interpolated)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return OrgTreeConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {path}: expected a mapping")
    try:
        return OrgTreeConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e


def save_config(config: OrgTreeConfig, path: str | Path | None = None) -> Path:
    """Save config to YAML file."""
    if path is None:
        path = Path(DEFAULT_CONFIG_PATH).expanduser()
    else:
        path = Path(path).expanduser()

    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump()
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))
    return path
