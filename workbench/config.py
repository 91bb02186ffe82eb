"""Playground configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field

from playground.schemas import DEFAULT_CODE, BaseSchema


class PlaygroundConfig(BaseSchema):
    """Runtime settings for transpiling and sandboxed execution."""

    # Node.js binary used for both transpiling and running
    node_binary: str = "node"

    # Extra module search path so the transpiler can find `typescript`
    node_path: str | None = None

    execution_timeout_s: float = Field(default=5.0, gt=0)
    transpile_timeout_s: float = Field(default=15.0, gt=0)
    memory_limit_mb: int = Field(default=128, ge=16)

    # TypeScript compiler options (ts.ScriptTarget / ts.ModuleKind member names)
    ts_target: str = "ES2020"
    ts_module: str = "ESNext"

    default_code: str = DEFAULT_CODE

    allowed_globals: list[str] | None = None


def load_config(yaml_path: str | Path) -> PlaygroundConfig:
    """Load playground configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        PlaygroundConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or has bad field values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data:
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {yaml_path}")

    try:
        return PlaygroundConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: PlaygroundConfig, yaml_path: str | Path) -> None:
    """Save playground configuration to YAML file."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.to_dict()

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
