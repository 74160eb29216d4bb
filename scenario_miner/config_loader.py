"""Load miner configuration from a YAML file."""

import asyncio
from pathlib import Path

import yaml
from pydantic import ValidationError

from scenario_miner.config import MinerConfig

CONFIG_FILE_NAME = "scenario-miner.yaml"


async def load_config(config_path: Path) -> MinerConfig:
    """Load and validate a configuration file.

    A relative ``project_root`` is taken relative to the file's directory;
    when omitted, the file's directory is the project root.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Parsed configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, not valid YAML, or fails validation

    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    content = await asyncio.to_thread(config_path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty config file: {config_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config schema in {config_path}: expected a mapping")

    project_root = data.get("project_root") or "."
    if not isinstance(project_root, str):
        raise ValueError(
            f"Invalid config schema in {config_path}: project_root must be a string"
        )
    data["project_root"] = config_path.parent.absolute() / project_root

    try:
        return MinerConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config schema in {config_path}: {e}") from e
