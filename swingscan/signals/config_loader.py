"""
YAML configuration loader for swing presets.

Loads a preset name plus partial overrides from a YAML file, allowing easy
sharing of tuned thresholds without code changes:

    preset: balanced
    overrides:
      rsi_min: 50
      entry_mode: any
"""
import yaml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import SwingConfig, DEFAULT_PRESET, normalize_overrides, resolve_config
from ..shared.errors import InvalidInput


ALLOWED_KEYS = {"preset", "overrides", "description"}


def load_preset_file(yaml_path: Union[str, Path]) -> Tuple[Optional[str], Dict[str, Any]]:
    """
    Read the preset name and normalized overrides from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        (preset or None when the file names none, overrides)

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        InvalidInput: If YAML is empty, malformed, or contains invalid values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidInput(f"Invalid YAML in {yaml_path}: {e}") from e

    if not config_dict:
        raise InvalidInput(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise InvalidInput(f"Config file must contain a mapping: {yaml_path}")

    unknown = set(config_dict) - ALLOWED_KEYS
    if unknown:
        raise InvalidInput(f"Unknown top-level keys in {yaml_path}: {sorted(unknown)}")

    file_overrides = config_dict.get('overrides') or {}
    if not isinstance(file_overrides, dict):
        raise InvalidInput(f"'overrides' must be a mapping in {yaml_path}")

    return config_dict.get('preset'), normalize_overrides(file_overrides)


def load_config_from_yaml(
    yaml_path: Union[str, Path],
    overrides: Optional[Mapping[str, Any]] = None,
) -> SwingConfig:
    """
    Load swing configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file
        overrides: Caller overrides applied after the file's own overrides

    Returns:
        Resolved SwingConfig

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        InvalidInput: If YAML is empty, malformed, or contains invalid values
    """
    preset, merged = load_preset_file(yaml_path)
    merged.update(normalize_overrides(overrides))
    return resolve_config(preset or DEFAULT_PRESET, merged)
