"""Configuration module for the Spectral Rejection Framework."""

from pathlib import Path
import yaml
from typing import Any, Dict, Union

CONFIG_DIR = Path(__file__).parent


def load_config(config_name: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    config_name : str or Path
        Name of a configuration file in the config directory (without
        .yaml extension), or a path to any YAML file

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary
    """
    config_path = Path(config_name)
    if config_path.suffix not in {".yaml", ".yml"}:
        config_path = CONFIG_DIR / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_rejection_params() -> Dict[str, Any]:
    """Load the default spectral rejection parameters."""
    return load_config("rejection_params")


__all__ = [
    "load_config",
    "load_rejection_params",
    "CONFIG_DIR",
]
