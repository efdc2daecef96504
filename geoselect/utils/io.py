import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

CONFIG_PATH = Path("config") / "default.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "crs": None,
    "provider": "shapely",
    "regions": {"id_columns": ["id"], "name_column": None},
    "points": {"x_column": "x", "y_column": "y", "label_column": None, "crs": None},
}


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Loads the YAML configuration file and fills in defaults.

    With no path, config/default.yaml is used if it exists, otherwise the defaults.
    """
    if config_path is None:
        if not CONFIG_PATH.exists():
            return _merge(DEFAULT_CONFIG, {})
        config_path = CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at: {config_path}")
    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping.")

    config = _merge(DEFAULT_CONFIG, config)
    id_columns = config["regions"]["id_columns"]
    if isinstance(id_columns, str):
        config["regions"]["id_columns"] = [id_columns]
    return config


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
