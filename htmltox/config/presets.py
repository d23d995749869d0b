"""
YAML setting presets.

A preset is a YAML mapping of converter settings. Nested mappings are
flattened into the dot-namespaced names the native library uses:

    margin:
      top: 10mm
    web:
      enableJavascript: false

becomes ``{"margin.top": "10mm", "web.enableJavascript": "false"}``.
"""
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from htmltox.core.exceptions import ValidationError
from htmltox.core.models.options import setting_value


def flatten_settings(data: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested mappings into dotted setting names with string values."""
    flat: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten_settings(value, name))
        elif value is None:
            flat[name] = ""
        else:
            flat[name] = setting_value(value)
    return flat


def load_preset(path: Union[str, Path]) -> Dict[str, str]:
    """Load a settings preset from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Flattened settings dictionary

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the document is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Preset file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValidationError(f"Preset must be a mapping at the top level: {path}")
    return flatten_settings(data)
