"""
Configuration Serialization & Persistence Utilities.

JSON output for the run snapshot (``config.json``) and YAML input for
human-written recipes. Writes go through a flush + fsync so that a config
snapshot is physically on disk before training starts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..paths.constants import LOGGER_NAME


def write_json_atomic(data: Any, json_path: Path) -> Path:
    """
    Serialize ``data`` to indented JSON and force it to disk.

    Args:
        data: JSON-compatible structure (dicts, lists, scalars, strings).
        json_path: Destination path; parent directories are created.

    Returns:
        Path: The path that was written.

    Raises:
        OSError: If a filesystem-level error occurs (permissions, disk full).
    """
    logger = logging.getLogger(LOGGER_NAME)

    json_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = json_path.with_name(f".{json_path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, json_path)
    except OSError as e:
        logger.error(f"IO Error: Could not write JSON to {json_path}. Error: {e}")
        tmp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"JSON document written → {json_path.name}")
    return json_path


def load_recipe(yaml_path: Path) -> dict[str, Any]:
    """
    Load a raw configuration mapping from a YAML recipe.

    Raises:
        FileNotFoundError: If the recipe does not exist.
        ValueError: If the file is not valid YAML or its top level is not a mapping.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML recipe not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Recipe top level must be a mapping, got {type(data).__name__}")
    return data


def dump_recipe(data: dict[str, Any], yaml_path: Path, header: str = "") -> Path:
    """Write a YAML recipe, optionally prefixed with a comment header."""
    body = yaml.dump(data, default_flow_style=False, sort_keys=False, indent=4, allow_unicode=True)
    yaml_path.write_text(header + body, encoding="utf-8")
    return yaml_path
