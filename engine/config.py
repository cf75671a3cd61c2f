"""Lightweight loader for mapdiff configuration."""
from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict

_DEFAULT_PATH = Path(__file__).resolve().parent.parent / "config" / "mapdiff.json"
_CONFIG_DATA: Dict[str, Any] = {}
_LOADED = False


def _config_path() -> Path:
    override = os.environ.get("MAPDIFF_CONFIG")
    return Path(override) if override else _DEFAULT_PATH


def _load() -> Dict[str, Any]:
    path = _config_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        print(f"[config] ignoring {path}: {exc}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"[config] ignoring {path}: top level is not an object", file=sys.stderr)
        return {}
    return data


def _ensure_loaded() -> None:
    global _CONFIG_DATA, _LOADED
    if not _LOADED:
        _CONFIG_DATA = _load()
        _LOADED = True


def reload() -> None:
    """Drop cached values so the next lookup reads the file again."""
    global _LOADED
    _LOADED = False


def get(path: str, default: Any = None) -> Any:
    """Return a config value using dotted paths, or default when missing."""
    _ensure_loaded()
    if not path:
        return _CONFIG_DATA

    current: Any = _CONFIG_DATA
    for segment in path.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current
