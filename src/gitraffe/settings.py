"""Settings file I/O and resolved runtime configuration for gitraffe.

Manages a JSON settings file at XDG_CONFIG_HOME/gitraffe/settings.json.
Precedence, lowest to highest: built-in defaults, settings file,
GITRAFFE_* environment variables, command-line flags.

This module is a STABLE BOUNDARY.
Import as: import gitraffe.settings
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMMITS = 5000
DEFAULT_DIFF_LINE_CAP = 300


@dataclass(frozen=True)
class Config:
    """Resolved configuration. Immutable once built."""

    repo_path: str = "."
    max_commits: int = DEFAULT_MAX_COMMITS
    diff_line_cap: int = DEFAULT_DIFF_LINE_CAP
    all_refs: bool = True
    git_binary: str = "git"


# Setting key → environment variable
_ENV_KEYS = {
    "max_commits": "GITRAFFE_MAX_COMMITS",
    "diff_line_cap": "GITRAFFE_DIFF_LINE_CAP",
    "all_refs": "GITRAFFE_ALL_REFS",
    "git_binary": "GITRAFFE_GIT",
}


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / gitraffe / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "gitraffe" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _coerce(name: str, raw, default):
    """Convert a raw settings/env value to the type of `default`."""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("ignoring non-integer %s=%r", name, raw)
            return default
        if value <= 0:
            logger.warning("ignoring non-positive %s=%r", name, raw)
            return default
        return value
    return str(raw)


def load_config(repo_path: str = ".", **overrides) -> Config:
    """Build a Config from defaults, settings file, environment and overrides.

    Overrides whose value is None are ignored, so argparse results can be
    passed straight through.
    """
    base = Config(repo_path=repo_path)
    file_data = load_settings()
    values = {}
    for f in fields(Config):
        if f.name == "repo_path":
            continue
        default = getattr(base, f.name)
        value = default
        if f.name in file_data:
            value = _coerce(f.name, file_data[f.name], default)
        env_name = _ENV_KEYS.get(f.name)
        if env_name and env_name in os.environ:
            value = _coerce(f.name, os.environ[env_name], default)
        if overrides.get(f.name) is not None:
            value = _coerce(f.name, overrides[f.name], default)
        values[f.name] = value
    return replace(base, **values)
