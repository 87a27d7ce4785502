"""
Configuration loader for changelog_thing.

Report options can be stored in a JSON configuration file. By default
the file is ``changelog-thing.config.json`` in the ``~/.config/``
directory; another file can be given with ``--config``. This loader
validates the structure of the file and returns a dictionary of option
values keyed by :class:`~changelog_thing.config.options.ReportOptions`
field name.

If the configuration file is malformed, contains unknown keys or
values of the wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where logging has not been configured. When the CLI configures
# logging, messages propagate to the root logger.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_CONFIG_NAME = "changelog-thing.config.json"

# Options that are always supplied per invocation and never read from a file.
PATH_KEYS = frozenset({"dirs", "output", "input", "config"})

# Accepted keys and their JSON types. ``None`` marks a nullable value.
_SCHEMA: Dict[str, Tuple[Any, ...]] = {
    "age": (int,),
    "doc_title": (str,),
    "remote": (str,),
    "outform": (str,),
    "inform": (str, type(None)),
    "beautify": (bool,),
    "summaries": (bool,),
    "ignore_errors": (bool,),
    "compact_commits": (bool,),
    "write_html": (bool,),
    "write_json": (bool,),
    "filter_patterns": (list,),
    "commit_hash_length": (int,),
    "types": (dict,),
    "html_command": (str, type(None)),
}

# Keys as written by earlier releases of the tool.
_LEGACY_KEYS = {
    "docTitle": "doc_title",
    "ignoreErrors": "ignore_errors",
    "compactCommits": "compact_commits",
    "writeHtml": "write_html",
    "writeJson": "write_json",
    "filterPatterns": "filter_patterns",
    "commitHashLength": "commit_hash_length",
}


class ConfigError(Exception):
    """Raised when the configuration file or an option value is invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the default configuration file."""
    return Path.home() / ".config"


def default_config_path() -> Path:
    return _get_config_directory() / DEFAULT_CONFIG_NAME


def _check_type(key: str, value: Any) -> None:
    expected = _SCHEMA[key]
    # bool is a subclass of int; reject it for numeric options
    if isinstance(value, bool) and bool not in expected:
        raise ConfigError(f"'{key}' must be of type {expected[0].__name__}")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' must be of type {expected[0].__name__}")
    if key == "filter_patterns" and not all(isinstance(p, str) for p in value):
        raise ConfigError("'filter_patterns' must be a list of strings")
    if key == "types" and not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise ConfigError("'types' must map type keys to label strings")
    if key in ("age", "commit_hash_length") and value < 1:
        raise ConfigError(f"'{key}' must be a positive integer")


def validate_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate raw configuration data and return normalized option values.

    Legacy camelCase keys are renamed, path-like keys are dropped and
    every remaining value is type checked.
    """
    values: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = _LEGACY_KEYS.get(raw_key, raw_key)
        if key in PATH_KEYS:
            logger.warning("Ignoring path option '%s' in configuration file", raw_key)
            continue
        if key not in _SCHEMA:
            raise ConfigError(f"Unknown configuration key: {raw_key}")
        _check_type(key, value)
        values[key] = value
    return values


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load report options from a JSON configuration file.

    Args:
        config_path: Path of the configuration file. If None, the default
                     file in ``~/.config/`` is used when it exists.

    Returns:
        A dictionary of validated option values. Empty if no path was
        given and the default file does not exist.

    Raises:
        ConfigError: If the given file is missing, or any file read is
                     malformed or invalid.
    """
    if config_path is None:
        path = default_config_path()
        if not path.exists():
            logger.debug("No configuration file at %s; using defaults", path)
            return {}
    else:
        path = Path(config_path)
        if not path.exists():
            logger.error("Configuration file '%s' does not exist", path)
            raise ConfigError(f"Missing configuration file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path.name} must be a JSON object")

    values = validate_config(data)
    logger.debug("Loaded configuration from: %s", path)
    logger.debug("Configuration data: %s", values)
    return values
