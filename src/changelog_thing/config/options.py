"""
Effective report options.

Options are resolved in three layers: command line values override the
configuration file, which overrides the built-in defaults of
:class:`ReportOptions`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from changelog_thing.grouping.type_grouper import DEFAULT_TYPES

from .loader import PATH_KEYS, ConfigError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


FORMAT_MARKDOWN = "md"
FORMAT_JSON = "json"
FORMAT_HTML = "html"

IO_FORMATS: Dict[str, List[str]] = {
    FORMAT_MARKDOWN: ["md", "markdown"],
    FORMAT_JSON: ["json"],
    FORMAT_HTML: ["html"],
}


def find_io_format(name: str) -> str:
    """Return the canonical name of an input/output format.

    Raises
    ------
    ConfigError
        If ``name`` is not a known format.
    """
    for canonical, aliases in IO_FORMATS.items():
        if name.lower() in aliases:
            return canonical
    raise ConfigError(f"{name} is an invalid IO format")


@dataclass
class ReportOptions:
    """All options controlling a report run."""

    dirs: List[str] = field(default_factory=lambda: ["."])
    age: int = 14
    doc_title: str = "Organization Name"
    remote: str = "origin"
    output: str = "out.md"
    outform: str = FORMAT_MARKDOWN
    inform: Optional[str] = None
    input: Optional[str] = None
    beautify: bool = True
    summaries: bool = False
    ignore_errors: bool = False
    compact_commits: bool = True
    write_html: bool = False
    write_json: bool = False
    filter_patterns: List[str] = field(default_factory=list)
    commit_hash_length: int = 7
    types: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TYPES))
    html_command: Optional[str] = None

    def to_config(self) -> Dict[str, Any]:
        """Return the options that may be stored in a configuration file."""
        return {k: v for k, v in asdict(self).items() if k not in PATH_KEYS}


def merge_options(
    file_values: Optional[Mapping[str, Any]] = None,
    cli_values: Optional[Mapping[str, Any]] = None,
    base: Optional[ReportOptions] = None,
) -> ReportOptions:
    """Overlay configuration file and command line values onto defaults.

    ``None`` values in either layer are treated as "not given". Format
    names are normalized with :func:`find_io_format`.
    """
    known = {f.name for f in fields(ReportOptions)}
    overrides: Dict[str, Any] = {}
    for layer in (file_values or {}, cli_values or {}):
        for key, value in layer.items():
            if value is None:
                continue
            if key not in known:
                raise ConfigError(f"Unknown option: {key}")
            overrides[key] = value

    options = replace(base or ReportOptions(), **overrides)
    options.outform = find_io_format(options.outform)
    if options.inform is not None:
        options.inform = find_io_format(options.inform)
    return options


def write_default_config(options: ReportOptions, config_path: Union[str, Path]) -> Path:
    """Write ``options`` as a JSON configuration file and return its path."""
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(options.to_config(), indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote configuration to %s", path)
    return path
