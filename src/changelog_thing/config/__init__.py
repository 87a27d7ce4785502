"""
Configuration handling for changelog_thing.

Provides the JSON configuration file loader and the layered
:class:`ReportOptions`. See :mod:`changelog_thing.config.loader` and
:mod:`changelog_thing.config.options` for implementation details.
"""

from .loader import ConfigError, default_config_path, load_config  # noqa: F401
from .options import ReportOptions, find_io_format, merge_options, write_default_config  # noqa: F401
