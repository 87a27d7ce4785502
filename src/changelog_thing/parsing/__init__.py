"""
Parsing of ``git log`` output.

See :mod:`changelog_thing.parsing.commit_parser` for turning formatted
log lines into commit records and
:mod:`changelog_thing.parsing.line_filter` for exclusion patterns.
"""

from .commit_parser import LOG_FORMAT, MalformedCommitLine, classify_subject, parse_line, parse_lines  # noqa: F401
from .line_filter import InvalidFilterPattern, compile_patterns, filter_lines  # noqa: F401
