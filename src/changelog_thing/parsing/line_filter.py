"""
Exclusion filtering of raw log lines.

Users pass plain-text regular expressions; any raw line matched by one
of them is removed before parsing.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence


class InvalidFilterPattern(Exception):
    """Raised when a user supplied filter pattern is not a valid regex."""

    pass


def compile_patterns(patterns: Iterable[str]) -> List[Pattern[str]]:
    """Compile filter patterns, reporting the first invalid one."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise InvalidFilterPattern(f"Invalid filter pattern '{pattern}': {exc}") from exc
    return compiled


def keep_line(line: str, regexes: Sequence[Pattern[str]]) -> bool:
    """Return True if ``line`` matches none of ``regexes``."""
    for regex in regexes:
        if regex.search(line):
            return False
    return True


def filter_lines(lines: Iterable[str], regexes: Sequence[Pattern[str]]) -> List[str]:
    """Drop empty lines and lines matched by any of ``regexes``."""
    return [line for line in lines if line.strip() and keep_line(line, regexes)]
