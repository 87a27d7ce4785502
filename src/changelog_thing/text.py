"""Small string helpers shared by the URL helpers and renderers."""

from __future__ import annotations

import re
from typing import Optional

_WORD_START = re.compile(r"(^\w)|([\s\-_]\w)")


def capitalize_words(text: Optional[str]) -> str:
    """Uppercase the first letter of every word.

    Words are delimited by whitespace, ``-`` and ``_``; the delimiters
    themselves are kept. ``None`` and the empty string give ``""``.

    >>> capitalize_words("my-repo_name is here")
    'My-Repo_Name Is Here'
    """
    if not text:
        return ""
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)
