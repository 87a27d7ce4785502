"""
Helpers for turning Git remote URLs into browsable links.

Remotes configured over SSH (``git@github.com:org/repo.git`` or
``ssh://git@host:2222/org/repo.git``) are rewritten to the equivalent
``https://`` URL so the report can link to the project and to
individual commits.
"""

from __future__ import annotations

import re

from changelog_thing.text import capitalize_words

_SSH_REMOTE = re.compile(r"(ssh://)?[^@]*@([^:]*)(:[0-9]*/|:)(.*)$")
_LAST_SEGMENT = re.compile(r".*/([^.]*).*$")
_GIT_SUFFIX = re.compile(r"\.git$")


def normalize_remote_url(url: str) -> str:
    """Return an ``https://host/path`` form of an SSH remote URL.

    URLs that carry no ``user@host:`` part are returned unchanged.
    """
    return _SSH_REMOTE.sub(r"https://\2/\4", url.strip(), count=1)


def repo_display_name(url: str) -> str:
    """Derive a project name from the last path segment of ``url``.

    >>> repo_display_name("https://github.com/acme/my-service.git")
    'My-Service'
    """
    name = _LAST_SEGMENT.sub(r"\1", url.rstrip("/"), count=1)
    return capitalize_words(name)


def commit_link(url: str, sha: str) -> str:
    """Return the web URL of commit ``sha`` in the repository at ``url``."""
    return f"{_GIT_SUFFIX.sub('', url)}/commit/{sha}"
