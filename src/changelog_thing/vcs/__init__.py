"""
Version control system (VCS) integration.

This package contains the :class:`GitClient` used to read commit
history from local repositories and helpers that turn remote URLs into
browsable links.
"""

from .git_client import GitClient, GitError  # noqa: F401
from .remote_url import commit_link, normalize_remote_url, repo_display_name  # noqa: F401
