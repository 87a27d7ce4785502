"""
Grouping logic for parsed commits.

This package provides the report data models and the function that
buckets commits into type sections. See
:mod:`changelog_thing.grouping.group_model` and
:mod:`changelog_thing.grouping.type_grouper` for details.
"""

from .group_model import CommitRecord, CommitType, RepoReport, ReportBundle  # noqa: F401
from .type_grouper import DEFAULT_TYPES, group_commits  # noqa: F401
