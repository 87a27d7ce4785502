"""
Parsing of formatted ``git log`` lines into commit records.

Each line is produced by :data:`LOG_FORMAT` and holds five fields
joined by :data:`~changelog_thing.grouping.group_model.FIELD_DELIMITER`:
author, ref decoration, subject, relative age and full hash. The
subject is classified by its Conventional Commit prefix, e.g.
``feat(api): add health check``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from changelog_thing.grouping.group_model import FIELD_DELIMITER, CommitRecord, CommitType


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


LOG_FORMAT = FIELD_DELIMITER.join(["%an", "%d", "%s", "%cr", "%H"])
FIELD_COUNT = LOG_FORMAT.count("%")

_TYPE_PATTERN = re.compile(r"^([^(]*)(\(([^)]*)\))?")


class MalformedCommitLine(Exception):
    """Raised when a log line does not split into the expected fields."""

    def __init__(self, line: str) -> None:
        super().__init__(f"Invalid line: {line}")
        self.line = line


def classify_subject(subject: str) -> Tuple[CommitType, str]:
    """Split a commit subject into its type and message.

    Parameters
    ----------
    subject : str
        The first line of the commit message.

    Returns
    -------
    Tuple[CommitType, str]
        The Conventional Commit type and the remaining message. Subjects
        without a colon are typed ``misc`` and kept whole.
    """
    parts = subject.split(":", 1)
    if len(parts) != 2:
        return CommitType(), subject

    prefix, message = parts
    # The pattern always matches; both groups may be empty.
    match = _TYPE_PATTERN.match(prefix)
    title = match.group(1)
    subtitle: Optional[str] = match.group(3) or None
    return CommitType(title=title, subtitle=subtitle), message.strip()


def parse_line(line: str) -> CommitRecord:
    """Parse one formatted log line.

    Raises
    ------
    MalformedCommitLine
        If the line does not contain exactly :data:`FIELD_COUNT` fields.
    """
    parts = line.split(FIELD_DELIMITER)
    if len(parts) != FIELD_COUNT:
        raise MalformedCommitLine(line)

    author, branches, subject, age, sha = parts
    commit_type, message = classify_subject(subject)
    return CommitRecord(
        author=author,
        branches=branches,
        subject=subject,
        age=age,
        sha=sha,
        message=message,
        type=commit_type,
    )


def parse_lines(lines: Iterable[str], ignore_errors: bool = False) -> List[CommitRecord]:
    """Parse several log lines.

    When ``ignore_errors`` is set, malformed lines are logged and
    skipped; otherwise the first one aborts parsing.
    """
    commits: List[CommitRecord] = []
    for line in lines:
        try:
            commits.append(parse_line(line))
        except MalformedCommitLine as exc:
            if not ignore_errors:
                raise
            logger.warning("Skipping malformed commit line: %s", exc.line)
    return commits
