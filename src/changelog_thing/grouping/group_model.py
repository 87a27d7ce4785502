"""
Data models for parsed commits and rendered reports.

A :class:`CommitRecord` is one classified line of ``git log`` output.
Records of a single repository are bucketed by type label into a
:class:`RepoReport`, and all repositories of a run are collected into a
:class:`ReportBundle` which is what the renderers consume.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Separator placed between the fields of ``git log --pretty=format``.
FIELD_DELIMITER = "::@::"


@dataclass(frozen=True)
class CommitType:
    """Conventional Commit category of a commit.

    Attributes
    ----------
    title : str
        The short tag in front of the colon (``feat``, ``fix``, ...).
        ``misc`` when the subject carries no tag.
    subtitle : Optional[str]
        The scope written in parentheses after the tag, if any.
    """

    title: str = "misc"
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class CommitRecord:
    """Representation of a single commit taken from the log.

    The five raw log fields are kept verbatim; ``message`` and ``type``
    are derived from ``subject``.
    """

    author: str
    branches: str
    subject: str
    age: str
    sha: str
    message: str
    type: CommitType = field(default_factory=CommitType)

    def fields(self) -> Tuple[str, str, str, str, str]:
        """Return the raw log fields in log order."""
        return (self.author, self.branches, self.subject, self.age, self.sha)

    def to_line(self) -> str:
        """Re-join the raw fields into the line they were parsed from."""
        return FIELD_DELIMITER.join(self.fields())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "author": self.author,
            "branches": self.branches,
            "subject": self.subject,
            "message": self.message,
            "age": self.age,
            "sha": self.sha,
            "type": {"title": self.type.title, "subtitle": self.type.subtitle},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommitRecord":
        type_data = data.get("type") or {}
        return cls(
            author=data["author"],
            branches=data.get("branches") or "",
            subject=data.get("subject", data["message"]),
            age=data["age"],
            sha=data["sha"],
            message=data["message"],
            type=CommitType(
                title=type_data.get("title") or "misc",
                subtitle=type_data.get("subtitle"),
            ),
        )


@dataclass
class RepoReport:
    """Grouped commits of one repository.

    Attributes
    ----------
    url : str
        Normalized ``https://`` URL of the repository remote.
    name : str
        Human readable project name derived from ``url``.
    commits : Dict[str, List[CommitRecord]]
        Mapping of type label to commits, in display order.
    """

    url: str
    name: str
    commits: Dict[str, List[CommitRecord]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "repo": self.name,
            "commits": {
                label: [commit.to_dict() for commit in commits]
                for label, commits in self.commits.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepoReport":
        return cls(
            url=data["url"],
            name=data["repo"],
            commits={
                label: [CommitRecord.from_dict(c) for c in commits]
                for label, commits in data.get("commits", {}).items()
            },
        )


@dataclass
class ReportBundle:
    """The complete multi-repository document model."""

    doc_title: str
    repos: List[RepoReport] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docTitle": self.doc_title,
            "repos": [repo.to_dict() for repo in self.repos],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportBundle":
        return cls(
            doc_title=data["docTitle"],
            repos=[RepoReport.from_dict(r) for r in data.get("repos", [])],
        )
