"""
Bucketing of classified commits into labelled report sections.

The type map decides both which commits make it into the report and
the order of the sections: commits whose type title is not a key of
the map are left out, and sections appear in the map's order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

from .group_model import CommitRecord

TypeMap = Union[Mapping[str, str], Sequence[Tuple[str, str]]]

DEFAULT_TYPES: Dict[str, str] = {
    "feat": "Features",
    "fix": "Fixes",
    "perf": "Performance Improvements",
    "revert": "Reversions",
    "docs": "Documentation",
    "style": "Styles",
    "refactor": "Refactoring",
    "test": "Testing",
    "chore": "Chores",
    "misc": "Misc.",
}


def _type_pairs(types: TypeMap) -> List[Tuple[str, str]]:
    if isinstance(types, Mapping):
        return list(types.items())
    return [(key, label) for key, label in types]


def group_commits(types: TypeMap, commits: Iterable[CommitRecord]) -> Dict[str, List[CommitRecord]]:
    """Group commits by type label.

    Parameters
    ----------
    types : Mapping[str, str] or Sequence[Tuple[str, str]]
        Ordered pairs of short type key (``feat``) and section label
        (``Features``).
    commits : Iterable[CommitRecord]
        Commits in log order.

    Returns
    -------
    Dict[str, List[CommitRecord]]
        Section label to commits, in type map order. A label is only
        present when at least one commit matched it. Commits keep their
        relative input order within a section.
    """
    commits = list(commits)
    grouped: Dict[str, List[CommitRecord]] = {}
    for key, label in _type_pairs(types):
        for commit in commits:
            if commit.type.title == key:
                grouped.setdefault(label, []).append(commit)
    return grouped


def count_ungrouped(types: TypeMap, commits: Iterable[CommitRecord]) -> int:
    """Return how many commits have a type title missing from ``types``."""
    keys = {key for key, _ in _type_pairs(types)}
    return sum(1 for commit in commits if commit.type.title not in keys)
