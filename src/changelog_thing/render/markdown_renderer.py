"""
Markdown rendering of a report bundle.

Rendering is a pure function of the :class:`ReportBundle` and a handful
of layout switches. A single-repository bundle starts at heading level
one; a multi-repository bundle gets a document title heading and every
repository is nested one level deeper.
"""

from __future__ import annotations

from typing import List

from changelog_thing.grouping.group_model import CommitRecord, RepoReport, ReportBundle
from changelog_thing.text import capitalize_words
from changelog_thing.vcs.remote_url import commit_link

SUMMARY_PLACEHOLDER = "{{Please fill in this summary}}"
DEFAULT_HASH_LENGTH = 7


def heading(level: int, text: str) -> str:
    return f"{'#' * level} {text}"


def summary_section(level: int) -> str:
    """Return a summary heading followed by a placeholder to edit by hand."""
    return f"{heading(level, 'Summary')}\n\n{SUMMARY_PLACEHOLDER}\n\n"


def sha_link(url: str, sha: str, commit_hash_length: int = DEFAULT_HASH_LENGTH) -> str:
    """Return a markdown link to a commit, labelled with the short hash."""
    return f"[{sha[:commit_hash_length]}]({commit_link(url, sha)})"


def render_commit(
    url: str,
    commit: CommitRecord,
    compact: bool = True,
    commit_hash_length: int = DEFAULT_HASH_LENGTH,
) -> str:
    """Render a single commit.

    The compact form is one list item; the long form is a block of
    labelled fields followed by a blank line.
    """
    link = sha_link(url, commit.sha, commit_hash_length)
    if compact:
        scope = f"__{capitalize_words(commit.type.subtitle)}__: " if commit.type.subtitle else ""
        return f"- {scope}{commit.message}. {commit.author}, {commit.age} ({link})\n"

    fields = [
        ("Area", capitalize_words(commit.type.subtitle) or "General"),
        ("Message", commit.message),
        ("Branches Affected", commit.branches.strip() or "N/a"),
        ("Author", commit.author),
        ("Committed", commit.age),
    ]
    lines = [f"&emsp;__{name}__: {value}</br>" for name, value in fields]
    lines.append(f"&emsp;__Commit SHA__: {link}")
    return "\n".join(lines) + "\n\n"


def render_repo(
    repo: RepoReport,
    level: int = 1,
    compact: bool = True,
    summaries: bool = False,
    commit_hash_length: int = DEFAULT_HASH_LENGTH,
) -> str:
    """Render one repository section starting at heading ``level``."""
    parts: List[str] = [
        f"{heading(level, f'Project: {repo.name}')}\n\n",
        f"[Link to the repo]({repo.url})\n\n",
    ]
    if summaries:
        parts.append(summary_section(level + 1))
    parts.append(f"{heading(level + 1, 'Commits')}\n")
    for label, commits in repo.commits.items():
        if not commits:
            continue
        parts.append(f"\n{heading(level + 2, label)}\n\n")
        for commit in commits:
            parts.append(render_commit(repo.url, commit, compact, commit_hash_length))
    return "".join(parts)


def render_bundle(
    bundle: ReportBundle,
    compact: bool = True,
    summaries: bool = False,
    commit_hash_length: int = DEFAULT_HASH_LENGTH,
) -> str:
    """Render the whole report bundle to a markdown document.

    Parameters
    ----------
    bundle : ReportBundle
        Repositories to render, in order.
    compact : bool
        Render each commit as a single list item instead of a block.
    summaries : bool
        Insert summary placeholder sections to be filled in by hand.
    commit_hash_length : int
        Number of hash characters shown in commit links.

    Returns
    -------
    str
        The markdown document.
    """
    md = ""
    level = 1
    if len(bundle.repos) > 1:
        md = f"{heading(level, bundle.doc_title)}\n\n"
        if summaries:
            md += summary_section(level + 1)
        level += 1
    for repo in bundle.repos:
        md += render_repo(repo, level, compact, summaries, commit_hash_length) + "\n"
    return md
