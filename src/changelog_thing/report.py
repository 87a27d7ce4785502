"""
Report collection and output.

This module drives one report run: it reads the history of each
configured repository, turns it into a :class:`ReportBundle` and writes
the markdown, HTML and JSON artifacts. Repositories are processed one
after the other; a Git failure in any of them aborts the run.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import List, Optional, Pattern, Sequence, Union

from changelog_thing.config.options import ReportOptions
from changelog_thing.grouping.group_model import RepoReport, ReportBundle
from changelog_thing.grouping.type_grouper import count_ungrouped, group_commits
from changelog_thing.parsing.commit_parser import parse_lines
from changelog_thing.parsing.line_filter import compile_patterns, filter_lines
from changelog_thing.render.html_converter import convert
from changelog_thing.render.markdown_renderer import render_bundle
from changelog_thing.vcs.git_client import GitClient, GitError
from changelog_thing.vcs.remote_url import normalize_remote_url, repo_display_name


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class ReportInputError(Exception):
    """Raised when a previously generated report cannot be read back."""

    pass


_MD_SUFFIX = re.compile(r"\.(md|MD)$")


def change_extension(path: Union[str, Path], ext: str) -> Path:
    """Return ``path`` with a trailing ``.md`` swapped for ``.ext``.

    Paths without a markdown suffix get ``.ext`` appended.
    """
    return Path(f"{_MD_SUFFIX.sub('', str(path))}.{ext}")


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

def collect_repo(
    repo_dir: Union[str, Path],
    options: ReportOptions,
    regexes: Sequence[Pattern[str]] = (),
    client: Optional[GitClient] = None,
) -> RepoReport:
    """Build the report of a single repository.

    Raises
    ------
    GitError
        If ``repo_dir`` is not the top level of a Git repository or a Git command fails.
    MalformedCommitLine
        If a log line cannot be parsed and ``ignore_errors`` is off.
    """
    client = client or GitClient(repo_dir)
    if not client.is_repo_root():
        raise GitError(f"{repo_dir} is not the root of a Git repository")

    url = normalize_remote_url(client.get_remote_url(options.remote))
    lines = filter_lines(client.get_log_lines(options.age), regexes)
    commits = parse_lines(lines, ignore_errors=options.ignore_errors)

    dropped = count_ungrouped(options.types, commits)
    if dropped:
        logger.debug("%d commit(s) in %s have a type missing from the type map", dropped, repo_dir)

    logger.debug("Collected %d commit(s) from %s (%s)", len(commits), repo_dir, url)
    return RepoReport(url=url, name=repo_display_name(url), commits=group_commits(options.types, commits))


def collect_bundle(options: ReportOptions) -> ReportBundle:
    """Collect the reports of all configured repositories."""
    regexes = compile_patterns(options.filter_patterns)
    repos: List[RepoReport] = [collect_repo(d, options, regexes) for d in options.dirs]
    return ReportBundle(doc_title=options.doc_title, repos=repos)


def render_markdown(bundle: ReportBundle, options: ReportOptions) -> str:
    return render_bundle(
        bundle,
        compact=options.compact_commits,
        summaries=options.summaries,
        commit_hash_length=options.commit_hash_length,
    )


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def write_markdown(output: Union[str, Path], md: str) -> Path:
    path = change_extension(output, "md")
    path.write_text(md, encoding="utf-8")
    return path


def write_json(output: Union[str, Path], bundle: ReportBundle) -> Path:
    path = change_extension(output, "json")
    path.write_text(json.dumps(bundle.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path


def write_html(output: Union[str, Path], md: str, options: ReportOptions, title: Optional[str] = None) -> Path:
    """Convert ``md`` to HTML and write it next to ``output``."""
    path = change_extension(output, "html")
    html = convert(
        md,
        title=title or options.doc_title,
        beautify=options.beautify,
        command=options.html_command,
    )
    path.write_text(html, encoding="utf-8")
    return path


def read_json(input_path: Union[str, Path]) -> ReportBundle:
    """Load a bundle previously written by :func:`write_json`.

    Raises
    ------
    ReportInputError
        If the file is not a valid report document.
    """
    path = Path(input_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ReportBundle.from_dict(data)
    except json.JSONDecodeError as exc:
        raise ReportInputError(f"Invalid JSON in {path}: {exc}") from exc
    except (KeyError, TypeError, AttributeError) as exc:
        raise ReportInputError(f"{path} is not a changelog report: {exc}") from exc
