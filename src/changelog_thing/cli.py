"""
Command line interface for the changelog_thing tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``changelog-thing`` command. It resolves the
layered options, collects commit history from the given repositories
(or reads a previously generated report) and writes the markdown, HTML
and JSON artifacts. Exit codes are kept stable across releases.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from click.core import ParameterSource

from changelog_thing import __version__
from changelog_thing.config.loader import ConfigError, default_config_path, load_config
from changelog_thing.config.options import (
    FORMAT_HTML,
    FORMAT_JSON,
    FORMAT_MARKDOWN,
    ReportOptions,
    merge_options,
)
from changelog_thing.config.options import write_default_config as save_config
from changelog_thing.grouping.group_model import ReportBundle
from changelog_thing.parsing.commit_parser import MalformedCommitLine
from changelog_thing.parsing.line_filter import InvalidFilterPattern
from changelog_thing.render.html_converter import ConversionError
from changelog_thing.report import (
    ReportInputError,
    collect_bundle,
    read_json,
    render_markdown,
    write_html,
    write_json,
    write_markdown,
)
from changelog_thing.vcs.git_client import GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_INVALID_OPTION = 1
EXIT_SYSTEM_ERROR = 2
EXIT_GIT_FAILURE = 3
EXIT_UNKNOWN = 4


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str) -> None:
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"→ {self.message}...", err=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            elapsed = time.time() - self.start_time
            click.echo(f"  ✓ Done ({elapsed:.1f}s)", err=True)
        return False


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

# Command line parameters that map one to one onto ReportOptions fields.
_DIRECT_PARAMS = (
    "age",
    "output",
    "outform",
    "inform",
    "remote",
    "summaries",
    "ignore_errors",
    "beautify",
    "write_html",
    "write_json",
    "doc_title",
    "html_command",
)


def cli_overrides(ctx: click.Context, params: Dict[str, Any]) -> Dict[str, Any]:
    """Return the option values the user actually passed on the command line.

    Parameters left at their defaults are omitted so that they do not
    shadow values from the configuration file.
    """

    def given(name: str) -> bool:
        return ctx.get_parameter_source(name) in (ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT)

    values: Dict[str, Any] = {name: params[name] for name in _DIRECT_PARAMS if given(name)}
    if given("repos") and params["repos"]:
        values["dirs"] = list(params["repos"])
    if given("input_path"):
        values["input"] = params["input_path"]
    if given("long_commits"):
        values["compact_commits"] = not params["long_commits"]
    if given("filter_patterns") and params["filter_patterns"]:
        values["filter_patterns"] = list(params["filter_patterns"])
    return values


def resolve_options(config_path: Optional[str], overrides: Dict[str, Any], skip_file: bool = False) -> ReportOptions:
    """Merge built-in defaults, the configuration file and CLI values."""
    file_values = {} if skip_file else load_config(config_path)
    options = merge_options(file_values, overrides)
    if options.inform and not options.input:
        raise ConfigError("--inform requires --input")
    if options.input and not options.inform:
        raise ConfigError("--input requires --inform")
    if options.inform == FORMAT_HTML:
        raise ConfigError("HTML cannot be used as an input format")
    return options


def convert_markdown_input(options: ReportOptions, output_given: bool) -> Path:
    """Convert a (hand edited) markdown report to HTML."""
    source = Path(options.input)
    md = source.read_text(encoding="utf-8")
    target = options.output if output_given else source
    with ProgressIndicator(f"Converting {source.name} to HTML"):
        return write_html(target, md, options, title=options.doc_title)


def load_bundle(options: ReportOptions) -> ReportBundle:
    """Read the report bundle from JSON input or from the repositories."""
    if options.inform == FORMAT_JSON:
        with ProgressIndicator(f"Reading report from {options.input}"):
            return read_json(options.input)

    noun = "repository" if len(options.dirs) == 1 else "repositories"
    with ProgressIndicator(f"Reading {options.age} day(s) of history from {len(options.dirs)} {noun}"):
        return collect_bundle(options)


class ReportCommand(click.Command):
    """Command that reports click usage errors with the invalid option exit code."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = EXIT_INVALID_OPTION
            raise


def write_outputs(bundle: ReportBundle, options: ReportOptions) -> Tuple[Path, ...]:
    """Write every requested artifact and return their paths."""
    written = []
    if options.outform == FORMAT_JSON or options.write_json:
        path = write_json(options.output, bundle)
        print_success(f"JSON written to {path}")
        written.append(path)
        if options.outform == FORMAT_JSON:
            return tuple(written)

    md = render_markdown(bundle, options)
    path = write_markdown(options.output, md)
    print_success(f"MD written to {path}")
    written.append(path)

    if options.outform == FORMAT_HTML or options.write_html:
        with ProgressIndicator("Converting markdown to HTML"):
            path = write_html(options.output, md, options)
        print_success(f"HTML written to {path}")
        written.append(path)
    return tuple(written)


@click.command(cls=ReportCommand)
@click.argument("repos", nargs=-1, type=click.Path(file_okay=False))
@click.option("-a", "--age", type=click.IntRange(min=1), default=14, show_default=True, help="Look for commits from this many days ago.")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default="out.md", show_default=True, help="Output filename; other formats swap the extension.")
@click.option("--outform", "--outfrm", "outform", default=FORMAT_MARKDOWN, show_default=True, help="Output format: md, html or json.")
@click.option("-i", "--input", "input_path", type=click.Path(exists=True, dir_okay=False), help="Report previously generated by this program.")
@click.option("--inform", "--infrm", "inform", help="Format of --input: md or json.")
@click.option("-r", "--remote", default="origin", show_default=True, help="Name of the remote used for links.")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False), help="JSON configuration file.")
@click.option("-s", "--summaries", is_flag=True, help="Add summary placeholder sections.")
@click.option("-l", "--long-commits", is_flag=True, help="Render each commit as a block of fields.")
@click.option("--ignore-errors", "--ign", "ignore_errors", is_flag=True, help="Skip invalid commit lines instead of failing.")
@click.option("-b", "--beautify/--no-beautify", default=True, show_default=True, help="Style and indent the HTML output.")
@click.option("--write-html", "--html", "write_html", is_flag=True, help="Also write HTML output.")
@click.option("--write-json", "--json", "write_json", is_flag=True, help="Also write JSON output.")
@click.option("-t", "--doc-title", "--title", "doc_title", default="Organization Name", show_default=True, help="Title of multi-repo reports.")
@click.option("-p", "--filter-pattern", "filter_patterns", multiple=True, help="Regex of commit lines to leave out (repeatable).")
@click.option("--html-command", help="External command converting markdown on stdin to HTML on stdout.")
@click.option("-w", "--write-default-config", is_flag=True, help="Write the effective options to the configuration file and exit.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog-thing")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], write_default_config: bool, verbose: bool, **params: Any) -> None:
    """Multi-repo changelog generator using commits since a number of days ago.

    REPOS are the repository directories to report on (default: the
    current directory).
    """
    # Configure logging. Use force=True to ensure handlers are reconfigured
    # on subsequent invocations (important for tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    try:
        overrides = cli_overrides(ctx, params)
        try:
            # A config file about to be created does not have to exist yet
            creating = write_default_config and config_path is not None and not Path(config_path).exists()
            options = resolve_options(config_path, overrides, skip_file=creating)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_INVALID_OPTION)
        logger.debug("Effective options: %s", options)

        if write_default_config:
            try:
                path = save_config(options, config_path or default_config_path())
            except OSError as exc:
                print_error(f"Could not write configuration: {exc}")
                raise click.exceptions.Exit(EXIT_SYSTEM_ERROR)
            print_success(f"Default config written to: {path}")
            raise click.exceptions.Exit(EXIT_SUCCESS)

        try:
            if options.inform == FORMAT_MARKDOWN:
                path = convert_markdown_input(options, "output" in overrides)
                print_success(f"HTML written to {path}")
                raise click.exceptions.Exit(EXIT_SUCCESS)

            bundle = load_bundle(options)
            total = sum(len(c) for repo in bundle.repos for c in repo.commits.values())
            print_info(f"Found {total} commit(s) across {len(bundle.repos)} project(s)")
            write_outputs(bundle, options)
        except InvalidFilterPattern as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_INVALID_OPTION)
        except (GitError, MalformedCommitLine) as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_GIT_FAILURE)
        except (OSError, ReportInputError, ConversionError) as exc:
            print_error(str(exc))
            raise click.exceptions.Exit(EXIT_SYSTEM_ERROR)

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        # Catch any other unhandled errors
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_UNKNOWN)

