"""
Conversion of the markdown report to HTML.

By default the conversion is done in-process with the ``markdown``
package. An external converter (for example ``pandoc -f markdown -t
html``) can be configured instead; the markdown is piped to it on stdin
and its stdout is taken as the HTML document.
"""

from __future__ import annotations

import html
import logging
import shlex
import subprocess
from typing import Optional

import markdown


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

PLAIN_TEMPLATE = """<!doctype html>
<html><head><meta charset="utf-8"><title>{title}</title></head><body>
{body}
</body></html>
"""

STYLED_TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <style>
      body {{ font-family: system-ui, -apple-system, "Segoe UI", Roboto, Arial, sans-serif; margin: 24px auto; max-width: 900px; line-height: 1.5; color: #24292f; }}
      h1, h2 {{ border-bottom: 1px solid #d0d7de; padding-bottom: .3em; }}
      h1 {{ color: #1b3b6f; }}
      h2 {{ color: #2b6a9b; }}
      code, pre {{ background: #f6f8fa; border-radius: 6px; padding: 2px 6px; }}
      a {{ color: #0969da; text-decoration: none; }}
      a:hover {{ text-decoration: underline; }}
      li {{ margin: 4px 0; }}
    </style>
  </head>
  <body>
{body}
  </body>
</html>
"""


class ConversionError(Exception):
    """Raised when the markdown to HTML conversion fails."""

    pass


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line.strip() else line for line in text.splitlines())


def markdown_to_html(md: str, title: str = "Changelog", beautify: bool = True) -> str:
    """Convert a markdown document to a standalone HTML page.

    Parameters
    ----------
    md : str
        The markdown source.
    title : str
        Content of the ``<title>`` element.
    beautify : bool
        Produce an indented page with an embedded stylesheet instead of
        bare markup.
    """
    body = markdown.markdown(md, extensions=MARKDOWN_EXTENSIONS)
    safe_title = html.escape(title)
    if beautify:
        return STYLED_TEMPLATE.format(title=safe_title, body=_indent(body, "    "))
    return PLAIN_TEMPLATE.format(title=safe_title, body=body)


def run_external_converter(md: str, command: str) -> str:
    """Pipe ``md`` through an external converter command.

    Raises
    ------
    ConversionError
        If the command cannot be started or exits with a non-zero status.
    """
    args = shlex.split(command)
    if not args:
        raise ConversionError("Empty HTML converter command")
    logger.debug("Executing HTML converter: %s", " ".join(args))
    try:
        result = subprocess.run(
            args,
            input=md,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ConversionError(f"Unable to run HTML converter '{args[0]}': {e}") from e

    if result.returncode != 0:
        logger.error("HTML converter failed: %s\nSTDERR: %s", command, result.stderr)
        raise ConversionError(result.stderr.strip() or f"'{command}' exited with status {result.returncode}")
    return result.stdout


def convert(md: str, title: str = "Changelog", beautify: bool = True, command: Optional[str] = None) -> str:
    """Convert markdown to HTML with ``command`` if given, else in-process."""
    if command:
        return run_external_converter(md, command)
    return markdown_to_html(md, title=title, beautify=beautify)
