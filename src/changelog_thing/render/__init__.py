"""
Report renderers.

:mod:`changelog_thing.render.markdown_renderer` turns a report bundle
into markdown and :mod:`changelog_thing.render.html_converter` turns
that markdown into an HTML page.
"""

from .html_converter import ConversionError, convert, markdown_to_html  # noqa: F401
from .markdown_renderer import render_bundle, render_commit, render_repo  # noqa: F401
