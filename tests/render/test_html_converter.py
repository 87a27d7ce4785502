import unittest
from unittest.mock import Mock, patch

from changelog_thing.render.html_converter import (
    ConversionError,
    convert,
    markdown_to_html,
    run_external_converter,
)


MD = "# Project: Api\n\n[Link to the repo](https://github.com/acme/api)\n\n## Commits\n\n### Features\n\n- add thing. Jane, 1 day ago\n"


class TestMarkdownToHtml(unittest.TestCase):
    def test_beautified_page(self) -> None:
        html = markdown_to_html(MD, title="Acme & Co")
        self.assertTrue(html.startswith("<!doctype html>"))
        self.assertIn("<title>Acme &amp; Co</title>", html)
        self.assertIn("<style>", html)
        self.assertIn("<h1>Project: Api</h1>", html)
        self.assertIn('<a href="https://github.com/acme/api">Link to the repo</a>', html)
        self.assertIn("<li>add thing. Jane, 1 day ago</li>", html)

    def test_plain_page(self) -> None:
        html = markdown_to_html(MD, title="Acme", beautify=False)
        self.assertNotIn("<style>", html)
        self.assertIn("<h3>Features</h3>", html)

    def test_convert_defaults_to_in_process(self) -> None:
        with patch("changelog_thing.render.html_converter.run_external_converter") as mock_ext:
            html = convert(MD, title="Acme")
        mock_ext.assert_not_called()
        self.assertIn("<h1>Project: Api</h1>", html)


class TestExternalConverter(unittest.TestCase):
    @patch("subprocess.run")
    def test_pipes_markdown_to_command(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="<h1>x</h1>\n", stderr="")
        html = convert(MD, command="pandoc -f markdown -t html")
        self.assertEqual(html, "<h1>x</h1>\n")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["pandoc", "-f", "markdown", "-t", "html"])
        self.assertEqual(kwargs["input"], MD)

    @patch("subprocess.run")
    def test_failure_raises(self, mock_run):
        mock_run.return_value = Mock(returncode=1, stdout="", stderr="pandoc: boom")
        with self.assertRaises(ConversionError) as ctx:
            run_external_converter(MD, "pandoc")
        self.assertIn("boom", str(ctx.exception))

    @patch("subprocess.run", side_effect=FileNotFoundError("no such file"))
    def test_missing_command_raises(self, mock_run):
        with self.assertRaises(ConversionError):
            run_external_converter(MD, "not-a-converter")

    def test_empty_command_raises(self) -> None:
        with self.assertRaises(ConversionError):
            run_external_converter(MD, "   ")


if __name__ == "__main__":
    unittest.main()
