import json
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

import changelog_thing.cli as cli
from changelog_thing.grouping.group_model import CommitRecord, CommitType, RepoReport, ReportBundle
from changelog_thing.parsing.commit_parser import MalformedCommitLine
from changelog_thing.render.html_converter import ConversionError
from changelog_thing.vcs.git_client import GitError


def make_bundle(repo_count: int = 1) -> ReportBundle:
    commit = CommitRecord(
        author="Jane Doe",
        branches="",
        subject="feat(api): add health check",
        age="2 days ago",
        sha="abc1234def5678",
        message="add health check",
        type=CommitType(title="feat", subtitle="api"),
    )
    repos = [
        RepoReport(url=f"https://github.com/acme/repo{i}", name=f"Repo{i}", commits={"Features": [commit]})
        for i in range(repo_count)
    ]
    return ReportBundle(doc_title="Acme", repos=repos)


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()

    def test_markdown_report(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()) as mock_collect:
                result = self.runner.invoke(cli.main, ["repo-a", "-a", "7"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            options = mock_collect.call_args[0][0]
            self.assertEqual(options.dirs, ["repo-a"])
            self.assertEqual(options.age, 7)
            md = Path("out.md").read_text(encoding="utf-8")
            self.assertTrue(md.startswith("# Project: Repo0\n"))
            self.assertFalse(Path("out.html").exists())
            self.assertIn("MD written to out.md", result.output)

    def test_defaults_to_current_directory(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()) as mock_collect:
                result = self.runner.invoke(cli.main, [])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            self.assertEqual(mock_collect.call_args[0][0].dirs, ["."])

    def test_multi_repo_long_commits_with_summaries(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle(2)):
                result = self.runner.invoke(cli.main, ["a", "b", "-t", "Acme", "-s", "-l", "-o", "weekly.md"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            md = Path("weekly.md").read_text(encoding="utf-8")
            self.assertTrue(md.startswith("# Acme\n\n## Summary\n"))
            self.assertEqual(md.count("## Project:"), 2)
            self.assertIn("&emsp;__Area__: Api</br>", md)

    def test_html_and_json_outputs(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()):
                result = self.runner.invoke(cli.main, ["--outform", "html", "--write-json", "--no-beautify"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            self.assertTrue(Path("out.md").exists())
            self.assertIn("<h1>Project: Repo0</h1>", Path("out.html").read_text(encoding="utf-8"))
            self.assertEqual(json.loads(Path("out.json").read_text())["docTitle"], "Acme")

    def test_json_only_output(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()):
                result = self.runner.invoke(cli.main, ["--outform", "json"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            self.assertTrue(Path("out.json").exists())
            self.assertFalse(Path("out.md").exists())

    def test_json_outform_ignores_write_html(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()):
                result = self.runner.invoke(cli.main, ["--outform", "json", "--write-html"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            self.assertTrue(Path("out.json").exists())
            self.assertFalse(Path("out.md").exists())
            self.assertFalse(Path("out.html").exists())

    def test_json_input_skips_git(self) -> None:
        with self.runner.isolated_filesystem():
            Path("report.json").write_text(json.dumps(make_bundle(2).to_dict()))
            with patch.object(cli, "collect_bundle") as mock_collect:
                result = self.runner.invoke(cli.main, ["--inform", "json", "-i", "report.json", "-o", "again.md"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            mock_collect.assert_not_called()
            self.assertTrue(Path("again.md").read_text(encoding="utf-8").startswith("# Acme\n"))

    def test_markdown_input_converts_to_html(self) -> None:
        with self.runner.isolated_filesystem():
            Path("edited.md").write_text("# Project: Api\n\nHand written summary.\n", encoding="utf-8")
            with patch.object(cli, "collect_bundle") as mock_collect:
                result = self.runner.invoke(cli.main, ["--inform", "md", "--input", "edited.md"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            mock_collect.assert_not_called()
            self.assertIn("Hand written summary.", Path("edited.html").read_text(encoding="utf-8"))

    def test_config_file_is_overridden_by_cli(self) -> None:
        with self.runner.isolated_filesystem():
            Path("cfg.json").write_text(json.dumps({"age": 3, "doc_title": "From File", "remote": "upstream"}))
            with patch.object(cli, "collect_bundle", return_value=make_bundle()) as mock_collect:
                result = self.runner.invoke(cli.main, ["-c", "cfg.json", "--age", "9"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            options = mock_collect.call_args[0][0]
            self.assertEqual(options.age, 9)
            self.assertEqual(options.doc_title, "From File")
            self.assertEqual(options.remote, "upstream")

    def test_write_default_config(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle") as mock_collect:
                result = self.runner.invoke(cli.main, ["-w", "-c", "conf/new.json", "-a", "21"])
            self.assertEqual(result.exit_code, cli.EXIT_SUCCESS, result.output)
            mock_collect.assert_not_called()
            self.assertEqual(json.loads(Path("conf/new.json").read_text())["age"], 21)

    def test_version(self) -> None:
        result = self.runner.invoke(cli.main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("changelog-thing", result.output)


class TestCLIErrors(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()

    def test_invalid_outform(self) -> None:
        result = self.runner.invoke(cli.main, ["--outform", "pdf"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION)

    def test_click_usage_errors_use_invalid_option_code(self) -> None:
        cases = [
            ["--age", "0"],
            ["--age", "abc"],
            ["--no-such-flag"],
        ]
        for args in cases:
            with self.subTest(args=args):
                with patch.object(cli, "collect_bundle") as mock_collect:
                    result = self.runner.invoke(cli.main, args)
                self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION, result.output)
                mock_collect.assert_not_called()

    def test_invalid_config_file(self) -> None:
        with self.runner.isolated_filesystem():
            Path("cfg.json").write_text("{broken")
            result = self.runner.invoke(cli.main, ["-c", "cfg.json"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION)

    def test_missing_config_file(self) -> None:
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli.main, ["-c", "missing.json"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION)

    def test_inform_without_input(self) -> None:
        result = self.runner.invoke(cli.main, ["--inform", "json"])
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION)

    def test_invalid_filter_pattern(self) -> None:
        with self.runner.isolated_filesystem():
            with patch("changelog_thing.report.GitClient") as mock_client:
                result = self.runner.invoke(cli.main, ["-p", "(unclosed"])
            mock_client.assert_not_called()
        self.assertEqual(result.exit_code, cli.EXIT_INVALID_OPTION)

    def test_git_failure(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", side_effect=GitError("not a git repository")):
                result = self.runner.invoke(cli.main, ["somewhere"])
            self.assertFalse(Path("out.md").exists())
        self.assertEqual(result.exit_code, cli.EXIT_GIT_FAILURE)

    def test_malformed_line(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", side_effect=MalformedCommitLine("bad")):
                result = self.runner.invoke(cli.main, [])
        self.assertEqual(result.exit_code, cli.EXIT_GIT_FAILURE)

    def test_conversion_failure(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", return_value=make_bundle()):
                with patch("changelog_thing.report.convert", side_effect=ConversionError("boom")):
                    result = self.runner.invoke(cli.main, ["--outform", "html"])
        self.assertEqual(result.exit_code, cli.EXIT_SYSTEM_ERROR)

    def test_bad_json_input(self) -> None:
        with self.runner.isolated_filesystem():
            Path("report.json").write_text("{}")
            result = self.runner.invoke(cli.main, ["--inform", "json", "-i", "report.json"])
        self.assertEqual(result.exit_code, cli.EXIT_SYSTEM_ERROR)

    def test_unexpected_error(self) -> None:
        with self.runner.isolated_filesystem():
            with patch.object(cli, "collect_bundle", side_effect=RuntimeError("surprise")):
                result = self.runner.invoke(cli.main, [])
        self.assertEqual(result.exit_code, cli.EXIT_UNKNOWN)


if __name__ == "__main__":
    unittest.main()
