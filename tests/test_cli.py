"""Tests for the CLI functionality."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

import githashprop.cli_app
from githashprop import __version__

app = githashprop.cli_app.app

runner = CliRunner()

FULL_HASH = "abcdef1234567890abcdef1234567890abcdef12"


@pytest.mark.cli
class TestResolveCommand:
    """Tests for the resolve command."""

    def test_prints_properties(self, main_repo: Path) -> None:
        result = runner.invoke(app, ["resolve", str(main_repo), "--branch-property", "git_branch"])
        assert result.exit_code == 0
        assert result.stdout == f"git_hash={FULL_HASH}\ngit_branch=main\n"

    def test_short_hash_with_prefix_and_suffix(self, main_repo: Path) -> None:
        result = runner.invoke(
            app, ["resolve", str(main_repo), "--short", "--prefix", "v", "--suffix", "-build", "-p", "build.commit"]
        )
        assert result.exit_code == 0
        assert result.stdout == "build.commit=vabcdef1-build\n"

    def test_json_format(self, main_repo: Path) -> None:
        result = runner.invoke(app, ["resolve", str(main_repo), "--format", "json", "-b", "git_branch"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"git_hash": FULL_HASH, "git_branch": "main"}

    def test_env_format(self, main_repo: Path) -> None:
        result = runner.invoke(app, ["resolve", str(main_repo), "-f", "env", "--short"])
        assert result.exit_code == 0
        assert result.stdout == "GIT_HASH=abcdef1\n"

    def test_missing_metadata_prints_nothing(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["resolve", str(tmp_path)])
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_missing_metadata_with_fallbacks(self, make_repo) -> None:
        repo = make_repo(head=None)
        result = runner.invoke(
            app,
            ["resolve", str(repo), "--short", "--fallback", "unknown-build", "-b", "git_branch", "--fallback-branch", "none"],
        )
        assert result.exit_code == 0
        assert result.stdout == "git_hash=unknown-build\ngit_branch=none\n"

    def test_strict_fails_without_hash(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["resolve", str(tmp_path), "--strict"])
        assert result.exit_code == 1

    def test_strict_passes_with_hash(self, main_repo: Path) -> None:
        result = runner.invoke(app, ["resolve", str(main_repo), "--strict"])
        assert result.exit_code == 0

    def test_output_file(self, main_repo: Path, tmp_path: Path) -> None:
        output = tmp_path / "build.properties"
        output.write_text("version=1.0\ngit_hash=old\n", encoding="utf-8")

        result = runner.invoke(app, ["resolve", str(main_repo), "--short", "-o", str(output)])

        assert result.exit_code == 0
        assert result.stdout == ""
        assert output.read_text(encoding="utf-8") == "version=1.0\ngit_hash=abcdef1\n"

    def test_search_parents(self, main_repo: Path) -> None:
        nested = main_repo / "module" / "sub"
        nested.mkdir(parents=True)

        without = runner.invoke(app, ["resolve", str(nested)])
        with_search = runner.invoke(app, ["resolve", str(nested), "--search-parents", "--short"])

        assert without.stdout == ""
        assert with_search.stdout == "git_hash=abcdef1\n"

    def test_defaults_to_current_directory(self, main_repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(main_repo)
        result = runner.invoke(app, ["resolve"])
        assert result.exit_code == 0
        assert result.stdout == f"git_hash={FULL_HASH}\n"

    def test_repo_config_file(self, main_repo: Path) -> None:
        (main_repo / ".githashprop.yml").write_text(
            yaml.dump({"resolver": {"short_hash": True, "property_name": "rev"}, "output": {"format": "json"}})
        )
        result = runner.invoke(app, ["resolve", str(main_repo)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"rev": "abcdef1"}

    def test_cli_options_override_config(self, main_repo: Path, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yml"
        config_file.write_text(yaml.dump({"resolver": {"short_hash": True}}))
        result = runner.invoke(app, ["resolve", str(main_repo), "-c", str(config_file), "--no-short"])
        assert result.exit_code == 0
        assert result.stdout == f"git_hash={FULL_HASH}\n"

    def test_invalid_config_exits_with_error(self, main_repo: Path, tmp_path: Path) -> None:
        config_file = tmp_path / "broken.yml"
        config_file.write_text(yaml.dump({"resolver": {"short_hash": "sometimes"}}))
        result = runner.invoke(app, ["resolve", str(main_repo), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Could not load configuration" in result.output

    def test_invalid_output_format_in_config(self, main_repo: Path, tmp_path: Path) -> None:
        config_file = tmp_path / "format.yml"
        config_file.write_text(yaml.dump({"output": {"format": "xml"}}))
        result = runner.invoke(app, ["resolve", str(main_repo), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Unsupported output format" in result.output

    @pytest.mark.parametrize("section_value", ["5", "foo", "[a, b]"])
    def test_non_mapping_resolver_section(self, main_repo: Path, tmp_path: Path, section_value: str) -> None:
        config_file = tmp_path / "section.yml"
        config_file.write_text(f"resolver: {section_value}\n")
        result = runner.invoke(app, ["resolve", str(main_repo), "-c", str(config_file)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Could not load configuration" in result.output
        assert "Unsupported output format" not in result.output

    def test_unwritable_output(self, main_repo: Path) -> None:
        with patch("githashprop.properties.write_properties_file", side_effect=PermissionError("denied")):
            result = runner.invoke(app, ["resolve", str(main_repo), "-o", "out.properties"])
        assert result.exit_code == 1
        assert "Could not write properties" in result.output


@pytest.mark.cli
class TestShowCommand:
    """Tests for the show command."""

    def test_show_table(self, main_repo: Path) -> None:
        result = runner.invoke(app, ["show", str(main_repo), "--short", "--no-color"])
        assert result.exit_code == 0
        assert "refs/heads/main" in result.stdout
        assert "abcdef1" in result.stdout
        assert "repository" in result.stdout

    def test_show_detached_head(self, make_repo) -> None:
        repo = make_repo(head=f"{FULL_HASH}\n")
        result = runner.invoke(app, ["show", str(repo), "--no-color"])
        assert result.exit_code == 0
        assert "unresolved" in result.stdout
        assert "ref entry not found in HEAD file" in result.stdout


@pytest.mark.cli
class TestGlobalOptions:
    """Tests for the global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "resolve" in result.stdout
        assert "show" in result.stdout

    def test_verbose_flag_configures_logging(self, make_repo) -> None:
        repo = make_repo(head=None)
        with patch("githashprop.cli.setup_logging") as mock_setup:
            result = runner.invoke(app, ["-v", "resolve", str(repo), "--fallback", "fb"])
        assert result.exit_code == 0
        mock_setup.assert_called_once_with(is_verbose=True, log_file_path=None)

    def test_save_log_records_resolution_path(self, make_repo) -> None:
        repo = make_repo(head=None)
        result = runner.invoke(app, ["--save-log", "resolve", str(repo), "--fallback", "fb", "-b", "git_branch"])
        assert result.exit_code == 0

        log_files = list(Path("logs").glob("githashprop_*.log"))
        assert len(log_files) == 1
        log_text = log_files[0].read_text(encoding="utf-8")
        assert "HEAD info not found, will use fallback value" in log_text
        assert "Commit hash 'fb' assigned to property 'git_hash'" in log_text
        assert "No branch name available for property 'git_branch'" in log_text

    def test_main_function(self) -> None:
        with patch("githashprop.cli_app.app") as mock_app:
            mock_app.return_value = 0
            from githashprop.cli_app import main

            assert main() == 0
            mock_app.assert_called_once()
