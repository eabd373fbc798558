"""Tests for pkgquality.cli: commands that need no network access."""

import json

from typer.testing import CliRunner

from pkgquality.cli import app

runner = CliRunner()


class TestLocate:
    def test_valid_repository(self):
        result = runner.invoke(app, ["locate", "git", "git@github.com:stevemao/left-pad.git"])

        assert result.exit_code == 0
        assert "stevemao" in result.output
        assert "left-pad" in result.output

    def test_invalid_repository(self):
        result = runner.invoke(app, ["locate", "svn", "https://svn.example.org/trunk"])

        assert result.exit_code == 1
        assert "Cannot locate" in result.output


class TestEstimate:
    def test_entry_without_repository_scores_zero(self, tmp_path):
        entry_file = tmp_path / "entry.json"
        entry_file.write_text(json.dumps({"name": "left-pad", "repository": {"type": "svn", "url": "x"}}))
        output = tmp_path / "out.json"

        result = runner.invoke(
            app, ["estimate", "left-pad", "--entry", str(entry_file), "--output", str(output)]
        )

        assert result.exit_code == 0
        assert json.loads(output.read_text()) == {
            "name": "left-pad",
            "quality": 0.0,
            "repository": "x",
        }

    def test_entry_without_name_fails(self, tmp_path):
        entry_file = tmp_path / "entry.json"
        entry_file.write_text(json.dumps({"version": "1.0.0"}))

        result = runner.invoke(app, ["estimate", "left-pad", "--entry", str(entry_file)])

        assert result.exit_code == 1
        assert "no name" in result.output

    def test_invalid_timeout_fails(self, monkeypatch):
        monkeypatch.setenv("PKGQUALITY_TIMEOUT", "later")

        result = runner.invoke(app, ["estimate", "left-pad"])

        assert result.exit_code == 1
        assert "PKGQUALITY_TIMEOUT" in result.output

    def test_unknown_log_level_fails(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PKGQUALITY_LOG_LEVEL", "verbose")
        entry_file = tmp_path / "entry.json"
        entry_file.write_text(json.dumps({"name": "left-pad"}))

        result = runner.invoke(app, ["estimate", "left-pad", "--entry", str(entry_file)])

        assert result.exit_code == 1
        assert "PKGQUALITY_LOG_LEVEL" in result.output
