"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from quickadd.cli import main

NOW = "2024-01-01T10:00"


class TestParseCommand:
    """Test the parse command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_json_output(self):
        result = self.runner.invoke(main, ["parse", "Call mom tomorrow at 5pm", "--now", NOW, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["text"] == "Call mom"
        assert data["due_date"] == "2024-01-02T17:00:00"
        assert data["reminder_offset"] == "exact"

    def test_words_are_joined(self):
        result = self.runner.invoke(main, ["parse", "Finish", "deck", "asap", "--now", NOW, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["text"] == "Finish deck"
        assert data["priority"] == "high"

    def test_table_output(self):
        result = self.runner.invoke(main, ["parse", "Buy milk #errands @Home", "--now", NOW])
        assert result.exit_code == 0
        assert "Buy milk" in result.output
        assert "#errands" in result.output
        assert "@Home" in result.output

    def test_plain_text(self):
        result = self.runner.invoke(main, ["parse", "Buy groceries", "--now", NOW])
        assert result.exit_code == 0
        assert "No dates" in result.output

    def test_invalid_now(self):
        result = self.runner.invoke(main, ["parse", "Call mom", "--now", "yesterday-ish"])
        assert result.exit_code == 2

    def test_broken_explicit_config(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("use_emoji: [unclosed\n")
        result = self.runner.invoke(main, ["--config", str(path), "parse", "Call mom"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCheckCommand:
    """Test the check command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_parseable(self):
        result = self.runner.invoke(main, ["check", "Call mom tomorrow"])
        assert result.exit_code == 0
        assert "Parseable" in result.output

    def test_plain(self):
        result = self.runner.invoke(main, ["check", "Buy groceries"])
        assert result.exit_code == 1


class TestConfigCommands:
    """Test the config command group."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_init_then_show(self, tmp_path):
        result = self.runner.invoke(main, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "config.yaml").exists()

        result = self.runner.invoke(main, ["config", "show"])
        assert result.exit_code == 0
        assert "use_emoji: true" in result.output

    def test_init_refuses_to_overwrite(self, tmp_path):
        (tmp_path / "config.yaml").write_text("use_emoji: false\n")
        result = self.runner.invoke(main, ["config", "init"])
        assert result.exit_code == 1
        assert (tmp_path / "config.yaml").read_text() == "use_emoji: false\n"

        result = self.runner.invoke(main, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "use_emoji: true" in (tmp_path / "config.yaml").read_text()
