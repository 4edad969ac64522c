"""Tests for the command-line interface."""

import json
import logging
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from prompt_composer.cli import EXIT_CONFIG_ERROR, EXIT_PROGRAM_NOT_FOUND, _report_error, app
from prompt_composer.errors import program_failed, template_not_found

from conftest import COMMIT_TEXT, REVIEW_TEXT

runner = CliRunner()


@pytest.fixture
def echo_config(tmp_path: Path) -> Path:
    """Config whose assistant is a Python one-liner echoing its instruction."""
    path = tmp_path / "prompt-composer.toml"
    script = "import sys; sys.stdout.write('ASSISTANT GOT: ' + sys.argv[-1])"
    path.write_text(
        "[assistant]\n"
        f"program = {json.dumps(sys.executable)}\n"
        f"extra_args = [\"-c\", {json.dumps(script)}]\n"
        "capture_output = true\n"
    )
    return path


@pytest.fixture
def failing_config(tmp_path: Path) -> Path:
    """Config whose assistant exits with status 4."""
    path = tmp_path / "failing.toml"
    script = "import sys; sys.stderr.write('boom'); sys.exit(4)"
    path.write_text(
        "[assistant]\n"
        f"program = {json.dumps(sys.executable)}\n"
        f"extra_args = [\"-c\", {json.dumps(script)}]\n"
        "capture_output = true\n"
    )
    return path


class TestOperations:
    """Tests for the three assistant operations."""

    def test_create_pull_request_invokes_assistant(self, prompts_dir, echo_config):
        """Test the composed instruction reaches the assistant."""
        result = runner.invoke(app, [
            "--config", str(echo_config), "--prompts-dir", str(prompts_dir),
            "create-pull-request", "fix login bug",
        ])

        assert result.exit_code == 0, result.output
        assert "ASSISTANT GOT: Key goal: create Pull Request" in result.output
        assert "Reason: fix login bug\nDone." in result.output

    def test_commit_invokes_assistant(self, prompts_dir, echo_config):
        """Test the commit template is passed unchanged."""
        result = runner.invoke(app, [
            "--config", str(echo_config), "--prompts-dir", str(prompts_dir), "commit",
        ])

        assert result.exit_code == 0, result.output
        assert f"ASSISTANT GOT: {COMMIT_TEXT}" in result.output

    def test_review_invokes_assistant(self, prompts_dir, echo_config):
        """Test the review preamble and template are passed."""
        result = runner.invoke(app, [
            "--config", str(echo_config), "--prompts-dir", str(prompts_dir), "review", "PR-42",
        ])

        assert result.exit_code == 0, result.output
        assert "ASSISTANT GOT: Use Github CLI to retrieve PR-42 PR details" in result.output
        assert REVIEW_TEXT in result.output

    def test_review_requires_reference(self, prompts_dir):
        """Test the PR reference argument is mandatory."""
        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "review"])

        assert result.exit_code != 0

    def test_dry_run(self, prompts_dir):
        """Test dry run prints the instruction without invoking anything."""
        result = runner.invoke(app, [
            "--prompts-dir", str(prompts_dir),
            "create-pull-request", "add cache", "--dry-run",
            "--program", "definitely-not-an-assistant-program-xyz",
        ])

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert "Reason: add cache\nDone." in result.output

    def test_missing_template_is_config_error(self, prompts_dir):
        """Test a missing template aborts before invocation."""
        (prompts_dir / "Commit.md").unlink()

        result = runner.invoke(app, [
            "--prompts-dir", str(prompts_dir),
            "commit", "--program", "definitely-not-an-assistant-program-xyz",
        ])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "not found" in result.output

    def test_program_not_found(self, prompts_dir):
        """Test exit status when the assistant is not installed."""
        result = runner.invoke(app, [
            "--prompts-dir", str(prompts_dir),
            "commit", "--program", "definitely-not-an-assistant-program-xyz",
        ])

        assert result.exit_code == EXIT_PROGRAM_NOT_FOUND

    def test_nonzero_exit_propagates(self, prompts_dir, failing_config):
        """Test the assistant's exit status and stderr are surfaced."""
        result = runner.invoke(app, [
            "--config", str(failing_config), "--prompts-dir", str(prompts_dir), "commit",
        ])

        assert result.exit_code == 4
        assert "boom" in result.output

    def test_env_prompts_dir(self, prompts_dir, monkeypatch):
        """Test the template directory can come from the environment."""
        monkeypatch.setenv("PROMPT_COMPOSER_PROMPTS_DIR", str(prompts_dir))

        result = runner.invoke(app, ["show", "commit"])

        assert result.exit_code == 0, result.output
        assert COMMIT_TEXT in result.output

    def test_logs_duration(self, prompts_dir, echo_config, caplog):
        """Test the run time is reported at debug level."""
        caplog.set_level(logging.DEBUG, logger="prompt_composer.cli")

        result = runner.invoke(app, [
            "--config", str(echo_config), "--prompts-dir", str(prompts_dir), "commit",
        ])

        assert result.exit_code == 0, result.output
        assert any("finished in" in record.getMessage() for record in caplog.records)


LONG_STDERR = "error: " + "word " * 40 + "end [bold]x[/bold]"


class TestDiagnostics:
    """Tests for how errors reach the terminal."""

    def test_long_assistant_stderr_is_verbatim(self, prompts_dir, tmp_path):
        """Test stderr wider than the console is not re-wrapped or markup-parsed."""
        path = tmp_path / "long.toml"
        script = f"import sys; sys.stderr.write({LONG_STDERR!r}); sys.exit(1)"
        path.write_text(
            "[assistant]\n"
            f"program = {json.dumps(sys.executable)}\n"
            f"extra_args = [\"-c\", {json.dumps(script)}]\n"
            "capture_output = true\n"
        )

        result = runner.invoke(app, ["--config", str(path), "--prompts-dir", str(prompts_dir), "commit"])

        assert result.exit_code == 1
        assert LONG_STDERR in result.output

    def test_invocation_error_goes_to_stderr(self, capsys):
        """Test assistant diagnostics are written to stderr unchanged."""
        _report_error(program_failed("claude", 1, LONG_STDERR))

        captured = capsys.readouterr()
        assert captured.out == ""
        assert LONG_STDERR + "\n" in captured.err
        assert "claude exited with status 1" in captured.err

    def test_configuration_error_goes_to_stderr(self, capsys):
        """Test configuration errors stay off stdout."""
        _report_error(template_not_found("commit", "/p/Commit.md"))

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "not found" in captured.err

    def test_config_warning_keeps_show_output_clean(self, prompts_dir, tmp_path, monkeypatch, capsys):
        """Test a broken discovered config warns on stderr while show output stays pipeable."""
        workdir = tmp_path / "work"
        workdir.mkdir()
        (workdir / "prompt-composer.toml").write_text("[templates\n")
        monkeypatch.chdir(workdir)

        app(["--prompts-dir", str(prompts_dir), "show", "commit"], standalone_mode=False)

        captured = capsys.readouterr()
        assert captured.out == COMMIT_TEXT + "\n"
        assert "Warning" in captured.err


class TestShow:
    """Tests for the show command."""

    def test_show_create_pull_request(self, prompts_dir):
        """Test printing the create-pull-request instruction."""
        result = runner.invoke(app, [
            "--prompts-dir", str(prompts_dir), "show", "create-pull-request", "fix login bug",
        ])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("Key goal: create Pull Request\n")
        assert "<REASON>" not in result.output

    def test_show_unknown_operation(self, prompts_dir):
        """Test invalid operation names are rejected."""
        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "show", "deploy"])

        assert result.exit_code != 0

    def test_show_review_without_reference(self, prompts_dir):
        """Test review needs a reference."""
        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "show", "review"])

        assert result.exit_code == EXIT_CONFIG_ERROR


class TestTemplatesCommand:
    """Tests for the templates command."""

    def test_all_found(self, prompts_dir):
        """Test a complete directory passes."""
        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "templates"])

        assert result.exit_code == 0, result.output
        assert "pull-request" in result.output

    def test_missing_template(self, prompts_dir):
        """Test a missing file fails the check."""
        (prompts_dir / "ReviewPR.md").unlink()

        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "templates"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "missing" in result.output


class TestAliases:
    """Tests for the aliases command."""

    def test_default_aliases(self):
        """Test the three alias definitions."""
        result = runner.invoke(app, ["aliases"])

        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines == [
            "alias claude_pr='prompt-composer create-pull-request'",
            "alias claude_commit='prompt-composer commit'",
            "alias claude_review='prompt-composer review'",
        ]

    def test_prefix_and_prompts_dir(self, tmp_path):
        """Test custom prefix and an embedded template directory."""
        result = runner.invoke(app, ["--prompts-dir", str(tmp_path), "aliases", "--prefix", "ai"])

        assert result.exit_code == 0, result.output
        assert f"alias ai_commit='prompt-composer --prompts-dir {tmp_path} commit'" in result.output


class TestConfigCommand:
    """Tests for the config command."""

    def test_init_creates_file(self, tmp_path):
        """Test writing the default config file."""
        path = tmp_path / "prompt-composer.toml"

        result = runner.invoke(app, ["config", "--init", "--path", str(path)])

        assert result.exit_code == 0, result.output
        assert path.exists()
        assert "[assistant]" in path.read_text()

    def test_init_refuses_overwrite(self, tmp_path):
        """Test an existing file is left alone."""
        path = tmp_path / "prompt-composer.toml"
        path.write_text("# mine\n")

        result = runner.invoke(app, ["config", "--init", "--path", str(path)])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert path.read_text() == "# mine\n"

    def test_show(self, prompts_dir):
        """Test printing the effective configuration."""
        result = runner.invoke(app, ["--prompts-dir", str(prompts_dir), "config", "--show"])

        assert result.exit_code == 0, result.output
        assert str(prompts_dir) in result.output

    def test_bad_explicit_config(self, tmp_path):
        """Test an explicit unreadable config file is fatal."""
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.toml"), "aliases"])

        assert result.exit_code == EXIT_CONFIG_ERROR


def test_version():
    """Test --version output."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert "prompt-composer" in result.output
