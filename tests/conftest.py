"""Shared fixtures for Prompt Composer tests."""

from pathlib import Path

import pytest

from prompt_composer.config import ComposerConfig

PULL_REQUEST_TEXT = "Reason: <REASON>\nDone."
COMMIT_TEXT = "Write a conventional commit message.\nStage only related files.\n"
REVIEW_TEXT = "Check correctness first.\nThen style.\n"


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    """Create a template directory with the three default template files."""
    directory = tmp_path / "system-prompts"
    directory.mkdir()
    (directory / "PullRequest.md").write_text(PULL_REQUEST_TEXT)
    (directory / "Commit.md").write_text(COMMIT_TEXT)
    (directory / "ReviewPR.md").write_text(REVIEW_TEXT)
    return directory


@pytest.fixture
def config(prompts_dir: Path) -> ComposerConfig:
    """Configuration pointing at the fixture template directory."""
    return ComposerConfig.default().with_overrides(prompts_dir=prompts_dir)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of the tests."""
    monkeypatch.delenv("PROMPT_COMPOSER_PROMPTS_DIR", raising=False)
    monkeypatch.delenv("PROMPT_COMPOSER_PROGRAM", raising=False)
