"""
Configuration file support for Prompt Composer.

Supports TOML configuration files (prompt-composer.toml) for persistent
settings, with environment variable overrides for the template directory
and the assistant program.
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from prompt_composer.errors import ConfigurationError, ErrorCode, invalid_config
from prompt_composer.schemas import TemplateName
from prompt_composer.templates import DEFAULT_PLACEHOLDER

# Default config file names (searched in order)
CONFIG_FILE_NAMES = [
    "prompt-composer.toml",
    ".prompt-composer.toml",
    "pyproject.toml",  # Will look for [tool.prompt-composer] section
]

ENV_PROMPTS_DIR = "PROMPT_COMPOSER_PROMPTS_DIR"
ENV_PROGRAM = "PROMPT_COMPOSER_PROGRAM"


class TemplateSettings(BaseModel):
    """Where templates live and what they are called."""

    directory: str = Field(default="~/system-prompts")
    pull_request: str = Field(default="PullRequest.md", min_length=1)
    commit: str = Field(default="Commit.md", min_length=1)
    review: str = Field(default="ReviewPR.md", min_length=1)
    placeholder: str = Field(default=DEFAULT_PLACEHOLDER, min_length=1)

    def resolved_directory(self) -> Path:
        """Template directory with ~ and environment variables expanded."""
        return Path(os.path.expandvars(self.directory)).expanduser()

    def file_names(self) -> dict[TemplateName, str]:
        """Map each logical template to its file name."""
        return {
            TemplateName.PULL_REQUEST: self.pull_request,
            TemplateName.COMMIT: self.commit,
            TemplateName.REVIEW: self.review,
        }


class AssistantSettings(BaseModel):
    """External assistant program settings."""

    program: str = Field(default="claude", min_length=1)
    extra_args: list[str] = Field(default_factory=list)
    timeout_seconds: float = Field(default=0.0, ge=0)  # 0 disables the timeout
    capture_output: bool = Field(default=False)

    @field_validator("program")
    @classmethod
    def strip_program(cls, v: str) -> str:
        """Reject whitespace-only program names."""
        v = v.strip()
        if not v:
            raise ValueError("program must not be blank")
        return v


class ComposerConfig(BaseModel):
    """Complete Prompt Composer configuration."""

    templates: TemplateSettings = Field(default_factory=TemplateSettings)
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)

    @classmethod
    def default(cls) -> "ComposerConfig":
        """Create config with all defaults."""
        return cls()

    def with_overrides(
        self,
        prompts_dir: str | Path | None = None,
        program: str | None = None,
    ) -> "ComposerConfig":
        """Return a copy with the given values replaced."""
        templates = self.templates
        assistant = self.assistant
        if prompts_dir is not None:
            templates = templates.model_copy(update={"directory": str(prompts_dir)})
        if program:
            assistant = assistant.model_copy(update={"program": program})
        return self.model_copy(update={"templates": templates, "assistant": assistant})


def _parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML content."""
    try:
        import tomllib
    except ImportError:
        # Python < 3.11 fallback
        import tomli as tomllib
    return tomllib.loads(content)


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Find configuration file by searching up from start directory.

    Args:
        start_dir: Directory to start search (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.is_file():
                return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def apply_env_overrides(config: ComposerConfig, environ: dict[str, str] | None = None) -> ComposerConfig:
    """Apply PROMPT_COMPOSER_* environment variables on top of a config."""
    if environ is None:
        environ = dict(os.environ)
    return config.with_overrides(
        prompts_dir=environ.get(ENV_PROMPTS_DIR) or None,
        program=environ.get(ENV_PROGRAM) or None,
    )


def load_config(
    config_path: Path | None = None,
    start_dir: Path | None = None,
) -> ComposerConfig:
    """
    Load configuration from file.

    Args:
        config_path: Explicit path to config file (optional)
        start_dir: Directory to start the search from when no path is given

    Returns:
        ComposerConfig with loaded settings (environment overrides not applied)

    Raises:
        ConfigurationError: If config file is missing or invalid
    """
    if config_path is None:
        config_path = _find_config_file(start_dir)

    if config_path is None:
        return ComposerConfig.default()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            message=f"Failed to read config file: {e}",
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            path=str(config_path),
        )

    try:
        data = _parse_toml(content)
    except Exception as e:
        raise invalid_config(str(config_path), f"cannot parse TOML: {e}")

    # Handle pyproject.toml (look for [tool.prompt-composer] section)
    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("prompt-composer", {})
        if not data:
            return ComposerConfig.default()

    try:
        return ComposerConfig.model_validate(data)
    except Exception as e:
        raise invalid_config(str(config_path), str(e))


def generate_default_config() -> str:
    """
    Generate default configuration file content.

    Returns:
        TOML string with default configuration
    """
    return f'''# Prompt Composer Configuration

[templates]
directory = "~/system-prompts"    # Overridden by ${ENV_PROMPTS_DIR}
pull_request = "PullRequest.md"
commit = "Commit.md"
review = "ReviewPR.md"
placeholder = "{DEFAULT_PLACEHOLDER}"          # Replaced with the create-pull-request reason

[assistant]
program = "claude"                # Overridden by ${ENV_PROGRAM}
extra_args = []                   # Inserted before the instruction argument
timeout_seconds = 0               # 0 disables the timeout
capture_output = false            # true captures stdout/stderr instead of streaming
'''


def save_default_config(path: Path | None = None) -> Path:
    """
    Save default configuration to file.

    Args:
        path: Path to save config (default: ./prompt-composer.toml)

    Returns:
        Path where config was saved
    """
    if path is None:
        path = Path("prompt-composer.toml")

    path.write_text(generate_default_config(), encoding="utf-8")
    return path
