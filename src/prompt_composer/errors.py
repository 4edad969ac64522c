"""
Custom exception hierarchy for Prompt Composer.

Provides structured error handling with error codes, recoverability hints,
and rich context for debugging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for categorizing failures."""

    # Template errors
    TEMPLATE_DIR_NOT_FOUND = "template_dir_not_found"
    TEMPLATE_NOT_FOUND = "template_not_found"
    TEMPLATE_UNREADABLE = "template_unreadable"
    TEMPLATE_ENCODING_ERROR = "template_encoding_error"

    # Composition errors
    UNKNOWN_OPERATION = "unknown_operation"
    MISSING_ARGUMENT = "missing_argument"

    # Configuration errors
    CONFIG_INVALID = "config_invalid"
    CONFIG_FILE_NOT_FOUND = "config_file_not_found"

    # Invocation errors
    INVOKE_PROGRAM_NOT_FOUND = "invoke_program_not_found"
    INVOKE_NONZERO_EXIT = "invoke_nonzero_exit"
    INVOKE_TIMEOUT = "invoke_timeout"
    INVOKE_OS_ERROR = "invoke_os_error"

    # General errors
    UNKNOWN = "unknown"


@dataclass
class PromptComposerError(Exception):
    """
    Base exception for all Prompt Composer errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the operation can be retried
        context: Additional context for debugging
        suggestion: Suggested action to resolve the error
    """

    message: str
    code: ErrorCode = ErrorCode.UNKNOWN
    recoverable: bool = False
    context: dict[str, Any] = field(default_factory=dict)
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"[{self.code.value}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"recoverable={self.recoverable}"
            f")"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "code": self.code.value,
            "recoverable": self.recoverable,
            "context": self.context,
            "suggestion": self.suggestion,
        }


@dataclass
class ConfigurationError(PromptComposerError):
    """Template directory, template file or config file is missing or invalid."""

    path: str | None = None
    template: str | None = None

    def __post_init__(self) -> None:
        if self.path:
            self.context["path"] = self.path
        if self.template:
            self.context["template"] = self.template


@dataclass
class InvocationError(PromptComposerError):
    """The external assistant program could not be run or exited non-zero."""

    program: str | None = None
    returncode: int | None = None
    stderr: str | None = None

    def __post_init__(self) -> None:
        if self.program:
            self.context["program"] = self.program
        if self.returncode is not None:
            self.context["returncode"] = self.returncode
        if self.stderr:
            self.context["stderr"] = self.stderr


# Factory functions for common errors
def template_dir_not_found(path: str) -> ConfigurationError:
    """Create error for a missing template directory."""
    return ConfigurationError(
        message=f"Template directory not found: {path}",
        code=ErrorCode.TEMPLATE_DIR_NOT_FOUND,
        path=path,
        suggestion="Set [templates].directory in prompt-composer.toml or pass --prompts-dir.",
    )


def template_not_found(template: str, path: str) -> ConfigurationError:
    """Create error for a missing template file."""
    return ConfigurationError(
        message=f"Template '{template}' not found: {path}",
        code=ErrorCode.TEMPLATE_NOT_FOUND,
        path=path,
        template=template,
        suggestion="Create the file or point the template name at an existing file.",
    )


def template_unreadable(template: str, path: str, reason: str) -> ConfigurationError:
    """Create error for a template that exists but cannot be read."""
    return ConfigurationError(
        message=f"Template '{template}' is unreadable: {reason}",
        code=ErrorCode.TEMPLATE_UNREADABLE,
        path=path,
        template=template,
        suggestion="Check file permissions and that the path is a regular file.",
    )


def template_encoding_error(template: str, path: str) -> ConfigurationError:
    """Create error for a template that is not valid UTF-8."""
    return ConfigurationError(
        message=f"Template '{template}' is not valid UTF-8 text",
        code=ErrorCode.TEMPLATE_ENCODING_ERROR,
        path=path,
        template=template,
        suggestion="Save the template as UTF-8.",
    )


def invalid_config(path: str, reason: str) -> ConfigurationError:
    """Create error for invalid configuration."""
    return ConfigurationError(
        message=f"Invalid configuration: {reason}",
        code=ErrorCode.CONFIG_INVALID,
        path=path,
        suggestion="Check the configuration file format and values.",
    )


def unknown_operation(operation: str, valid: list[str]) -> ConfigurationError:
    """Create error for an operation name the composer does not know."""
    return ConfigurationError(
        message=f"Unknown operation: {operation}",
        code=ErrorCode.UNKNOWN_OPERATION,
        context={"valid_operations": valid},
        suggestion=f"Use one of: {', '.join(valid)}.",
    )


def missing_argument(operation: str, argument: str) -> ConfigurationError:
    """Create error for an operation invoked without its required argument."""
    return ConfigurationError(
        message=f"Operation '{operation}' requires {argument}",
        code=ErrorCode.MISSING_ARGUMENT,
        context={"operation": operation},
    )


def program_not_found(program: str) -> InvocationError:
    """Create error for an assistant program missing from PATH."""
    return InvocationError(
        message=f"Assistant program not found: {program}",
        code=ErrorCode.INVOKE_PROGRAM_NOT_FOUND,
        program=program,
        suggestion="Install the assistant CLI or set [assistant].program / --program.",
    )


def program_failed(program: str, returncode: int, stderr: str | None = None) -> InvocationError:
    """Create error for an assistant program that exited non-zero."""
    message = f"{program} exited with status {returncode}"
    if stderr:
        message = f"{message}:\n{stderr}"
    return InvocationError(
        message=message,
        code=ErrorCode.INVOKE_NONZERO_EXIT,
        program=program,
        returncode=returncode,
        stderr=stderr,
    )


def program_timed_out(program: str, timeout: float) -> InvocationError:
    """Create error for an assistant program that exceeded its timeout."""
    return InvocationError(
        message=f"{program} did not finish within {timeout:g} seconds",
        code=ErrorCode.INVOKE_TIMEOUT,
        program=program,
        suggestion="Raise [assistant].timeout_seconds or set it to 0 to disable the timeout.",
    )
