"""
Pydantic schemas for Prompt Composer data models.

Template documents, composed instructions and invocation records are
defined here so every module shares the same validated, immutable shapes.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TemplateName(str, Enum):
    """Logical names of the instruction templates."""

    PULL_REQUEST = "pull-request"
    COMMIT = "commit"
    REVIEW = "review"


class Operation(str, Enum):
    """Operations the composer can build instructions for."""

    CREATE_PULL_REQUEST = "create-pull-request"
    COMMIT = "commit"
    REVIEW = "review"


class TemplateDocument(BaseModel):
    """A template file loaded from the template directory."""

    model_config = ConfigDict(frozen=True)

    name: TemplateName
    path: str = Field(..., description="Absolute path the content was read from")
    content: str = Field(..., description="Raw text content")


class TemplateStatus(BaseModel):
    """Presence check for one configured template file."""

    name: TemplateName
    path: str
    exists: bool
    size_bytes: int = Field(default=0, ge=0)
    has_placeholder: bool = False


class ComposedInstruction(BaseModel):
    """Instruction text built for one operation."""

    model_config = ConfigDict(frozen=True)

    operation: Operation
    text: str
    sources: tuple[TemplateName, ...] = Field(
        default=(), description="Templates used, in composition order"
    )


class InvocationRequest(BaseModel):
    """A composed instruction paired with the program that receives it."""

    model_config = ConfigDict(frozen=True)

    program: str = Field(..., min_length=1)
    args: tuple[str, ...] = ()
    instruction: ComposedInstruction

    def command(self) -> list[str]:
        """Argument vector with the instruction as the final argument."""
        return [self.program, *self.args, self.instruction.text]


class InvocationResult(BaseModel):
    """Outcome of running the assistant program."""

    program: str
    returncode: int
    stdout: str | None = None
    stderr: str | None = None
    duration_seconds: float = Field(default=0.0, ge=0)
    dry_run: bool = False
