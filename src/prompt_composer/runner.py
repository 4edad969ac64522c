"""
External assistant invocation.

Runs the assistant program with the composed instruction as its final
argument. The command is executed without a shell, so the instruction
reaches the program byte-for-byte. Failures are never retried: the
assistant may already have committed or opened a pull request.
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Protocol

from prompt_composer.errors import (
    ErrorCode,
    InvocationError,
    program_failed,
    program_not_found,
    program_timed_out,
)
from prompt_composer.schemas import InvocationRequest, InvocationResult

logger = logging.getLogger(__name__)


class Runner(Protocol):
    """Protocol for invocation runners."""

    def run(self, request: InvocationRequest) -> InvocationResult:
        ...


class AssistantRunner:
    """
    Runs the assistant program as a child process.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        capture_output: bool = False,
        cwd: Path | None = None,
    ):
        """
        Initialize the runner.

        Args:
            timeout_seconds: Kill the program after this long (None or 0 waits forever)
            capture_output: Capture stdout/stderr instead of inheriting the terminal
            cwd: Working directory for the program (default: current directory)
        """
        self.timeout_seconds = timeout_seconds or None
        self.capture_output = capture_output
        self.cwd = cwd

    def run(self, request: InvocationRequest) -> InvocationResult:
        """
        Execute the request.

        Args:
            request: Program and composed instruction

        Returns:
            InvocationResult for a zero exit status

        Raises:
            InvocationError: If the program is missing, times out or exits non-zero
        """
        command = request.command()
        logger.info(
            f"Invoking {request.program} for {request.instruction.operation.value} "
            f"({len(request.instruction.text)} chars)"
        )

        start = time.monotonic()
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=self.capture_output,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError:
            raise program_not_found(request.program)
        except subprocess.TimeoutExpired:
            raise program_timed_out(request.program, self.timeout_seconds or 0)
        except OSError as e:
            raise InvocationError(
                message=f"Failed to start {request.program}: {e}",
                code=ErrorCode.INVOKE_OS_ERROR,
                program=request.program,
            )
        duration = time.monotonic() - start

        if completed.returncode != 0:
            logger.warning(f"{request.program} exited with status {completed.returncode}")
            raise program_failed(request.program, completed.returncode, completed.stderr or None)

        return InvocationResult(
            program=request.program,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            duration_seconds=duration,
        )


class DryRunRunner:
    """
    Runner that records requests without executing anything.
    """

    def __init__(self) -> None:
        self.requests: list[InvocationRequest] = []

    def run(self, request: InvocationRequest) -> InvocationResult:
        """Record the request and report success."""
        self.requests.append(request)
        logger.info(f"Dry run: would invoke {request.program}")
        return InvocationResult(program=request.program, returncode=0, dry_run=True)
