"""
Command-line interface for Prompt Composer.

Provides commands for:
- create-pull-request: Compose the PR instruction and invoke the assistant
- commit: Invoke the assistant with the commit instructions
- review: Compose the review instruction for a PR and invoke the assistant
- show: Print a composed instruction without invoking anything
- templates: Check the configured template files
- aliases: Print shell aliases for the three operations
- config: Manage configuration
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from prompt_composer import __version__
from prompt_composer.composer import PromptComposer
from prompt_composer.config import (
    ComposerConfig,
    apply_env_overrides,
    load_config,
    save_default_config,
)
from prompt_composer.errors import (
    ConfigurationError,
    ErrorCode,
    InvocationError,
    PromptComposerError,
)
from prompt_composer.runner import AssistantRunner, DryRunRunner, Runner
from prompt_composer.schemas import Operation
from prompt_composer.template_loader import TemplateLoader

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if os.environ.get("PROMPT_COMPOSER_DEBUG") else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXIT_INVOCATION_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PROGRAM_NOT_FOUND = 127

# CLI app
app = typer.Typer(
    name="prompt-composer",
    help="Compose instruction templates and hand them to an AI coding assistant",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]prompt-composer[/bold] version {__version__}")
        raise typer.Exit()


def _report_error(error: PromptComposerError) -> None:
    if isinstance(error, InvocationError) and error.stderr:
        # Assistant diagnostics are passed through unwrapped
        err_console.print(
            f"[red]Error:[/red] {escape(error.program or 'assistant')} exited with status {error.returncode}"
        )
        typer.echo(error.stderr, err=True, nl=not error.stderr.endswith("\n"))
    else:
        err_console.print(f"[red]Error:[/red] {escape(error.message)}")
    if error.suggestion:
        err_console.print(f"[dim]{escape(error.suggestion)}[/dim]")


def exit_code_for(error: PromptComposerError) -> int:
    """Map an error to the process exit code."""
    if isinstance(error, ConfigurationError):
        return EXIT_CONFIG_ERROR
    if isinstance(error, InvocationError):
        if error.code == ErrorCode.INVOKE_NONZERO_EXIT and error.returncode and error.returncode > 0:
            return error.returncode
        if error.code == ErrorCode.INVOKE_PROGRAM_NOT_FOUND:
            return EXIT_PROGRAM_NOT_FOUND
    return EXIT_INVOCATION_ERROR


def _get_config(ctx: typer.Context) -> ComposerConfig:
    if isinstance(ctx.obj, ComposerConfig):
        return ctx.obj
    return apply_env_overrides(ComposerConfig.default())


def _execute(
    ctx: typer.Context,
    operation: Operation,
    argument: str | None,
    dry_run: bool,
    program: str | None,
) -> None:
    """Compose the instruction for an operation and hand it to the assistant."""
    cfg = _get_config(ctx).with_overrides(program=program)
    composer = PromptComposer(cfg)

    # Compose fully before touching the external program
    try:
        request = composer.build_request(operation, argument)
    except ConfigurationError as e:
        _report_error(e)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    runner: Runner
    if dry_run:
        runner = DryRunRunner()
        console.print(Panel(
            f"[bold]Operation:[/bold] {operation.value}\n"
            f"[bold]Command:[/bold] {escape(shlex.join([request.program, *request.args]))} <instruction>\n"
            f"[bold]Templates:[/bold] {', '.join(s.value for s in request.instruction.sources)}",
            title="Dry run",
        ))
        typer.echo(request.instruction.text)
    else:
        runner = AssistantRunner(
            timeout_seconds=cfg.assistant.timeout_seconds,
            capture_output=cfg.assistant.capture_output,
        )

    try:
        result = runner.run(request)
    except InvocationError as e:
        _report_error(e)
        raise typer.Exit(exit_code_for(e))

    logger.debug(f"{result.program} finished in {result.duration_seconds:.1f}s")
    if result.stdout:
        typer.echo(result.stdout, nl=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True,
                     help="Show version and exit"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
    prompts_dir: Annotated[
        Optional[Path],
        typer.Option("--prompts-dir", "-d", help="Directory holding the template files"),
    ] = None,
) -> None:
    """Prompt Composer - Drive an AI coding assistant with composed instructions."""
    try:
        cfg = load_config(config)
    except ConfigurationError as e:
        if config is not None:
            _report_error(e)
            raise typer.Exit(EXIT_CONFIG_ERROR)
        err_console.print(f"[yellow]Warning:[/yellow] {escape(e.message)}")
        cfg = ComposerConfig.default()

    cfg = apply_env_overrides(cfg)
    if prompts_dir is not None:
        cfg = cfg.with_overrides(prompts_dir=prompts_dir)
    ctx.obj = cfg


@app.command("create-pull-request")
def create_pull_request(
    ctx: typer.Context,
    reason: Annotated[str, typer.Argument(help="Why the change is being made")] = "",
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the instruction, do not invoke")] = False,
    program: Annotated[Optional[str], typer.Option("--program", "-p", help="Assistant program to invoke")] = None,
) -> None:
    """
    Create a pull request.

    Combines the pull-request, commit and review templates and fills in the reason.
    """
    _execute(ctx, Operation.CREATE_PULL_REQUEST, reason, dry_run, program)


@app.command()
def commit(
    ctx: typer.Context,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the instruction, do not invoke")] = False,
    program: Annotated[Optional[str], typer.Option("--program", "-p", help="Assistant program to invoke")] = None,
) -> None:
    """
    Commit staged work.

    Passes the commit template to the assistant unchanged.
    """
    _execute(ctx, Operation.COMMIT, None, dry_run, program)


@app.command()
def review(
    ctx: typer.Context,
    pull_request: Annotated[str, typer.Argument(help="PR number, URL or branch")],
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the instruction, do not invoke")] = False,
    program: Annotated[Optional[str], typer.Option("--program", "-p", help="Assistant program to invoke")] = None,
) -> None:
    """
    Review a pull request.

    Asks the assistant to fetch the PR with the GitHub CLI, then apply the review template.
    """
    _execute(ctx, Operation.REVIEW, pull_request, dry_run, program)


@app.command()
def show(
    ctx: typer.Context,
    operation: Annotated[Operation, typer.Argument(help="Operation to compose")],
    argument: Annotated[
        Optional[str],
        typer.Argument(help="Reason (create-pull-request) or PR reference (review)"),
    ] = None,
) -> None:
    """
    Print a composed instruction.

    Nothing is invoked; the text goes to stdout so it can be piped.
    """
    composer = PromptComposer(_get_config(ctx))
    try:
        instruction = composer.compose(operation, argument)
    except ConfigurationError as e:
        _report_error(e)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    typer.echo(instruction.text)


@app.command()
def templates(ctx: typer.Context) -> None:
    """
    Check the configured template files.

    Exits non-zero if any template is missing.
    """
    cfg = _get_config(ctx)
    loader = TemplateLoader(
        directory=cfg.templates.resolved_directory(),
        file_names=cfg.templates.file_names(),
    )
    statuses = loader.status(cfg.templates.placeholder)

    table = Table(title=f"Templates in {loader.directory}")
    table.add_column("Template", style="cyan")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Size", justify="right")
    table.add_column("Placeholder", justify="center")

    for status in statuses:
        table.add_row(
            status.name.value,
            Path(status.path).name,
            "[green]found[/green]" if status.exists else "[red]missing[/red]",
            f"{status.size_bytes:,}" if status.exists else "-",
            "✓" if status.has_placeholder else "",
        )

    console.print(table)

    missing = [s for s in statuses if not s.exists]
    if missing:
        console.print(f"[red]✗[/red] {len(missing)} template(s) missing")
        raise typer.Exit(EXIT_CONFIG_ERROR)


@app.command()
def aliases(
    ctx: typer.Context,
    prefix: Annotated[str, typer.Option("--prefix", help="Alias name prefix")] = "claude",
    executable: Annotated[str, typer.Option("--executable", help="Command the aliases call")] = "prompt-composer",
) -> None:
    """
    Print shell aliases for the three operations.

    Add the output to ~/.zshrc or ~/.bashrc.
    """
    base = [executable]
    if ctx.parent is not None and ctx.parent.params.get("prompts_dir") is not None:
        base += ["--prompts-dir", str(ctx.parent.params["prompts_dir"])]

    definitions = {
        f"{prefix}_pr": [*base, Operation.CREATE_PULL_REQUEST.value],
        f"{prefix}_commit": [*base, Operation.COMMIT.value],
        f"{prefix}_review": [*base, Operation.REVIEW.value],
    }
    for name, command in definitions.items():
        typer.echo(f"alias {name}={shlex.quote(shlex.join(command))}")


@app.command("config")
def config_cmd(
    ctx: typer.Context,
    init_config: Annotated[bool, typer.Option("--init", help="Create default config file")] = False,
    show_config: Annotated[bool, typer.Option("--show", help="Show current configuration")] = False,
    path: Annotated[Optional[Path], typer.Option("--path", help="Config file path for --init")] = None,
) -> None:
    """
    Manage configuration.

    Create or view configuration files.
    """
    if init_config:
        target = path or Path("prompt-composer.toml")
        if target.exists():
            err_console.print(f"[red]Error:[/red] File already exists: {target}")
            raise typer.Exit(EXIT_CONFIG_ERROR)
        config_path = save_default_config(target)
        console.print(f"[green]✓[/green] Created config file: {config_path}")
        console.print("[dim]Edit this file to customize settings.[/dim]")
        return

    if show_config:
        cfg = _get_config(ctx)
        console.print("[bold]Current Configuration[/bold]")
        console.print()
        typer.echo(cfg.model_dump_json(indent=2))
        return

    console.print("Use --init to create a config file or --show to view current config.")
    console.print()
    console.print("[dim]Config is searched in:[/dim]")
    console.print("  • ./prompt-composer.toml")
    console.print("  • ./.prompt-composer.toml")
    console.print("  • ./pyproject.toml \\[tool.prompt-composer]")


if __name__ == "__main__":
    app()
