"""CLI interface for StoryFold."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from dotenv import load_dotenv
import typer

# Load environment variables from .env file
load_dotenv()
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from storyfold.exceptions import StoryFoldError
from storyfold.generation import GenerationPipeline
from storyfold.llm import LLMConfig
from storyfold.notify import ConsoleNotifier
from storyfold.refinement import (
    AssessStage,
    RefinementSession,
    RefinementStateFile,
    RefinementStateStore,
    ReviseStage,
)
from storyfold.storage import ContentStore, ProjectLayout

# Initialize CLI app
app = typer.Typer(
    name="storyfold",
    help="LLM-assisted writing pipeline for children's content",
    add_completion=False,
)
refine_app = typer.Typer(help="Writer-supervised improvement of the brief or final piece")
app.add_typer(refine_app, name="refine")

console = Console()

PROJECT_OPTION = typer.Option(
    Path("."), "--project", "-p", help="Project root (holds the .storyfold directory)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


def setup_logging(verbose: bool = False) -> None:
    """Set up logging with rich formatting."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def build_pipeline(project: Path) -> GenerationPipeline:
    content_store = ContentStore(ProjectLayout(project))
    return GenerationPipeline(content_store, LLMConfig.from_env(), ConsoleNotifier())


def build_session(project: Path) -> RefinementSession:
    """Wire a refinement session for a project from environment configuration."""
    layout = ProjectLayout(project)
    content_store = ContentStore(layout)
    config = LLMConfig.from_env()
    notifier = ConsoleNotifier()
    return RefinementSession(
        store=RefinementStateStore.for_project(layout),
        content_store=content_store,
        assess_stage=AssessStage(config, notifier),
        revise_stage=ReviseStage(content_store, config, notifier),
        notifier=notifier,
    )


def run_command(
    title: str, action: Callable[[], Awaitable[Any]], verbose: bool
) -> Any:
    """Run an async action, printing failures the way every command does."""
    try:
        return asyncio.run(action())
    except KeyboardInterrupt:
        console.print(f"\n[yellow]{title} cancelled by user[/yellow]")
        sys.exit(1)
    except StoryFoldError as e:
        console.print(f"\n[red]{title} failed: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]{title} failed: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


def display_text(title: str, text: Optional[str]) -> None:
    """Show a generated document."""
    if not text:
        console.print(f"[yellow]No {title.lower()} was produced.[/yellow]")
        return
    console.print(Panel(Text(text), title=title, border_style="green"))


def display_state(data: Optional[RefinementStateFile]) -> None:
    """Display the refinement state and any pending suggestions."""
    if data is None:
        console.print("[yellow]No refinement in progress.[/yellow]")
        return

    state = data.state
    summary = f"""
[bold]Phase:[/bold] {state.phase.value}
[bold]Round:[/bold] {state.round}{f' of {state.max_rounds}' if state.max_rounds else ''}
[bold]Mode:[/bold] {state.mode.value}
[bold]Last Assessed:[/bold] {state.last_assessed_at or 'never'}
[bold]Last Revised:[/bold] {state.last_revised_at or 'never'}
[bold]Decided Rounds:[/bold] {len(data.history)}
"""
    console.print(Panel(summary, title="Refinement State", border_style="blue"))

    if not data.is_open:
        return
    suggestions = data.pending_suggestions()
    if not suggestions:
        console.print("[green]The model found nothing to improve this round.[/green]")
        return

    table = Table(title=f"Round {data.current_round.round} Suggestions")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Severity", style="yellow")
    table.add_column("Summary", style="white")

    for s in suggestions:
        table.add_row(
            s.id,
            s.type.value,
            s.severity.value if s.severity else "-",
            escape(s.summary) if not s.detail else f"{escape(s.summary)}\n[dim]{escape(s.detail)}[/dim]",
        )

    console.print(table)
    console.print(
        "\n[dim]Apply with 'storyfold refine apply PHASE [--accept ID ...]', "
        "or discard with 'storyfold refine reject PHASE'.[/dim]"
    )


@app.command()
def requirements(
    text: str = typer.Argument(..., help="Rough requirements for the piece"),
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Turn rough requirements into a writing brief.

    Example:
        storyfold requirements "a bedtime story about a brave snail, ages 5-7"
    """
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Writing Brief", run_command("Brief", lambda: pipeline.requirements(text), verbose))


@app.command()
def outline(project: Path = PROJECT_OPTION, verbose: bool = VERBOSE_OPTION) -> None:
    """Produce the annotated outline from the brief."""
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Annotated Outline", run_command("Outline", pipeline.outline, verbose))


@app.command()
def sample(project: Path = PROJECT_OPTION, verbose: bool = VERBOSE_OPTION) -> None:
    """Draft a sample passage from the brief and outline."""
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Sample Passage", run_command("Sample", pipeline.sample, verbose))


@app.command()
def final(project: Path = PROJECT_OPTION, verbose: bool = VERBOSE_OPTION) -> None:
    """Write the finished piece from the brief, outline and sample."""
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Final Piece", run_command("Final piece", pipeline.final, verbose))


@app.command()
def review(project: Path = PROJECT_OPTION, verbose: bool = VERBOSE_OPTION) -> None:
    """Review the final piece from several perspectives."""
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Review", run_command("Review", pipeline.review, verbose))


@app.command("age-check")
def age_check(project: Path = PROJECT_OPTION, verbose: bool = VERBOSE_OPTION) -> None:
    """Check the final piece for age-appropriateness and safety."""
    setup_logging(verbose)
    pipeline = build_pipeline(project)
    display_text("Age Check", run_command("Age check", pipeline.age_check, verbose))


@app.command()
def config() -> None:
    """
    Show the resolved LLM configuration.

    API keys are masked.
    """
    try:
        resolved = LLMConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        sys.exit(1)

    table = Table(title="LLM Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    for key, value in resolved.masked_summary().items():
        table.add_row(key, str(value))
    console.print(table)


@refine_app.command("assess")
def refine_assess(
    phase: str = typer.Argument(..., help="Phase to assess: brief or final"),
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Ask the model for improvement suggestions and open a new round.

    Example:
        storyfold refine assess final
    """
    setup_logging(verbose)
    session = build_session(project)

    data = run_command("Assessment", lambda: session.start(phase), verbose)
    if data is not None:
        display_state(data)


@refine_app.command("apply")
def refine_apply(
    phase: str = typer.Argument(..., help="Phase to revise: brief or final"),
    accept: Optional[list[str]] = typer.Option(
        None, "--accept", "-a", help="Suggestion ID to apply (repeatable); default all"
    ),
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """
    Revise the content with the open round's suggestions.

    Example:
        storyfold refine apply final --accept 1 --accept 3
    """
    setup_logging(verbose)
    session = build_session(project)
    accepted_ids = accept or None

    revised = run_command(
        "Revision", lambda: session.apply(phase, accepted_ids), verbose
    )
    if revised is not None:
        display_text("Revised", revised)


@refine_app.command("reject")
def refine_reject(
    phase: str = typer.Argument(..., help="Phase whose suggestions to discard"),
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Discard the open round's suggestions without revising."""
    setup_logging(verbose)
    session = build_session(project)
    try:
        data = session.reject(phase)
    except StoryFoldError as e:
        console.print(f"[red]Reject failed: {e}[/red]")
        sys.exit(1)

    if data is None:
        console.print("[yellow]No refinement in progress for that phase.[/yellow]")
    else:
        console.print("[green]Suggestions discarded.[/green]")


@refine_app.command("end")
def refine_end(
    phase: str = typer.Argument(..., help="Phase to stop refining"),
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Stop refining; any open round is closed without revising."""
    setup_logging(verbose)
    session = build_session(project)
    try:
        data = session.end(phase)
    except StoryFoldError as e:
        console.print(f"[red]Ending refinement failed: {e}[/red]")
        sys.exit(1)

    if data is None:
        console.print("[yellow]No refinement in progress for that phase.[/yellow]")
    else:
        console.print(f"[green]Refinement of '{data.state.phase.value}' ended after {data.state.round} round(s).[/green]")


@refine_app.command("status")
def refine_status(
    project: Path = PROJECT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the refinement state and pending suggestions."""
    setup_logging(verbose)
    display_state(build_session(project).status())


@app.callback()
def main():
    """
    StoryFold

    Generate children's stories and articles step by step, from rough
    requirements to a reviewed final piece, and refine the brief or the
    final piece in supervised rounds.
    """
    pass


if __name__ == "__main__":
    app()
