"""Command-line interface for tubemind."""

from __future__ import annotations

import asyncio
import sys
import warnings
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from tubemind.cli.output import (
    display_analysis,
    display_article,
    display_concept,
    display_notes,
    display_transcript,
)
from tubemind.core.config import Config, load_config
from tubemind.core.errors import MalformedOutputWarning, TubemindError
from tubemind.core.models import AppState, TabView
from tubemind.core.prompts import (
    GLOBAL_PROMPTS_PATH,
    LOCAL_PROMPTS_PATH,
    Prompts,
    generate_default_prompts_markdown,
    load_prompts,
)
from tubemind.services.analysis import AnalysisService
from tubemind.services.content import ContentService
from tubemind.services.gateway import GeminiGateway
from tubemind.services.output import ReportWriter
from tubemind.services.session import SessionController, SessionState, Task

console = Console()
error_console = Console(stderr=True)

INTERACTIVE_ACTIONS = {
    "d": "dashboard",
    "t": "transcript",
    "a": "article",
    "c": "concept",
    "n": "notes",
    "s": "save",
    "r": "reset",
    "q": "quit",
}


def build_controller(config: Config, prompts: Prompts) -> SessionController:
    """Wire the gateway and services for a new session."""
    gateway = GeminiGateway.from_config(config)
    return SessionController(
        analysis_service=AnalysisService(
            gateway,
            prompts=prompts,
            temperature=config.model.analysis_temperature,
        ),
        content_service=ContentService(
            gateway,
            prompts=prompts,
            context_limit=config.content.context_limit,
            notes_context_limit=config.content.notes_context_limit,
        ),
    )


def _configure_warnings(verbose: bool) -> None:
    # Recovered model output only matters when diagnosing prompts.
    warnings.simplefilter("default" if verbose else "ignore", MalformedOutputWarning)


def _report_task_error(state: SessionState, task: Task) -> None:
    message = state.task_errors.get(task)
    if message:
        error_console.print(f"[red]Error:[/red] {task} failed: {escape(message)}")


def _show_tab(state: SessionState) -> None:
    """Display the active view of a completed session."""
    if state.analysis is None:
        return
    if state.active_tab is TabView.DASHBOARD:
        display_analysis(state.analysis, console)
    elif state.active_tab is TabView.ARTICLE and state.article is not None:
        display_article(state.article, console)
    elif state.active_tab is TabView.CONCEPT and state.concept is not None:
        display_concept(state.concept, console)
    elif state.active_tab is TabView.NOTES:
        display_notes(state.notes, console)


@click.group()
@click.version_option(package_name="tubemind")
def main() -> None:
    """tubemind - Video analysis and content generation with Gemini.

    Analyzes a video from its URL with search-grounded Gemini requests, then
    writes articles, video concepts and refined notes from the analysis.
    """
    pass


@main.command()
@click.argument("url")
@click.option("--article", is_flag=True, help="Also write a long-form article")
@click.option("--concept", is_flag=True, help="Also design a new video concept")
@click.option("--notes", "notes", default=None, help="Notes to refine using the analysis")
@click.option("--transcript", is_flag=True, help="Show the full transcript")
@click.option("--save", is_flag=True, help="Save a markdown report")
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False),
    help="Report directory (default: from config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show warnings about malformed model output")
def analyze(
    url: str,
    article: bool,
    concept: bool,
    notes: str | None,
    transcript: bool,
    save: bool,
    output_dir: str | None,
    verbose: bool,
) -> None:
    """Analyze a video and optionally derive content from it.

    Example: tubemind analyze "https://youtube.com/watch?v=abc" --article
    """
    _configure_warnings(verbose)

    try:
        config = load_config()
        controller = build_controller(config, load_prompts())
    except TubemindError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    async def run() -> SessionState:
        with console.status("Analyzing video..."):
            state = await controller.start_analysis(url)
        if state.app_state is not AppState.COMPLETE:
            return state

        if article:
            with console.status("Writing article..."):
                await controller.generate_article()
        if concept:
            with console.status("Designing video concept..."):
                await controller.generate_concept()
        if notes is not None:
            with console.status("Refining notes..."):
                await controller.refine_notes(notes)
        return controller.state

    state = asyncio.run(run())

    if state.app_state is not AppState.COMPLETE or state.analysis is None:
        message = state.message or "Analysis did not complete"
        error_console.print(f"[red]Error:[/red] {escape(message)}")
        sys.exit(1)

    display_analysis(state.analysis, console)
    if transcript:
        display_transcript(state.analysis, console)
    if state.article is not None:
        display_article(state.article, console)
        _report_task_error(state, Task.ARTICLE)
    if state.concept is not None:
        display_concept(state.concept, console)
        _report_task_error(state, Task.CONCEPT)
    if notes is not None:
        display_notes(state.notes, console)
        _report_task_error(state, Task.NOTES)

    if save:
        writer = ReportWriter(Path(output_dir) if output_dir else config.get_output_dir())
        try:
            path = writer.write(state)
        except TubemindError as e:
            error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            sys.exit(1)
        console.print(f"\n[green]Report saved to:[/green] {path}")


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Show warnings about malformed model output")
def interactive(verbose: bool) -> None:
    """Start an interactive analysis session.

    Prompts for a video URL, then offers the dashboard, transcript, article,
    concept and notes views until you quit.
    """
    _configure_warnings(verbose)

    try:
        config = load_config()
        controller = build_controller(config, load_prompts())
    except TubemindError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    asyncio.run(_interactive_session(controller, config))


async def _interactive_session(controller: SessionController, config: Config) -> None:
    menu = "  ".join(f"[{key}] {name}" for key, name in INTERACTIVE_ACTIONS.items())

    while True:
        if controller.state.app_state is not AppState.COMPLETE:
            url = click.prompt("Video URL (empty to quit)", default="", show_default=False)
            if not url.strip():
                return
            with console.status("Analyzing video..."):
                state = await controller.start_analysis(url)
            if state.app_state is AppState.COMPLETE:
                _show_tab(state)
            else:
                error_console.print(f"[red]Error:[/red] {escape(state.message or '')}")
                controller.reset()
            continue

        click.echo(menu)
        choice = click.prompt(
            "Action",
            type=click.Choice(list(INTERACTIVE_ACTIONS)),
            show_choices=False,
        )
        action = INTERACTIVE_ACTIONS[choice]

        if action == "quit":
            return
        if action == "reset":
            controller.reset()
        elif action == "dashboard":
            _show_tab(controller.select_tab(TabView.DASHBOARD))
        elif action == "transcript":
            analysis = controller.state.analysis
            if analysis is not None:
                display_transcript(analysis, console)
        elif action == "article":
            with console.status("Writing article..."):
                state = await controller.generate_article()
            _show_tab(state)
            _report_task_error(state, Task.ARTICLE)
        elif action == "concept":
            with console.status("Designing video concept..."):
                state = await controller.generate_concept()
            _show_tab(state)
            _report_task_error(state, Task.CONCEPT)
        elif action == "notes":
            notes = click.prompt("Notes", default=controller.state.notes or "", show_default=False)
            controller.select_tab(TabView.NOTES)
            with console.status("Refining notes..."):
                state = await controller.refine_notes(notes)
            _show_tab(state)
            _report_task_error(state, Task.NOTES)
        elif action == "save":
            try:
                path = ReportWriter(config.get_output_dir()).write(controller.state)
            except TubemindError as e:
                error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            else:
                console.print(f"[green]Report saved to:[/green] {path}")


@main.command("init-prompts")
@click.option("--global", "use_global", is_flag=True, help="Write to ~/.tubemind/prompts.md")
@click.option("--force", is_flag=True, help="Overwrite an existing prompts file")
def init_prompts(use_global: bool, force: bool) -> None:
    """Write the built-in prompts to an editable markdown file."""
    path = GLOBAL_PROMPTS_PATH if use_global else LOCAL_PROMPTS_PATH

    if path.exists() and not force:
        click.echo(f"Error: {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generate_default_prompts_markdown(), encoding="utf-8")
    except OSError as e:
        click.echo(f"Error: could not write {path}: {e}", err=True)
        sys.exit(1)

    click.echo(f"Prompts written to {path}")


if __name__ == "__main__":
    main()
