"""CLI output formatting utilities."""

from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tubemind.core.models import AnalysisResult, GeneratedArticle, Source, VideoConcept

_SENTIMENT_STYLES = {
    "positive": "green",
    "neutral": "yellow",
    "negative": "red",
}


def display_analysis(analysis: AnalysisResult, console: Console) -> None:
    """Display the analysis dashboard."""
    style = _SENTIMENT_STYLES.get(analysis.sentiment.value, "white")
    console.print(
        Panel(
            Text(analysis.summary),
            title="Summary",
            subtitle=f"sentiment: [{style}]{analysis.sentiment.value}[/{style}]",
            border_style="blue",
        )
    )

    if analysis.themes:
        console.print(_bullet_table("Themes", analysis.themes))

    if analysis.educational_points:
        console.print(_bullet_table("Educational Points", analysis.educational_points))

    if analysis.keywords:
        console.print(Text.assemble(("Keywords: ", "bold"), ", ".join(analysis.keywords)))

    if analysis.sources:
        display_sources(analysis.sources, console)


def display_transcript(analysis: AnalysisResult, console: Console) -> None:
    """Display the full transcript."""
    console.print(
        Panel(Text(analysis.full_transcript or ""), title="Full Transcript", border_style="cyan")
    )


def display_sources(sources: list[Source], console: Console) -> None:
    """Display grounding sources in a table."""
    table = Table(title="Sources")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("URL", style="cyan", no_wrap=True, overflow="ellipsis")

    for i, source in enumerate(sources, 1):
        table.add_row(str(i), Text(source.title or "-"), Text(source.uri))

    console.print(table)


def display_article(article: GeneratedArticle, console: Console) -> None:
    """Display a generated article rendered as markdown."""
    console.print(Panel(Markdown(article.content), title=Text(article.title), border_style="green"))


def display_concept(concept: VideoConcept, console: Console) -> None:
    """Display a video concept."""
    outline = Table(show_header=False, box=None)
    outline.add_column(style="dim", width=4)
    outline.add_column()
    for i, step in enumerate(concept.outline, 1):
        outline.add_row(f"{i}.", Text(step))

    body = Group(
        Text.assemble(("Hook: ", "bold"), concept.hook),
        Text.assemble(("Target audience: ", "bold"), concept.target_audience),
        "",
        outline,
    )
    console.print(Panel(body, title=Text(concept.title), border_style="magenta"))


def display_notes(notes: str, console: Console) -> None:
    """Display notes rendered as markdown."""
    if not notes.strip():
        console.print("[yellow]No notes.[/yellow]")
        return
    console.print(Panel(Markdown(notes), title="Notes", border_style="white"))


def _bullet_table(title: str, items: list[str]) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column(style="dim", width=4)
    table.add_column()
    for i, item in enumerate(items, 1):
        table.add_row(str(i), Text(item))
    return table
