"""Markdown report generation for analysis sessions.

A report has YAML front matter with the video metadata followed by one
section per result the session holds.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from urllib.parse import parse_qs, urlparse

import yaml

from tubemind.core.errors import OutputError
from tubemind.core.models import AnalysisResult, VideoConcept
from tubemind.services.session import SessionState


def video_slug(url: str, max_length: int = 40) -> str:
    """Derive a filename-safe slug from a video URL.

    Uses the ``v`` query parameter when present (YouTube watch URLs),
    otherwise the last path segment, otherwise the host.
    """
    parsed = urlparse(url.strip())
    candidates = parse_qs(parsed.query).get("v", [])
    candidates += [segment for segment in parsed.path.split("/") if segment][-1:]
    candidates.append(parsed.netloc or url)

    for candidate in candidates:
        slug = re.sub(r"[^A-Za-z0-9_-]+", "-", candidate).strip("-").lower()
        if slug:
            return slug[:max_length].rstrip("-")
    return "video"


class ReportWriter:
    """Writes session results to markdown files."""

    def __init__(self, output_dir: Path) -> None:
        """
        Initialize the report writer.

        Args:
            output_dir: Directory to save reports in, created on first write
        """
        self.output_dir = output_dir

    def write(self, state: SessionState, generated_at: datetime | None = None) -> Path:
        """
        Write a report for a completed session.

        Args:
            state: Session holding an analysis
            generated_at: Report timestamp, now if None

        Returns:
            Path to the generated file

        Raises:
            OutputError: If there is nothing to write or the file cannot be written
        """
        if state.analysis is None:
            raise OutputError("No analysis to save")

        generated_at = generated_at or datetime.now()
        filename = f"{video_slug(state.url)}-{generated_at.strftime('%Y%m%d-%H%M%S')}.md"
        output_path = self.output_dir / filename

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_text(self.render(state, generated_at), encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write report file: {e}") from e

        return output_path

    def render(self, state: SessionState, generated_at: datetime) -> str:
        """Render the full markdown report for ``state``."""
        analysis = state.analysis
        if analysis is None:
            raise OutputError("No analysis to render")

        parts = [self._frontmatter(state.url, analysis, generated_at)]
        parts.append(f"## Summary\n\n{analysis.summary}")

        if analysis.educational_points:
            points = "\n".join(f"- {point}" for point in analysis.educational_points)
            parts.append(f"## Educational Points\n\n{points}")

        if analysis.full_transcript:
            parts.append(f"## Full Transcript\n\n{analysis.full_transcript}")

        if state.article is not None:
            # Demote the article's own headings below the section heading
            content = re.sub(r"^(#+) ", r"##\1 ", state.article.content, flags=re.MULTILINE)
            parts.append(f"## Article: {state.article.title}\n\n{content}")

        if state.concept is not None:
            parts.append(self._format_concept(state.concept))

        if state.notes.strip():
            parts.append(f"## Notes\n\n{state.notes.strip()}")

        return "\n\n".join(parts) + "\n"

    @staticmethod
    def _frontmatter(url: str, analysis: AnalysisResult, generated_at: datetime) -> str:
        data: dict[str, object] = {
            "url": url,
            "generated": generated_at.isoformat(timespec="seconds"),
            "sentiment": analysis.sentiment.value,
        }
        if analysis.themes:
            data["themes"] = analysis.themes
        if analysis.keywords:
            data["keywords"] = analysis.keywords
        if analysis.sources:
            data["sources"] = [{"title": s.title, "uri": s.uri} for s in analysis.sources]

        yaml_content = yaml.dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=80,
        )
        return f"---\n{yaml_content}---"

    @staticmethod
    def _format_concept(concept: VideoConcept) -> str:
        lines = [
            f"## Video Concept: {concept.title}",
            "",
            f"**Hook:** {concept.hook}",
            "",
            f"**Target audience:** {concept.target_audience}",
        ]
        if concept.outline:
            lines.append("")
            lines.extend(f"{i}. {step}" for i, step in enumerate(concept.outline, 1))
        return "\n".join(lines)
