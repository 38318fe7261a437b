"""Prompt management for tubemind.

Prompts are built-in defaults that can be overridden from an editable
markdown file. Each H1 section of the file replaces one prompt.

Templates use ``{url}``, ``{context}`` and ``{notes}`` placeholders. They are
substituted literally, so the JSON examples inside the templates need no
escaping.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, fields
from pathlib import Path

# Default prompts file paths (same pattern as config)
LOCAL_PROMPTS_PATH = Path(".tubemind/prompts.md")
GLOBAL_PROMPTS_PATH = Path.home() / ".tubemind" / "prompts.md"

DEFAULT_ANALYSIS_PROMPT = """TASK: Perform a DEEP, FORENSIC analysis of this YouTube video: {url}

ROLE: You are an Elite Persian Content Strategist and Lead Educator. Extract every \
practical lesson and hidden meaning from the content instead of merely summarizing it.

STRATEGY:
1. INVESTIGATE: Use Google Search to find the video title, channel name, description, \
comments, and any transcripts or blog posts discussing this video.
2. RECONSTRUCT: If a transcript is found, analyze it deeply. If no transcript is found, \
do not fail: use the title and context to reconstruct the most probable content of the \
video, as a masterclass on its topic.
3. OUTPUT (IN PERSIAN / FARSI ONLY):
   - Summary: comprehensive, at least 300 words, covering the why, how and what.
   - Educational Points: specific, actionable steps, no generic advice.
   - Full Transcript: a long-form narrative of at least 1000 words that reads like the \
complete script of the video.

OUTPUT JSON STRUCTURE:
{
  "summary": "Full detailed professional summary in Persian...",
  "themes": ["Theme 1", "Theme 2", "Theme 3", "Theme 4", "Theme 5"],
  "educationalPoints": ["Actionable point 1", "Actionable point 2", "Actionable point 3"],
  "sentiment": "positive" | "neutral" | "negative",
  "keywords": ["tag1", "tag2", "tag3", "tag4", "tag5"],
  "fullTranscript": "A long, lecture-style text covering the subject in depth (1000+ words) in Persian."
}"""

DEFAULT_ANALYSIS_SYSTEM_INSTRUCTION = """You are an expert AI investigator. You never refuse \
a request because you cannot watch a video. You always use search grounding to find the \
context and then write a professional analysis based on the topic. Output must be purely JSON."""

DEFAULT_ARTICLE_PROMPT = """Write a professional, SEO-optimized blog post in Persian based on \
this video context.

Structure:
1. Catchy title as a level-1 Markdown heading
2. Engaging introduction
3. Deep-dive sections as level-2 headings
4. Practical steps as bullet points
5. Conclusion

Length: long and detailed (1500 words target).

Context: {context}"""

DEFAULT_ARTICLE_SYSTEM_INSTRUCTION = "You are a professional Persian content writer and SEO expert."

DEFAULT_CONCEPT_PROMPT = """Based on this deep analysis, create a viral, high-retention \
YouTube video concept in Persian.

Context: {context}

The concept must be better than the original: more engaging and more structured.

Output JSON only."""

DEFAULT_NOTES_PROMPT = """User notes (Persian): "{notes}"
Video context: "{context}"

Refine these notes into a clean, structured Persian markdown list. Add relevant details \
from the context where a note is brief."""

# H1 section titles in the prompts markdown file, mapped to Prompts fields
SECTION_TITLES = {
    "analysis": "Video Analysis",
    "analysis_system": "Video Analysis System Instruction",
    "article": "Article",
    "article_system": "Article System Instruction",
    "concept": "Video Concept",
    "notes": "Notes Refinement",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

# Placeholders a custom template must keep to be usable
REQUIRED_PLACEHOLDERS = {
    "analysis": ("{url}",),
    "article": ("{context}",),
    "concept": ("{context}",),
    "notes": ("{notes}", "{context}"),
}


@dataclass(frozen=True)
class Prompts:
    """Container for all prompts sent to the generative model."""

    analysis: str = DEFAULT_ANALYSIS_PROMPT
    analysis_system: str = DEFAULT_ANALYSIS_SYSTEM_INSTRUCTION
    article: str = DEFAULT_ARTICLE_PROMPT
    article_system: str = DEFAULT_ARTICLE_SYSTEM_INSTRUCTION
    concept: str = DEFAULT_CONCEPT_PROMPT
    notes: str = DEFAULT_NOTES_PROMPT

    @classmethod
    def defaults(cls) -> Prompts:
        """Create a Prompts instance with all default values."""
        return cls()


def render(template: str, **values: str) -> str:
    """Substitute ``{name}`` placeholders in a prompt template.

    Args:
        template: Prompt template.
        **values: Placeholder values.

    Returns:
        The rendered prompt. Unknown placeholders and other braces are kept.
    """
    # Single pass, so substituted values are never themselves expanded.
    return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def _parse_prompts_markdown(content: str) -> dict[str, str]:
    """Parse prompts from markdown content.

    Args:
        content: Markdown file content with one H1 section per prompt.

    Returns:
        Dictionary mapping Prompts field names to prompt content. Unknown
        or empty sections are ignored.
    """
    by_title = {title.lower(): name for name, title in SECTION_TITLES.items()}
    sections = re.split(r"^#\s+", content, flags=re.MULTILINE)

    prompts: dict[str, str] = {}

    for section in sections:
        if not section.strip():
            continue

        lines = section.split("\n", 1)
        if len(lines) < 2:
            continue

        header = lines[0].strip().lower()
        prompt_content = lines[1].strip()

        name = by_title.get(header)
        if name and prompt_content:
            prompts[name] = prompt_content

    return prompts


def _display_warning(message: str) -> None:
    """Display a warning message to stderr."""
    print(f"Warning: {message}", file=sys.stderr)


def load_prompts(
    local_path: Path | None = None,
    global_path: Path | None = None,
    warn_on_fallback: bool = True,
) -> Prompts:
    """Load prompts from markdown file at runtime.

    Attempts to load prompts from the local path first, then global path.
    Falls back to built-in defaults if no file exists or it is malformed;
    sections missing from the file keep their defaults.

    Args:
        local_path: Override path for local prompts file.
        global_path: Override path for global prompts file.
        warn_on_fallback: If True, display warning when a file was found
            but could not be used.

    Returns:
        Prompts object with loaded or default prompts.
    """
    local_path = local_path or LOCAL_PROMPTS_PATH
    global_path = global_path or GLOBAL_PROMPTS_PATH

    prompts_path: Path | None = None
    if local_path.exists():
        prompts_path = local_path
    elif global_path.exists():
        prompts_path = global_path

    if prompts_path is None:
        return Prompts.defaults()

    try:
        content = prompts_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        if warn_on_fallback:
            _display_warning(
                f"Could not read prompts file {prompts_path}: {e}. Using built-in default prompts."
            )
        return Prompts.defaults()

    parsed_prompts = _parse_prompts_markdown(content)
    if not parsed_prompts:
        if warn_on_fallback:
            _display_warning(
                f"Prompts file {prompts_path} is malformed (no valid sections found). "
                "Using built-in default prompts."
            )
        return Prompts.defaults()

    for name, placeholders in REQUIRED_PLACEHOLDERS.items():
        template = parsed_prompts.get(name)
        if template is None:
            continue
        missing = [p for p in placeholders if p not in template]
        if missing:
            if warn_on_fallback:
                _display_warning(
                    f"Section '{SECTION_TITLES[name]}' in {prompts_path} is missing "
                    f"{', '.join(missing)}. Using the built-in default for it."
                )
            del parsed_prompts[name]

    return Prompts(**parsed_prompts)


def generate_default_prompts_markdown() -> str:
    """Generate the default prompts as markdown file content.

    Returns:
        Markdown-formatted string with all default prompts, suitable for
        ``load_prompts``.
    """
    defaults = Prompts.defaults()
    sections = [
        f"# {SECTION_TITLES[f.name]}\n\n{getattr(defaults, f.name)}\n" for f in fields(Prompts)
    ]
    return "\n".join(sections)
