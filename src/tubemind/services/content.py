"""Derived content generation: articles, video concepts and refined notes.

Each operation builds a prompt from existing analysis text, truncated to a
fixed number of characters, and makes one model call.
"""

from __future__ import annotations

from google.genai import types

from tubemind.core.config import DEFAULT_CONTEXT_LIMIT, DEFAULT_NOTES_CONTEXT_LIMIT
from tubemind.core.decode import DecodeFailure, decode_concept
from tubemind.core.errors import MalformedOutputError
from tubemind.core.models import GeneratedArticle, VideoConcept
from tubemind.core.prompts import Prompts, render
from tubemind.services.gateway import GeminiGateway

DEFAULT_ARTICLE_TITLE = "مقاله جامع تحلیلی"
EMPTY_ARTICLE_CONTENT = "خطا در تولید مقاله."

VIDEO_CONCEPT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": types.Schema(type=types.Type.STRING),
        "hook": types.Schema(type=types.Type.STRING),
        "outline": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
        ),
        "targetAudience": types.Schema(type=types.Type.STRING),
    },
    required=["title", "hook", "outline", "targetAudience"],
)


def extract_title(text: str, default: str = DEFAULT_ARTICLE_TITLE) -> str:
    """Return the text of the first level-1 Markdown heading.

    Args:
        text: Markdown text.
        default: Title used when no line starts with "# ".

    Returns:
        The heading text without its marker, or ``default``.
    """
    for line in text.split("\n"):
        if line.startswith("# "):
            title = line[2:].strip()
            if title:
                return title
    return default


class ContentService:
    """Generates content derived from a finished analysis."""

    def __init__(
        self,
        gateway: GeminiGateway,
        prompts: Prompts | None = None,
        context_limit: int = DEFAULT_CONTEXT_LIMIT,
        notes_context_limit: int = DEFAULT_NOTES_CONTEXT_LIMIT,
    ) -> None:
        """
        Initialize the content service.

        Args:
            gateway: Gateway used for model calls
            prompts: Prompt templates, defaults if None
            context_limit: Characters of context sent for articles and concepts
            notes_context_limit: Characters of context sent for notes refinement
        """
        self.gateway = gateway
        self.prompts = prompts or Prompts.defaults()
        self.context_limit = context_limit
        self.notes_context_limit = notes_context_limit

    async def generate_article(self, context: str) -> GeneratedArticle:
        """
        Write a long-form article from analysis context.

        Args:
            context: Analysis text the article is based on

        Returns:
            GeneratedArticle titled after its first H1 heading

        Raises:
            GatewayError: If the model call fails
        """
        response = await self.gateway.generate(
            render(self.prompts.article, context=context[: self.context_limit]),
            system_instruction=self.prompts.article_system,
        )

        return GeneratedArticle(
            title=extract_title(response.text),
            content=response.text or EMPTY_ARTICLE_CONTENT,
        )

    async def generate_video_concept(self, context: str) -> VideoConcept:
        """
        Design a new video concept from analysis context.

        Args:
            context: Analysis text the concept is based on

        Returns:
            VideoConcept decoded from the schema-constrained response

        Raises:
            GatewayError: If the model call fails
            MalformedOutputError: If the response does not match the schema
        """
        response = await self.gateway.generate(
            render(self.prompts.concept, context=context[: self.context_limit]),
            response_schema=VIDEO_CONCEPT_SCHEMA,
        )

        decoded = decode_concept(response.text)
        if isinstance(decoded, DecodeFailure):
            raise MalformedOutputError(f"Invalid video concept response: {decoded.reason}")
        return decoded

    async def refine_notes(self, notes: str, context: str) -> str:
        """
        Rewrite free-form notes as a structured Markdown list.

        Args:
            notes: The user's notes
            context: Analysis text used to fill in brief notes

        Returns:
            The refined notes, or ``notes`` unchanged when they are blank or
            the model returned nothing

        Raises:
            GatewayError: If the model call fails
        """
        if not notes.strip():
            return notes

        response = await self.gateway.generate(
            render(
                self.prompts.notes,
                notes=notes,
                context=context[: self.notes_context_limit],
            ),
        )
        return response.text or notes
