"""Tests for article, video concept and notes generation."""

import pytest

from tubemind.core.errors import GatewayError, MalformedOutputError
from tubemind.core.models import GeneratedArticle
from tubemind.core.prompts import DEFAULT_ARTICLE_SYSTEM_INSTRUCTION, Prompts
from tubemind.services.content import (
    DEFAULT_ARTICLE_TITLE,
    EMPTY_ARTICLE_CONTENT,
    VIDEO_CONCEPT_SCHEMA,
    ContentService,
    extract_title,
)
from tubemind.services.gateway import GatewayResponse


class TestExtractTitle:
    """Tests for H1 title extraction."""

    def test_first_h1_heading(self) -> None:
        text = "Intro line\n# Deep Work Explained\n## Section\n# Another"

        assert extract_title(text) == "Deep Work Explained"

    def test_h2_is_not_a_title(self) -> None:
        assert extract_title("## Only a subsection\nBody") == DEFAULT_ARTICLE_TITLE

    def test_indented_heading_is_ignored(self) -> None:
        assert extract_title("  # Indented\nBody") == DEFAULT_ARTICLE_TITLE

    def test_custom_default(self) -> None:
        assert extract_title("", default="Untitled") == "Untitled"


class TestGenerateArticle:
    """Tests for ContentService.generate_article."""

    @pytest.mark.asyncio
    async def test_title_from_heading(self, gateway_factory) -> None:
        text = "# Study Smarter\n\nBody of the article."
        gateway = gateway_factory(GatewayResponse(text=text))

        article = await ContentService(gateway).generate_article("context")

        assert article == GeneratedArticle(title="Study Smarter", content=text)

    @pytest.mark.asyncio
    async def test_default_title_without_heading(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text="No heading here."))

        article = await ContentService(gateway).generate_article("context")

        assert article.title == DEFAULT_ARTICLE_TITLE
        assert article.content == "No heading here."

    @pytest.mark.asyncio
    async def test_empty_response_gets_placeholder_content(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text=""))

        article = await ContentService(gateway).generate_article("context")

        assert article.title == DEFAULT_ARTICLE_TITLE
        assert article.content == EMPTY_ARTICLE_CONTENT

    @pytest.mark.asyncio
    async def test_context_is_truncated(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text="# T"))
        prompts = Prompts(article="<{context}>")
        service = ContentService(gateway, prompts=prompts, context_limit=10)

        await service.generate_article("0123456789abcdef")

        gateway.generate.assert_awaited_once_with(
            "<0123456789>", system_instruction=DEFAULT_ARTICLE_SYSTEM_INSTRUCTION
        )

    @pytest.mark.asyncio
    async def test_gateway_error_propagates(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayError("quota exceeded"))

        with pytest.raises(GatewayError):
            await ContentService(gateway).generate_article("context")


class TestGenerateVideoConcept:
    """Tests for ContentService.generate_video_concept."""

    @pytest.mark.asyncio
    async def test_decodes_concept(self, gateway_factory, concept_json: str) -> None:
        gateway = gateway_factory(GatewayResponse(text=concept_json))

        concept = await ContentService(gateway).generate_video_concept("summary")

        assert concept.title == "Study Smarter"
        assert concept.outline == ["Open with a question", "Show the method", "Call to action"]
        assert concept.target_audience == "University students"

    @pytest.mark.asyncio
    async def test_requests_schema_constrained_output(
        self, gateway_factory, concept_json: str
    ) -> None:
        gateway = gateway_factory(GatewayResponse(text=concept_json))
        prompts = Prompts(concept="Concept: {context}")
        service = ContentService(gateway, prompts=prompts, context_limit=7)

        await service.generate_video_concept("summary text")

        gateway.generate.assert_awaited_once_with(
            "Concept: summary", response_schema=VIDEO_CONCEPT_SCHEMA
        )

    @pytest.mark.asyncio
    async def test_non_conforming_output_raises(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text='{"title": "only a title"}'))

        with pytest.raises(MalformedOutputError):
            await ContentService(gateway).generate_video_concept("summary")

    @pytest.mark.asyncio
    async def test_non_json_output_raises(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text="I'd rather not."))

        with pytest.raises(MalformedOutputError):
            await ContentService(gateway).generate_video_concept("summary")


class TestRefineNotes:
    """Tests for ContentService.refine_notes."""

    @pytest.mark.asyncio
    async def test_returns_refined_text(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text="- focus\n- rest"))

        refined = await ContentService(gateway).refine_notes("focus, rest", "context")

        assert refined == "- focus\n- rest"

    @pytest.mark.asyncio
    async def test_notes_context_is_truncated(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text="refined"))
        prompts = Prompts(notes="{notes}|{context}")
        service = ContentService(gateway, prompts=prompts, context_limit=100, notes_context_limit=3)

        await service.refine_notes("my notes", "abcdef")

        gateway.generate.assert_awaited_once_with("my notes|abc")

    @pytest.mark.asyncio
    async def test_blank_notes_make_no_request(self, gateway_factory) -> None:
        gateway = gateway_factory()

        refined = await ContentService(gateway).refine_notes("   ", "context")

        assert refined == "   "
        gateway.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_response_keeps_original_notes(self, gateway_factory) -> None:
        gateway = gateway_factory(GatewayResponse(text=""))

        refined = await ContentService(gateway).refine_notes("keep me", "context")

        assert refined == "keep me"
