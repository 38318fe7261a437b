"""Pytest fixtures for tubemind tests."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from tubemind.core.models import AnalysisResult, Sentiment, Source
from tubemind.services.gateway import GatewayResponse, GeminiGateway

LONG_SUMMARY = " ".join(["This video explains how to structure a focused study routine."] * 40)
LONG_TRANSCRIPT = " ".join(["The speaker walks through each step of the routine in detail."] * 60)


def make_gateway(*responses: GatewayResponse | Exception) -> MagicMock:
    """Create a gateway mock whose generate() yields the given responses in order."""
    gateway = MagicMock(spec=GeminiGateway)
    gateway.generate = AsyncMock(side_effect=list(responses))
    return gateway


@pytest.fixture
def analysis_payload() -> dict:
    """A well-formed analysis response body."""
    return {
        "summary": LONG_SUMMARY,
        "themes": ["Focus", "Habits", "Planning", "Rest", "Review"],
        "educationalPoints": [
            "Use 25 minute focus blocks",
            "Review notes within 24 hours",
        ],
        "sentiment": "positive",
        "keywords": ["study", "focus", "study", "habits"],
        "fullTranscript": LONG_TRANSCRIPT,
    }


@pytest.fixture
def analysis_json(analysis_payload: dict) -> str:
    """The analysis payload wrapped the way models usually answer."""
    return f"Here is the analysis:\n```json\n{json.dumps(analysis_payload)}\n```\nEnjoy!"


@pytest.fixture
def sample_analysis() -> AnalysisResult:
    """Create a sample analysis for testing."""
    return AnalysisResult(
        summary="A video about study routines.",
        themes=["Focus", "Habits"],
        educational_points=["Use focus blocks", "Review daily"],
        sentiment=Sentiment.POSITIVE,
        keywords=["study", "focus"],
        sources=[Source(title="Study guide", uri="https://example.com/guide")],
        full_transcript="Full narrative of the video. " * 10,
    )


@pytest.fixture
def concept_json() -> str:
    """A schema-conforming video concept response."""
    return json.dumps(
        {
            "title": "Study Smarter",
            "hook": "What if you studied half as long?",
            "outline": ["Open with a question", "Show the method", "Call to action"],
            "targetAudience": "University students",
        }
    )


@pytest.fixture
def gateway_factory():
    """Factory for gateway mocks, see make_gateway."""
    return make_gateway
