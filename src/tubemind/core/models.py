"""Data models for tubemind.

Result models are decoded from model-generated JSON, so they are pydantic
models that accept the camelCase keys the service emits while exposing
snake_case attributes.
"""

from __future__ import annotations

from enum import Enum, StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sentiment(StrEnum):
    """Overall tone of the analysed video."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class AppState(Enum):
    """Top-level state of an analysis session."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


class TabView(StrEnum):
    """Result views a session can show."""

    DASHBOARD = "dashboard"
    ARTICLE = "article"
    CONCEPT = "concept"
    NOTES = "notes"


# Labels the analysis prompt may come back with when answering in Persian
_PERSIAN_SENTIMENTS = {
    "مثبت": "positive",
    "خنثی": "neutral",
    "منفی": "negative",
}


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Source(_ResultModel):
    """A web page the model consulted through search grounding."""

    title: str = ""
    uri: str = ""


class AnalysisResult(_ResultModel):
    """Analysis of a single video."""

    summary: str
    themes: list[str] = Field(default_factory=list)
    educational_points: list[str] = Field(default_factory=list, alias="educationalPoints")
    sentiment: Sentiment = Sentiment.NEUTRAL
    keywords: list[str] = Field(default_factory=list)
    sources: list[Source] | None = None
    full_transcript: str | None = Field(default=None, alias="fullTranscript")

    @field_validator("sentiment", mode="before")
    @classmethod
    def _normalize_sentiment(cls, value: object) -> Sentiment:
        # Labels outside the enum read as neutral
        if not isinstance(value, str):
            return Sentiment.NEUTRAL
        label = value.strip().lower()
        try:
            return Sentiment(_PERSIAN_SENTIMENTS.get(label, label))
        except ValueError:
            return Sentiment.NEUTRAL

    @field_validator("themes", "educational_points", "keywords", mode="before")
    @classmethod
    def _null_list_is_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("keywords")
    @classmethod
    def _unique_keywords(cls, value: list[str]) -> list[str]:
        # Keywords are a set; keep first-seen order for display.
        return list(dict.fromkeys(value))


class VideoConcept(_ResultModel):
    """A new video idea derived from an analysis."""

    title: str
    hook: str
    outline: list[str]
    target_audience: str = Field(alias="targetAudience")


class GeneratedArticle(_ResultModel):
    """Long-form Markdown article written from an analysis."""

    title: str
    content: str
