"""Schema-validated decoding of model JSON into result models.

Decoding never returns a partially filled object: the caller gets either the
typed model or a ``DecodeFailure`` describing why the text was rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from tubemind.core.extractor import extract_json, json_candidates
from tubemind.core.models import AnalysisResult, VideoConcept

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class DecodeFailure:
    """Why a model response could not be decoded."""

    reason: str
    raw: str


def decode(raw: str, model: type[ModelT]) -> ModelT | DecodeFailure:
    """Extract a JSON object from ``raw`` and validate it against ``model``.

    Every top-level object in the text is tried in order, so an example
    object quoted before the answer does not hide it.

    Args:
        raw: Raw model output.
        model: Pydantic model class describing the expected shape.

    Returns:
        The first object that validates, or a DecodeFailure describing why
        the first candidate was rejected.
    """
    first_error: ValidationError | None = None
    for candidate in json_candidates(raw):
        try:
            return model.model_validate_json(candidate)
        except ValidationError as e:
            first_error = first_error or e

    if first_error is None:
        try:
            return model.model_validate_json(extract_json(raw))
        except ValidationError as e:
            first_error = e

    return DecodeFailure(reason=_describe(first_error), raw=raw)


def decode_analysis(raw: str) -> AnalysisResult | DecodeFailure:
    """Decode an analysis response."""
    return decode(raw, AnalysisResult)


def decode_concept(raw: str) -> VideoConcept | DecodeFailure:
    """Decode a video concept response."""
    return decode(raw, VideoConcept)


def _describe(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{location}: {first.get('msg', 'invalid value')} ({error.error_count()} error(s))"
