"""Locate a JSON object inside free-form model output.

Models wrap their JSON in Markdown fences or explanatory prose. Three
helpers are provided:

- ``clean_json`` strips the fences and slices from the first ``{`` to the
  last ``}``. It is cheap and right for well-behaved output.
- ``extract_json`` scans every ``{`` with an incremental JSON decoder and
  returns the first complete object, so braces in surrounding prose do not
  break extraction. It falls back to ``clean_json`` when nothing decodes.
- ``json_candidates`` yields every top-level object, for callers that
  need to skip example objects quoted ahead of the real answer.
"""

from __future__ import annotations

import json
from collections.abc import Iterator

FENCE_MARKERS = ("```json", "```")

_decoder = json.JSONDecoder()


def strip_fences(raw: str) -> str:
    """Remove Markdown code fence markers from text.

    Args:
        raw: Model output.

    Returns:
        The text with every fence marker removed.
    """
    text = raw
    for marker in FENCE_MARKERS:
        text = text.replace(marker, "")
    return text


def clean_json(raw: str) -> str:
    """Slice the text between the first ``{`` and the last ``}``.

    Args:
        raw: Model output, possibly fenced and wrapped in prose.

    Returns:
        The trimmed candidate JSON text. If either brace is missing the
        trimmed, unsliced text is returned and parsing it will fail.
    """
    text = strip_fences(raw)

    json_start = text.find("{")
    json_end = text.rfind("}")

    if json_start != -1 and json_end > json_start:
        text = text[json_start : json_end + 1]

    return text.strip()


def json_candidates(raw: str) -> Iterator[str]:
    """Yield the text of every top-level JSON object in ``raw``, in order.

    A ``{`` inside an object already yielded is not scanned again, so nested
    objects are never yielded on their own.
    """
    text = strip_fences(raw)

    position = text.find("{")
    while position != -1:
        try:
            _, end = _decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            position = text.find("{", position + 1)
            continue
        yield text[position:end]
        position = text.find("{", end)


def extract_json(raw: str) -> str:
    """Return the text of the first complete JSON object in ``raw``.

    Args:
        raw: Model output, possibly fenced and wrapped in prose.

    Returns:
        The exact text of the first decodable JSON object, trimmed, or the
        result of ``clean_json`` when no position decodes to an object.
    """
    return next(json_candidates(raw), None) or clean_json(raw)
