"""Video analysis service.

Asks the model, with search grounding, for a full analysis of a video URL
and turns whatever comes back into an AnalysisResult. Malformed output is
never raised: it is replaced by a fallback result built from the raw text.
"""

from __future__ import annotations

import warnings

from tubemind.core.decode import DecodeFailure, decode_analysis
from tubemind.core.errors import MalformedOutputWarning
from tubemind.core.models import AnalysisResult, Sentiment
from tubemind.core.prompts import Prompts, render
from tubemind.services.gateway import GeminiGateway

# Transcripts shorter than this are replaced by a synthesized narrative
MIN_TRANSCRIPT_LENGTH = 100

# Both texts are longer than MIN_TRANSCRIPT_LENGTH on their own
TRANSCRIPT_PREAMBLE = (
    "تحلیل عمیق محتوا: متن کامل این ویدیو در دسترس نبود، بنابراین این روایت "
    "از روی خلاصه و نکات آموزشی استخراج‌شده بازسازی شده است.\n\n"
)
TRANSCRIPT_PLACEHOLDER = (
    "متن قابل استخراج نبود. پاسخ مدل در قالب مورد انتظار نبود و تنها متن خام "
    "دریافتی در ادامه آمده است؛ لطفا لینک را بررسی کرده و مجددا تلاش کنید."
)

FALLBACK_SUMMARY = (
    "متاسفانه در استخراج داده‌ها مشکلی پیش آمد. اما بر اساس تحلیل اولیه، این ویدیو "
    "احتمالا حاوی نکات مهمی است که به دلیل محدودیت‌های دسترسی قابل استخراج نبود. "
    "لطفا لینک را بررسی کرده و مجددا تلاش کنید."
)
FALLBACK_THEMES = ["خطای تحلیل", "نیاز به بررسی مجدد"]
FALLBACK_POINTS = ["لطفا از لینک صحیح اطمینان حاصل کنید", "مجددا تلاش کنید"]


def synthesize_transcript(summary: str, educational_points: list[str]) -> str:
    """Build a narrative from the summary and points of an analysis.

    Args:
        summary: Analysis summary.
        educational_points: Actionable points, rendered as a bullet list.

    Returns:
        Preamble, summary and points joined by newlines.
    """
    text = TRANSCRIPT_PREAMBLE + summary
    if educational_points:
        text += "\n\n" + "\n".join(f"- {point}" for point in educational_points)
    return text


def fallback_result(raw: str) -> AnalysisResult:
    """Build the result returned when the model output could not be decoded.

    Args:
        raw: The unparsed response text.

    Returns:
        A neutral AnalysisResult carrying the raw text as its transcript.
    """
    transcript = raw.strip()
    if len(transcript) < MIN_TRANSCRIPT_LENGTH:
        transcript = f"{TRANSCRIPT_PLACEHOLDER}\n\n{transcript}".rstrip()

    return AnalysisResult(
        summary=FALLBACK_SUMMARY,
        themes=list(FALLBACK_THEMES),
        educational_points=list(FALLBACK_POINTS),
        sentiment=Sentiment.NEUTRAL,
        keywords=[],
        full_transcript=transcript,
    )


class AnalysisService:
    """Runs the grounded video analysis."""

    def __init__(
        self,
        gateway: GeminiGateway,
        prompts: Prompts | None = None,
        temperature: float = 0.5,
    ) -> None:
        """
        Initialize the analysis service.

        Args:
            gateway: Gateway used for the model call
            prompts: Prompt templates, defaults if None
            temperature: Sampling temperature for the analysis request
        """
        self.gateway = gateway
        self.prompts = prompts or Prompts.defaults()
        self.temperature = temperature

    async def analyze(self, video_url: str) -> AnalysisResult:
        """
        Analyze a video.

        Args:
            video_url: URL of the video

        Returns:
            AnalysisResult whose full_transcript is at least
            MIN_TRANSCRIPT_LENGTH characters long

        Raises:
            GatewayError: If the model call fails. Malformed output is
                recovered with a fallback result instead.
        """
        response = await self.gateway.generate(
            render(self.prompts.analysis, url=video_url),
            system_instruction=self.prompts.analysis_system,
            temperature=self.temperature,
            enable_search=True,
        )

        decoded = decode_analysis(response.text)
        if isinstance(decoded, DecodeFailure):
            warnings.warn(
                f"Could not decode analysis response ({decoded.reason}). "
                "Returning fallback analysis.",
                MalformedOutputWarning,
                stacklevel=2,
            )
            result = fallback_result(response.text)
        else:
            result = decoded
            transcript = result.full_transcript or ""
            if len(transcript) < MIN_TRANSCRIPT_LENGTH:
                result = result.model_copy(
                    update={
                        "full_transcript": synthesize_transcript(
                            result.summary, result.educational_points
                        )
                    }
                )

        if response.sources is not None:
            result = result.model_copy(update={"sources": response.sources})

        return result
