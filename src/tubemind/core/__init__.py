"""Core modules for tubemind."""

from tubemind.core.config import (
    ApiConfig,
    Config,
    ContentConfig,
    ModelConfig,
    OutputConfig,
    get_config,
    load_config,
)
from tubemind.core.decode import DecodeFailure, decode_analysis, decode_concept
from tubemind.core.errors import (
    ConfigError,
    GatewayError,
    MalformedOutputError,
    MalformedOutputWarning,
    OutputError,
    SessionError,
    TubemindError,
)
from tubemind.core.extractor import clean_json, extract_json, json_candidates
from tubemind.core.models import (
    AnalysisResult,
    AppState,
    GeneratedArticle,
    Sentiment,
    Source,
    TabView,
    VideoConcept,
)
from tubemind.core.prompts import (
    Prompts,
    generate_default_prompts_markdown,
    load_prompts,
)

__all__ = [
    "AnalysisResult",
    "ApiConfig",
    "AppState",
    "Config",
    "ConfigError",
    "ContentConfig",
    "DecodeFailure",
    "GatewayError",
    "GeneratedArticle",
    "MalformedOutputError",
    "MalformedOutputWarning",
    "ModelConfig",
    "OutputConfig",
    "OutputError",
    "Prompts",
    "Sentiment",
    "SessionError",
    "Source",
    "TabView",
    "TubemindError",
    "VideoConcept",
    "clean_json",
    "decode_analysis",
    "decode_concept",
    "extract_json",
    "generate_default_prompts_markdown",
    "get_config",
    "json_candidates",
    "load_config",
    "load_prompts",
]
