"""tubemind - Video analysis and content generation with Gemini."""

__version__ = "0.1.0"
