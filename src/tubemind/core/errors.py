"""Custom exceptions for tubemind."""


class TubemindError(Exception):
    """Base exception for all tubemind errors."""

    pass


class ConfigError(TubemindError):
    """Configuration-related errors."""

    pass


class GatewayError(TubemindError):
    """The generative service call itself failed (network, auth, quota)."""

    pass


class MalformedOutputError(TubemindError):
    """The service answered, but not with the JSON shape that was expected."""

    pass


class SessionError(TubemindError):
    """An action was requested in a session state that does not allow it."""

    pass


class OutputError(TubemindError):
    """Report file output errors."""

    pass


class MalformedOutputWarning(UserWarning):
    """Emitted when malformed model output was replaced by a fallback result."""
