# kpguess/errors.py
class KPGuessError(Exception):
    """Base class for every error the bot raises on purpose."""


class ConfigurationError(KPGuessError):
    """Missing credential, bad episode selector or bad timing range."""


class StoreUnavailable(KPGuessError):
    """The answers file could not be created or opened."""

    def __init__(self, path, reason):
        super().__init__(f"Answer store unavailable at {path}: {reason}")
        self.path = path


class TransportError(KPGuessError):
    """Network failure or a status worth retrying (5xx, 429)."""


class ProtocolError(KPGuessError):
    """The API answered with something we cannot use. Never retried."""
