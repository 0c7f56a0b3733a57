"""Custom exception hierarchy for Stuck-Bot."""


class StuckBotError(Exception):
    """Base error type."""


class AlreadyQueued(StuckBotError):
    """Raised when an identity joins a queue it is already part of."""

    def __init__(self, identity: str) -> None:
        super().__init__(identity)
        self.identity = identity


class NotQueued(StuckBotError):
    def __init__(self, identity: str) -> None:
        super().__init__(identity)
        self.identity = identity


class QueueEmpty(StuckBotError):
    pass


class FormatError(StuckBotError):
    """Raised when the external snippet formatter cannot produce output."""
    pass


class SendError(StuckBotError):
    pass


class ConfigError(StuckBotError):
    pass


class CommandTableError(ConfigError):
    """Raised when the command table file is missing or malformed."""
    pass
