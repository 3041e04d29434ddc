"""Error taxonomy. None of these ever reach the user as a message."""


class LivePlayError(Exception):
    """Base class for the live-play engine."""


class TransientFetchError(LivePlayError):
    """Network/HTTP failure; the poll cycle is skipped and a neutral state shown."""


class MalformedDataError(LivePlayError):
    """Upstream document has an unexpected shape."""


class PersistenceError(LivePlayError):
    """Durable storage could not be written or read; state stays in memory."""


class OnePlayRejected(LivePlayError):
    """A one-play command is not allowed in the current state."""
