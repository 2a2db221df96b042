"""Exceptions raised by the engine and its I/O layers."""


class UnluckyError(Exception):
    """Base class for all engine errors."""


class EmptyPileError(UnluckyError):
    """Drawing from an exhausted draw pile."""


class SnapshotError(UnluckyError, ValueError):
    """A snapshot file could not be parsed."""


class SessionNotFoundError(UnluckyError, KeyError):
    """No session with the requested id."""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session {self.session_id} not found"
