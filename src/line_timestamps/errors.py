"""Exceptions raised by the line timestamp engine."""


class TimestampError(Exception):
    """Base class for line-timestamps errors."""


class StorageUnavailable(TimestampError):
    """Raised when the timestamp store cannot be read or written.

    The in-memory baseline of the affected document is left untouched, so
    the next change is diffed against the same content again.

    Attributes:
        path: Location of the store that failed
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str = "Timestamp store is unavailable"):
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class DeserializationError(StorageUnavailable):
    """Raised when the persisted store is not valid structured content.

    Subclasses StorageUnavailable: a corrupt store fails the same way an
    unreadable one does and is never replaced with an empty store.
    """

    def __init__(self, path: str, message: str = "Timestamp store is malformed"):
        super().__init__(path, message)


class MalformedEditScript(TimestampError):
    """Raised when an edit script does not cover both line sequences exactly."""
