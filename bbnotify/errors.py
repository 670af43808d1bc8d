"""Error taxonomy for the book-building notifier."""


class BookBuildingNotifyError(Exception):
    """Base class for fatal errors raised during a run."""


class ConfigError(BookBuildingNotifyError):
    """Required configuration is missing or invalid."""


class FetchError(BookBuildingNotifyError):
    """The schedule page could not be retrieved or parsed."""


class MalformedLayoutError(BookBuildingNotifyError):
    """A block start row is not followed by the rows its record needs."""

    def __init__(self, block_index: int, available: int, reason: str | None = None):
        self.block_index = block_index
        self.available = available
        message = reason or (
            f"block starting at row {block_index} has {available} trailing rows, expected 5"
        )
        super().__init__(message)


class StoreError(BookBuildingNotifyError):
    """Querying or writing the record store failed."""


class NotificationError(BookBuildingNotifyError):
    """A notification could not be delivered."""


class TextEncodingWarning(UserWarning):
    """A cell could not be decoded; the original text was kept."""

    def __init__(self, raw: str | bytes, cause: Exception | str):
        self.raw = raw
        self.cause = cause
        super().__init__(f"string encoding error: {cause}")
