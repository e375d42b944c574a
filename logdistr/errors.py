"""Errors reported by the commit log."""

STATUS_NOT_FOUND = 404
LOCALE = "en-US"


class OffsetOutOfRangeError(LookupError):
    """Raised when a requested offset lies outside the log's range."""

    code = STATUS_NOT_FOUND
    locale = LOCALE

    def __init__(self, offset: int) -> None:
        super().__init__(f"offset out of range: {offset}")
        self.offset = offset

    def __reduce__(self):
        return (type(self), (self.offset,))

    def localized_message(self) -> str:
        """Return the human-readable message for the ``en-US`` locale."""
        return f"The requested offset is outside the log's range: {self.offset}"