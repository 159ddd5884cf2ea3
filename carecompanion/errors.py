"""Exception hierarchy for the care companion core."""


class CareCompanionError(Exception):
    """Base class for every error raised by this package."""


class StorageError(CareCompanionError):
    """A persisted document could not be read, written or removed.

    The mutation that triggered it was not applied in memory either, so the
    caller may retry or report it.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
