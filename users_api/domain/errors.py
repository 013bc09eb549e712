"""Store-level faults raised by the data access layer.

These carry no HTTP knowledge; the API layer decides how each one is
reported to clients.
"""


class StoreError(Exception):
    """The store failed to execute an operation."""


class DuplicateKeyError(StoreError):
    """A write would violate a unique constraint."""

    def __init__(self, message: str = "Duplicate key", field: str = "email"):
        self.field = field
        super().__init__(message)
