"""Record store errors.

Raised by store backends; repositories convert them into domain
exceptions so nothing above the repository layer sees them.
"""


class RecordStoreError(Exception):
    """Transport failure, timeout, unexpected status or rejected request."""


class RecordNotFoundError(RecordStoreError):
    """The addressed record does not exist (update/delete)."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Record not found: {collection}/{record_id}")


class RecordConflictError(RecordStoreError):
    """A unique constraint rejected the write."""

    def __init__(self, collection: str, field: str | None = None) -> None:
        self.collection = collection
        self.field = field
        super().__init__(f"Unique constraint violated on {collection}.{field or '?'}")


class MalformedRecordError(RecordStoreError):
    """A stored record cannot be mapped to its entity (bad enum, missing field, bad date)."""

    def __init__(self, collection: str, record_id: str | None, reason: str) -> None:
        self.collection = collection
        self.record_id = record_id
        self.reason = reason
        super().__init__(f"Malformed {collection} record {record_id or '?'}: {reason}")
