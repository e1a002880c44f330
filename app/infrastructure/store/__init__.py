"""Identity record store adapter: port, backends, filters and typed repositories."""

from app.infrastructure.store.client import (
    close_record_store,
    get_record_store,
    init_record_store,
    set_record_store,
)
from app.infrastructure.store.errors import (
    MalformedRecordError,
    RecordConflictError,
    RecordNotFoundError,
    RecordStoreError,
)
from app.infrastructure.store.memory_store import InMemoryRecordStore
from app.infrastructure.store.pocketbase_client import PocketBaseRecordStore
from app.infrastructure.store.protocol import IRecordStore

__all__ = [
    "IRecordStore",
    "InMemoryRecordStore",
    "MalformedRecordError",
    "PocketBaseRecordStore",
    "RecordConflictError",
    "RecordNotFoundError",
    "RecordStoreError",
    "close_record_store",
    "get_record_store",
    "init_record_store",
    "set_record_store",
]
