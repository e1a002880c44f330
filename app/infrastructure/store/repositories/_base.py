"""Shared repository plumbing: store error conversion and record parsing.

Repositories are the only place raw store records become entities.
RecordReader rejects malformed records with MalformedRecordError instead
of guessing defaults for required fields.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from app.domain.exceptions import (
    DuplicateValueException,
    ResourceNotFoundException,
    UpstreamUnavailableException,
)
from app.infrastructure.store.errors import (
    MalformedRecordError,
    RecordConflictError,
    RecordNotFoundError,
    RecordStoreError,
)
from app.shared.utils.datetime import parse_store_datetime

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


@asynccontextmanager
async def store_errors(collection: str, operation: str) -> AsyncIterator[None]:
    """Convert store errors raised inside the block into domain exceptions."""
    try:
        yield
    except RecordNotFoundError as e:
        raise ResourceNotFoundException(collection, e.record_id) from None
    except RecordConflictError as e:
        raise DuplicateValueException(collection, e.field) from None
    except MalformedRecordError as e:
        logger.error("Malformed record during %s: %s", operation, e)
        raise UpstreamUnavailableException(operation) from None
    except RecordStoreError as e:
        logger.error("Record store failure during %s: %s", operation, e)
        raise UpstreamUnavailableException(operation) from None


class RecordReader:
    """Typed field access over one raw record."""

    def __init__(self, collection: str, record: dict[str, Any]) -> None:
        self.collection = collection
        self.record = record
        self.record_id = record.get("id") or None

    def _malformed(self, reason: str) -> MalformedRecordError:
        return MalformedRecordError(self.collection, self.record_id, reason)

    def text(self, field: str, required: bool = True) -> str | None:
        """String field; empty strings (store default for unset) read as None."""
        value = self.record.get(field)
        if value in (None, ""):
            if required:
                raise self._malformed(f"missing {field}")
            return None
        if not isinstance(value, str):
            raise self._malformed(f"{field} is not a string")
        return value

    def flag(self, field: str) -> bool:
        value = self.record.get(field, False)
        if value in (None, ""):
            return False
        if not isinstance(value, bool):
            raise self._malformed(f"{field} is not a boolean")
        return value

    def choice(self, field: str, enum_cls: type[E]) -> E:
        raw = self.text(field)
        try:
            return enum_cls(raw)
        except ValueError:
            raise self._malformed(f"unknown {field} {raw!r}") from None

    def timestamp(self, field: str, required: bool = True) -> datetime | None:
        raw = self.text(field, required=required)
        if raw is None:
            return None
        try:
            return parse_store_datetime(raw)
        except ValueError:
            raise self._malformed(f"unparsable {field}") from None

    @property
    def id(self) -> str:
        if not self.record_id:
            raise self._malformed("missing id")
        return self.record_id
