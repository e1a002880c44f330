"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import (
    ensure_utc,
    format_store_datetime,
    from_timestamp_utc,
    parse_store_datetime,
    utc_now,
)
from app.shared.utils.generators import generate_cuid, generate_record_id
from app.shared.utils.sanitization import (
    InputSanitizer,
    sanitize_display_text,
    validate_record_id,
)

__all__ = [
    "generate_cuid",
    "generate_record_id",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
    "format_store_datetime",
    "parse_store_datetime",
    "InputSanitizer",
    "sanitize_display_text",
    "validate_record_id",
]
