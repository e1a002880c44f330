"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    ensure_utc,
    format_store_datetime,
    from_timestamp_utc,
    generate_cuid,
    parse_store_datetime,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
    "format_store_datetime",
    "parse_store_datetime",
]
