"""Record store collections (schema-in-code).

Collection and field names used against the record store, plus the unique
constraints the identity core relies on. The PocketBase deployment must
declare the same indexes; the in-memory store enforces them directly.

The partial unique index on users.role where role='owner' makes a second
owner impossible at the store level where supported; the registration and
transfer logic still check before writing.
"""

from dataclasses import dataclass, field

COLLECTION_USERS = "users"
COLLECTION_INVITE_CODES = "invite_codes"
COLLECTION_OWNERSHIP_TRANSFERS = "ownership_transfers"
COLLECTION_APP_CONFIG = "app_config"
COLLECTION_SUPERUSERS = "_superusers"


@dataclass(frozen=True)
class CollectionSchema:
    """Constraints of one collection.

    unique: fields whose non-empty values must be unique.
    partial_unique: (field, value) pairs of which at most one record may hold value.
    auth: records carry a store-owned password (write-only "password" field).
    """

    name: str
    unique: tuple[str, ...] = ()
    partial_unique: tuple[tuple[str, str], ...] = ()
    auth: bool = False
    hidden: tuple[str, ...] = field(default=())


SCHEMAS: dict[str, CollectionSchema] = {
    COLLECTION_USERS: CollectionSchema(
        name=COLLECTION_USERS,
        unique=("phoneNumber", "email"),
        partial_unique=(("role", "owner"),),
        auth=True,
        hidden=("passwordHash",),
    ),
    COLLECTION_INVITE_CODES: CollectionSchema(
        name=COLLECTION_INVITE_CODES,
        unique=("code",),
    ),
    COLLECTION_OWNERSHIP_TRANSFERS: CollectionSchema(
        name=COLLECTION_OWNERSHIP_TRANSFERS,
        unique=("code",),
    ),
    COLLECTION_APP_CONFIG: CollectionSchema(name=COLLECTION_APP_CONFIG),
}


def get_schema(collection: str) -> CollectionSchema:
    """Return the schema for collection; unknown collections have no constraints."""
    return SCHEMAS.get(collection, CollectionSchema(name=collection))
