"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    AccountEntity,
    AppConfigEntity,
    InviteCodeEntity,
    OwnershipTransferEntity,
)
from app.domain.enums import (
    AccountRole,
    AccountStatus,
    InviteRole,
    PinSessionState,
    TransferStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    IdentityException,
    InvalidCodeException,
    ResourceNotFoundException,
    UpstreamUnavailableException,
    ValidationException,
)
from app.domain.value_objects import PhoneNumber

__all__ = [
    # Entities
    "AccountEntity",
    "AppConfigEntity",
    "InviteCodeEntity",
    "OwnershipTransferEntity",
    # Enums
    "AccountRole",
    "AccountStatus",
    "InviteRole",
    "PinSessionState",
    "TransferStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "IdentityException",
    "InvalidCodeException",
    "ResourceNotFoundException",
    "UpstreamUnavailableException",
    "ValidationException",
    # Value objects
    "PhoneNumber",
]
