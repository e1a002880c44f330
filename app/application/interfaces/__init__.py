"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IAccountRepository,
    IAppConfigRepository,
    IInviteCodeRepository,
    IOwnershipTransferRepository,
)
from app.application.interfaces.services import (
    INotificationDispatcher,
    ISessionStateStore,
)

__all__ = [
    "IAccountRepository",
    "IAppConfigRepository",
    "IInviteCodeRepository",
    "INotificationDispatcher",
    "IOwnershipTransferRepository",
    "ISessionStateStore",
]
