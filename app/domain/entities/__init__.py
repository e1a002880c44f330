"""Domain entities.

Pure domain models; no store or persistence concerns.
"""

from app.domain.entities.account import AccountEntity
from app.domain.entities.app_config import AppConfigEntity
from app.domain.entities.invite_code import InviteCodeEntity
from app.domain.entities.ownership_transfer import OwnershipTransferEntity

__all__ = [
    "AccountEntity",
    "AppConfigEntity",
    "InviteCodeEntity",
    "OwnershipTransferEntity",
]
