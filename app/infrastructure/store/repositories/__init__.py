"""Typed repositories over the record store."""

from app.infrastructure.store.repositories.account_repo import AccountRepository
from app.infrastructure.store.repositories.app_config_repo import AppConfigRepository
from app.infrastructure.store.repositories.invite_code_repo import InviteCodeRepository
from app.infrastructure.store.repositories.ownership_transfer_repo import (
    OwnershipTransferRepository,
)

__all__ = [
    "AccountRepository",
    "AppConfigRepository",
    "InviteCodeRepository",
    "OwnershipTransferRepository",
]
