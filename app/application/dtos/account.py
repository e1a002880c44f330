"""DTOs for account registration and creation."""

from dataclasses import dataclass

from app.domain.enums import AccountRole, AccountStatus


@dataclass(frozen=True)
class AccountDraft:
    """Registration input: who the new account is and how it authenticates.

    phone_token is the phone-proof ID token asserting control of phone_number.
    """

    phone_number: str
    name: str
    password: str
    pin: str
    phone_token: str


@dataclass(frozen=True)
class AccountCreate:
    """Fields the account repository persists for a new account.

    password is plain text here; the record store hashes and owns it.
    """

    phone_number: str
    email: str
    name: str
    password: str
    pin_hash: str
    role: AccountRole
    status: AccountStatus = AccountStatus.ACTIVE
    invited_by: str | None = None
    phone_verified: bool = True
