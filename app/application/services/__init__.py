"""Application services: identity core operations."""

from app.application.services.auth_service import AuthService
from app.application.services.authorization_service import AuthorizationService
from app.application.services.invite_service import InviteService
from app.application.services.ownership_transfer_service import OwnershipTransferService
from app.application.services.phone_identity_verifier import PhoneIdentityVerifier
from app.application.services.pin_guard import PinGuard
from app.application.services.pin_hasher import PinHasher
from app.application.services.registration_service import RegistrationService
from app.application.services.setup_service import SetupService
from app.application.services.team_service import TeamService

__all__ = [
    "AuthService",
    "AuthorizationService",
    "InviteService",
    "OwnershipTransferService",
    "PhoneIdentityVerifier",
    "PinGuard",
    "PinHasher",
    "RegistrationService",
    "SetupService",
    "TeamService",
]
