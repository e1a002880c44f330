"""Domain exceptions for the identity service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers. Messages are
localized through the message catalog; error codes are stable.
"""

from typing import Any

from app.core.messages import translate


class IdentityException(Exception):
    """Base exception for all identity service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable, localized error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, remaining_seconds).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the client-facing error body."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(IdentityException):
    """Raised when input validation fails (phone format, PIN shape, code shape)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidCodeException(IdentityException):
    """Raised for a missing, expired, used or otherwise unusable invite/transfer code.

    The reason is deliberately not exposed; callers log it instead.
    """

    def __init__(self) -> None:
        super().__init__(translate("invalid_code"), "INVALID_CODE")


class AuthenticationException(IdentityException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str | None = None) -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message or translate("not_authenticated"), "AUTHENTICATION_ERROR")


class AuthorizationException(IdentityException):
    """Raised when the account lacks the role required for the operation."""

    def __init__(self, action: str | None = None, message: str | None = None) -> None:
        """Initialize with optional action and message.

        Args:
            action: Optional action that was attempted (e.g. 'create_invite').
            message: Human-readable message; generic denial when omitted.
        """
        details: dict[str, Any] = {"action": action} if action else {}
        super().__init__(message or translate("permission_denied"), "PERMISSION_DENIED", details)


class PhoneMismatchException(IdentityException):
    """Raised when an authenticated account's phone differs from a transfer's destination."""

    def __init__(self) -> None:
        super().__init__(translate("phone_mismatch"), "PHONE_MISMATCH")


class PinRequiredException(IdentityException):
    """Raised when a session must verify the PIN before the operation."""

    def __init__(self, state: str) -> None:
        super().__init__(translate("pin_required"), "PIN_REQUIRED", {"state": state})


class OwnerAlreadyExistsException(IdentityException):
    """Raised when owner bootstrap runs after an owner exists."""

    def __init__(self) -> None:
        super().__init__(translate("owner_exists"), "OWNER_ALREADY_EXISTS")


class ActiveTransferExistsException(IdentityException):
    """Raised when an owner initiates a transfer while another is still live."""

    def __init__(self) -> None:
        super().__init__(translate("transfer_active"), "TRANSFER_ALREADY_ACTIVE")


class PhoneAlreadyRegisteredException(IdentityException):
    """Raised when a phone number is already bound to another account."""

    def __init__(self) -> None:
        super().__init__(translate("phone_registered"), "PHONE_ALREADY_REGISTERED")


class TransferNotActiveException(IdentityException):
    """Raised when a transfer operation targets a transfer in the wrong or a terminal state."""

    def __init__(self, status: str) -> None:
        """Initialize with the effective status of the transfer.

        Args:
            status: Effective (lazy-expiry applied) transfer status.
        """
        super().__init__(translate("transfer_not_active"), "TRANSFER_NOT_ACTIVE", {"status": status})


class IncorrectPinException(IdentityException):
    """Raised on a wrong PIN below the lockout threshold."""

    def __init__(self, attempts_remaining: int) -> None:
        """Initialize with the attempts left before lockout.

        Args:
            attempts_remaining: Wrong submissions still allowed before lockout.
        """
        super().__init__(
            translate("incorrect_pin", attempts_remaining=attempts_remaining),
            "INCORRECT_PIN",
            {"attempts_remaining": attempts_remaining},
        )


class PinLockedOutException(IdentityException):
    """Raised while PIN entry is locked out after too many failures."""

    def __init__(self, remaining_seconds: int) -> None:
        """Initialize with the remaining lockout time.

        Args:
            remaining_seconds: Whole seconds until PIN entry is accepted again.
        """
        super().__init__(
            translate("pin_locked_out", remaining_seconds=remaining_seconds),
            "PIN_LOCKED_OUT",
            {"remaining_seconds": remaining_seconds},
        )


class PhoneVerificationException(IdentityException):
    """Raised when a phone-proof token fails verification."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "PHONE_VERIFICATION_FAILED")


class ResourceNotFoundException(IdentityException):
    """Raised when a requested resource (account, invite, transfer) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'invite', 'account').
            resource_id: Identifier that was not found.
        """
        super().__init__(
            translate("not_found"),
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UpstreamUnavailableException(IdentityException):
    """Raised when the record store or another upstream fails; surfaced as 'try again'."""

    def __init__(self, operation: str | None = None) -> None:
        details = {"operation": operation} if operation else {}
        super().__init__(translate("try_again"), "UPSTREAM_UNAVAILABLE", details)


class DuplicateValueException(IdentityException):
    """Raised by repositories when a unique field (code, phone, owner role) already holds the value.

    Services translate it into the specific conflict (or regenerate a code once).
    """

    def __init__(self, collection: str, field: str | None = None) -> None:
        details: dict[str, Any] = {"collection": collection}
        if field:
            details["field"] = field
        super().__init__(translate("try_again"), "DUPLICATE_VALUE", details)
