"""User-facing message catalog.

Every failure path returns a human-readable, localized message. Keys are
stable; the locale comes from settings.app_locale. Spanish texts follow the
original app; English is provided for operators and tests.
"""

from app.core.config import get_settings

MESSAGES: dict[str, dict[str, str]] = {
    # Validation
    "invalid_phone": {
        "es": "Numero de telefono invalido",
        "en": "Invalid phone number",
    },
    "invalid_pin_format": {
        "es": "El PIN debe ser de 4 digitos",
        "en": "PIN must be 4 digits",
    },
    "invalid_name": {
        "es": "El nombre debe tener entre 2 y 100 caracteres",
        "en": "Name must be between 2 and 100 characters",
    },
    "invalid_password": {
        "es": "La contrasena debe tener al menos 8 caracteres",
        "en": "Password must be at least 8 characters",
    },
    "invalid_role": {
        "es": "Rol invalido",
        "en": "Invalid role",
    },
    "same_phone": {
        "es": "El nuevo numero debe ser diferente al actual",
        "en": "The new number must be different from the current one",
    },
    "transfer_to_self": {
        "es": "No puedes transferir el negocio a tu propio numero",
        "en": "You cannot transfer the business to your own number",
    },
    # Codes
    "invalid_code": {
        "es": "Codigo invalido o expirado",
        "en": "Invalid or expired code",
    },
    "invite_already_used": {
        "es": "La invitacion ya fue utilizada",
        "en": "The invite has already been used",
    },
    # Authentication
    "not_authenticated": {
        "es": "No autorizado",
        "en": "Not authorized",
    },
    "invalid_session": {
        "es": "Sesion invalida",
        "en": "Invalid session",
    },
    "invalid_credentials": {
        "es": "Telefono o contrasena incorrectos",
        "en": "Invalid phone number or password",
    },
    "account_disabled": {
        "es": "Tu cuenta esta desactivada",
        "en": "Your account is disabled",
    },
    # Authorization
    "permission_denied": {
        "es": "No tienes permiso para realizar esta accion",
        "en": "You do not have permission to perform this action",
    },
    "owner_only": {
        "es": "Solo el propietario puede realizar esta accion",
        "en": "Only the owner can perform this action",
    },
    "phone_mismatch": {
        "es": "Este codigo no es para tu cuenta",
        "en": "This code is not for your account",
    },
    # PIN
    "pin_required": {
        "es": "Ingresa tu PIN para continuar",
        "en": "Enter your PIN to continue",
    },
    "incorrect_pin": {
        "es": "PIN incorrecto. {attempts_remaining} intento(s) restante(s)",
        "en": "Incorrect PIN. {attempts_remaining} attempt(s) remaining",
    },
    "pin_locked_out": {
        "es": "Demasiados intentos fallidos. Espera {remaining_seconds} segundos",
        "en": "Too many failed attempts. Wait {remaining_seconds} seconds",
    },
    "pin_not_set": {
        "es": "PIN no configurado",
        "en": "PIN not configured",
    },
    # Conflicts
    "owner_exists": {
        "es": "El negocio ya tiene un propietario registrado",
        "en": "The business already has a registered owner",
    },
    "phone_registered": {
        "es": "Este numero ya esta registrado",
        "en": "This number is already registered",
    },
    "transfer_active": {
        "es": "Ya tienes una transferencia pendiente. Cancelala antes de crear otra",
        "en": "You already have a pending transfer. Cancel it before creating another",
    },
    "transfer_not_active": {
        "es": "La transferencia ya no esta activa",
        "en": "The transfer is no longer active",
    },
    "transfer_recipient_disabled": {
        "es": "La cuenta que recibe el negocio esta desactivada",
        "en": "The receiving account is disabled",
    },
    # Phone proof
    "phone_token_malformed": {
        "es": "Token de verificacion invalido",
        "en": "Malformed verification token",
    },
    "phone_token_expired": {
        "es": "La verificacion expiro. Solicita un nuevo codigo",
        "en": "Verification expired. Request a new code",
    },
    "phone_token_future": {
        "es": "Token de verificacion emitido en el futuro",
        "en": "Verification token issued in the future",
    },
    "phone_token_issuer": {
        "es": "Emisor de verificacion no reconocido",
        "en": "Unrecognized verification issuer",
    },
    "phone_token_audience": {
        "es": "Verificacion emitida para otra aplicacion",
        "en": "Verification issued for another application",
    },
    "phone_token_no_phone": {
        "es": "La verificacion no incluye un numero de telefono",
        "en": "Verification does not include a phone number",
    },
    "phone_token_mismatch": {
        "es": "El numero verificado no coincide",
        "en": "The verified number does not match",
    },
    # Not found / infrastructure
    "not_found": {
        "es": "No encontrado",
        "en": "Not found",
    },
    "try_again": {
        "es": "Error del servidor. Intenta de nuevo",
        "en": "Server error. Please try again",
    },
    "too_many_attempts": {
        "es": "Demasiados intentos. Intenta mas tarde",
        "en": "Too many attempts. Try again later",
    },
    "request_invalid": {
        "es": "Solicitud invalida",
        "en": "Invalid request",
    },
}


def translate(key: str, **params: object) -> str:
    """Return the message for key in the configured locale, formatted with params.

    Falls back to Spanish when the locale has no entry, and to the key itself
    when the key is unknown.
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    locale = get_settings().app_locale
    template = entry.get(locale) or entry["es"]
    return template.format(**params) if params else template
