"""Session-state key builders. Single place for key format (DRY).

Key components (sid, device_id) must not contain SESSION_KEY_SEP to avoid
ambiguous or colliding keys.
"""

from app.core.constants import (
    SESSION_KEY_SEP,
    SESSION_PREFIX_PIN,
    SESSION_PREFIX_REMEMBERED,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the key separator."""
    if not value:
        raise ValueError(f"Session key component {name!r} must not be empty")
    if SESSION_KEY_SEP in value:
        raise ValueError(
            f"Session key component {name!r} must not contain separator {SESSION_KEY_SEP!r}"
        )


def pin_session_key(sid: str) -> str:
    """Key for PIN guard state of one login session."""
    _validate_key_component(sid, "sid")
    return f"{SESSION_PREFIX_PIN}{SESSION_KEY_SEP}{sid}"


def remembered_identity_key(device_id: str) -> str:
    """Key for the remembered identity of one device."""
    _validate_key_component(device_id, "device_id")
    return f"{SESSION_PREFIX_REMEMBERED}{SESSION_KEY_SEP}{device_id}"
