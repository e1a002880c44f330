"""Core constants: session-state key prefixes and shared literal values.

Single source of truth for session-state key structure (DRY). Used by
the session stores in app.infrastructure.session.
"""

# Session-state key prefixes (used with :sid or :device_id)
SESSION_PREFIX_PIN = "pin_session"
SESSION_PREFIX_REMEMBERED = "remembered"

# Delimiter for composite keys
SESSION_KEY_SEP = ":"

# Auth-email surrogate domain required by the record store's auth model
AUTH_EMAIL_DOMAIN = "phone.local"

# Remembered identity (name + masked phone) lives this long per device
REMEMBERED_TTL_SECONDS = 30 * 24 * 3600

# Singleton app_config record id
APP_CONFIG_ID = "app_config_main"
