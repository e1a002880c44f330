"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-dependent fields (PocketBase superuser
credentials, Twilio credentials, SECRET_KEY) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required_backends (secret_key always; store and notification
    credentials depending on the selected backend).
    """

    # App
    app_name: str = "pos-identity"
    app_version: str = "1.0.0"
    debug: bool = False
    # Locale for user-facing messages ("es" or "en").
    app_locale: str = "es"
    # Public URL used in invite / transfer links sent over WhatsApp.
    public_app_url: str = "https://mrchifles.vercel.app"

    # Record store: "pocketbase" (REST, elevated superuser credentials) or "memory" (dev/tests)
    record_store_backend: str = "pocketbase"
    pocketbase_url: str = "http://127.0.0.1:8090"
    pocketbase_admin_email: str = ""
    pocketbase_admin_password: SecretStr = SecretStr("")
    store_timeout_seconds: float = 10.0

    # Security (bearer session tokens)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # PIN guard
    pin_hash_prefix: str = "mrchifles_pin_v1_"
    pin_max_attempts: int = 3
    pin_lockout_seconds: int = 30
    pin_idle_timeout_seconds: int = 300

    # Phone-proof tokens (Firebase phone auth ID tokens)
    phone_auth_project_id: str = ""
    phone_auth_issuer_prefix: str = "https://securetoken.google.com/"
    phone_auth_clock_skew_seconds: int = 60

    # Codes: alphabet for invite/transfer codes (A-Z0-9, no characters excluded)
    code_alphabet: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

    # Session state: "memory" (single process) or "redis"
    session_store_backend: str = "memory"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # Notifications: "whatsapp" (Twilio) or "log"
    notification_backend: str = "log"
    twilio_account_sid: str = ""
    twilio_auth_token: SecretStr = SecretStr("")
    twilio_whatsapp_number: str = "whatsapp:+14155238886"
    notification_timeout_seconds: float = 10.0

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Request / middleware
    request_timeout_seconds: int = 30
    request_id_header: str = "X-Request-ID"
    device_id_header: str = "X-Device-ID"
    max_request_size: int = 64 * 1024

    # Rate limiting (per client key) for public code validation
    code_validation_attempts: int = 10
    code_validation_window_seconds: int = 60

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def phone_auth_issuer(self) -> str:
        """Expected `iss` claim of phone-proof tokens."""
        return f"{self.phone_auth_issuer_prefix}{self.phone_auth_project_id}"

    @model_validator(mode="after")
    def validate_required_backends(self) -> "Settings":
        """Validate required env per selected backend.

        - PocketBase: POCKETBASE_ADMIN_EMAIL and POCKETBASE_ADMIN_PASSWORD required.
        - Redis session store: nothing extra (host/port have defaults).
        - WhatsApp notifications: TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN required.
        """
        if self.record_store_backend == "pocketbase":
            if not self.pocketbase_admin_email or not self.pocketbase_admin_password.get_secret_value():
                raise ValueError(
                    "When record_store_backend is 'pocketbase', set POCKETBASE_ADMIN_EMAIL "
                    "and POCKETBASE_ADMIN_PASSWORD (superuser used for server-side operations)."
                )
        elif self.record_store_backend != "memory":
            raise ValueError(
                f"record_store_backend must be 'pocketbase' or 'memory', got: {self.record_store_backend!r}"
            )
        if self.session_store_backend not in ("memory", "redis"):
            raise ValueError(
                f"session_store_backend must be 'memory' or 'redis', got: {self.session_store_backend!r}"
            )
        if self.notification_backend == "whatsapp":
            if not self.twilio_account_sid or not self.twilio_auth_token.get_secret_value():
                raise ValueError(
                    "When notification_backend is 'whatsapp', set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN."
                )
        elif self.notification_backend != "log":
            raise ValueError(
                f"notification_backend must be 'whatsapp' or 'log', got: {self.notification_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.app_locale not in ("es", "en"):
            raise ValueError(f"app_locale must be 'es' or 'en', got: {self.app_locale!r}")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
