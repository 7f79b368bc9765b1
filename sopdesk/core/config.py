"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (FIREBASE_PROJECT_ID and the Firestore
service account) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (firebase_project_id and a Firestore service account).
    Optional integrations stay disabled while their credentials are unset.
    """

    # App
    app_name: str = "sopdesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # Identity provider (Firebase Auth). Issuer and audience derive from the project id.
    firebase_project_id: str = ""
    firebase_jwks_url: str = (
        "https://www.googleapis.com/service_accounts/v1/jwk/"
        "securetoken@system.gserviceaccount.com"
    )
    jwks_cache_ttl_seconds: int = 600
    jwks_cache_max_entries: int = 5
    jwks_fetch_timeout_seconds: float = 30.0

    # Record store (Firestore): use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Managed identity (Firebase Auth admin operations via the service account).
    managed_identity_enabled: bool = False

    # Admin self-registration: comma-separated emails; empty = any non-employee user.
    admin_email_allowlist: str = ""

    # Keep-alive: ping SERVER_URL/ping on an interval when set.
    server_url: str | None = None
    keep_alive_interval_minutes: int = 14

    # Payment gateway (Cashfree)
    cashfree_app_id: str | None = None
    cashfree_secret: SecretStr | None = None
    cashfree_base_url: str = "https://sandbox.cashfree.com/pg"
    cashfree_api_version: str = "2023-08-01"
    cashfree_webhook_secret: SecretStr | None = None
    payment_timeout_seconds: float = 15.0
    subscription_plan_id: str = "pro"

    # Media storage (S3-compatible bucket, presigned direct uploads)
    media_bucket: str | None = None
    media_region: str = "us-east-1"
    media_endpoint_url: str | None = None
    media_access_key: str | None = None
    media_secret_key: SecretStr | None = None
    media_upload_folder: str = "training"
    media_upload_expiry_seconds: int = 900
    media_max_upload_mb: int = 500

    # Certificate rendering service
    certificate_service_url: str | None = None
    certificate_timeout_seconds: float = 20.0

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # Listing bounds
    recent_sops_limit: int = 3
    system_log_default_limit: int = 50
    system_log_max_limit: int = 200

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env.

        - FIREBASE_PROJECT_ID: token issuer/audience check.
        - FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH: Firestore access.
        """
        if not self.firebase_project_id.strip():
            raise ValueError(
                "FIREBASE_PROJECT_ID is required (Firebase project used as token issuer/audience)."
            )
        has_key = (
            self.firebase_service_account_key
            and self.firebase_service_account_key.get_secret_value()
        )
        if not has_key and not self.firebase_service_account_path:
            raise ValueError(
                "Set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
            )
        return self

    @property
    def admin_emails(self) -> set[str]:
        """Normalized admin allow-list (lowercase); empty when unset."""
        return {
            e.strip().lower()
            for e in self.admin_email_allowlist.split(",")
            if e.strip()
        }

    @property
    def payments_configured(self) -> bool:
        return bool(
            self.cashfree_app_id
            and self.cashfree_secret
            and self.cashfree_secret.get_secret_value()
        )

    @property
    def media_configured(self) -> bool:
        return bool(self.media_bucket)


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
