from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: Literal["dev", "prod", "test"] = "prod"
    DEBUG: bool = False

    # App
    APP_NAME: str = "otp-relay"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Resend (email provider)
    RESEND_API_KEY: SecretStr  # injected from the platform's secret store, never committed
    RESEND_API_URL: str = "https://api.resend.com/emails"
    RESEND_TIMEOUT_SEC: float = 10.0

    # OTP email
    OTP_ALLOWED_EMAIL_DOMAIN: str  # e.g. @thehouston100group.com
    OTP_EMAIL_FROM: str = "Houston 100 Security <security@resend.dev>"
    OTP_EMAIL_SUBJECT: str = "🔐 Houston 100 - Your Verification Code"
    OTP_EXPIRY_MINUTES: int = 5  # display only; expiry is enforced by the caller

    CORS_ALLOW_ORIGIN: str = "*"

    # Logging / Observability
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True
    REQUEST_ID_HEADER: str = "X-Request-ID"

    @field_validator("OTP_ALLOWED_EMAIL_DOMAIN", mode="before")
    @classmethod
    def normalize_domain(cls, v):
        if not isinstance(v, str) or not v.strip().lstrip("@"):
            raise ValueError("OTP_ALLOWED_EMAIL_DOMAIN must name a domain")
        v = v.strip()
        # "@example.com", never a bare "example.com" that "evil-example.com" would match
        return v if v.startswith("@") else f"@{v}"

    @field_validator("RESEND_TIMEOUT_SEC")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("RESEND_TIMEOUT_SEC must be positive")
        return v


def get_settings() -> Settings:
    # slightly faster singleton
    global _SETTINGS_SINGLETON
    try:
        return _SETTINGS_SINGLETON  # type: ignore[name-defined]
    except NameError:
        _SETTINGS_SINGLETON = Settings()  # type: ignore[assignment]
        return _SETTINGS_SINGLETON
