from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "ClubHub API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Empty string = "not set". Validators below reject blank values so a
    # missing env var is caught at startup with a clear error message.
    DATABASE_URL: str = ""

    LOG_LEVEL: str = "INFO"

    # Comma-separated string of allowed CORS origins.
    # In .env: ALLOWED_ORIGINS=https://clubhub.lk,http://localhost:8501
    # Kept as str to avoid pydantic-settings attempting JSON parsing on list fields.
    ALLOWED_ORIGINS: str = ""

    # ── Auth ────────────────────────────────────────────────────────────────
    # JWT — used by the admin dashboard and event management
    JWT_SECRET_KEY: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Admin credentials (single account, no DB required)
    # Generate password hash with: python -c "import bcrypt; print(bcrypt.hashpw('yourpassword'.encode(), bcrypt.gensalt()).decode())"
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD_HASH: str = ""

    # ── Image host (avatar uploads) ─────────────────────────────────────────
    IMAGE_HOST_CLOUD_NAME: str = ""
    IMAGE_HOST_UPLOAD_PRESET: str = ""
    IMAGE_HOST_TIMEOUT_SECONDS: float = 30.0

    FEEDBACK_MAX_LIMIT: int = 50

    RATE_LIMIT_ENABLED: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("ALLOWED_ORIGINS")
    @classmethod
    def allowed_origins_must_not_be_empty(cls, v: str) -> str:
        origins = [o.strip() for o in v.split(",") if o.strip()]
        if not origins:
            raise ValueError(
                "ALLOWED_ORIGINS is required. "
                "Set it in .env as a comma-separated list: "
                "ALLOWED_ORIGINS=https://clubhub.lk,http://localhost:8501"
            )
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def database_url_must_be_asyncpg(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("DATABASE_URL is required")
        if not v.startswith("postgresql+asyncpg://"):
            raise ValueError(
                "DATABASE_URL must use the 'postgresql+asyncpg://' scheme. "
                f"Got: '{v}'"
            )
        return v

    @field_validator("JWT_SECRET_KEY", "ADMIN_USERNAME", "ADMIN_PASSWORD_HASH")
    @classmethod
    def auth_fields_must_not_be_empty(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"{info.field_name} is required and must not be empty")
        return v

    @field_validator("IMAGE_HOST_TIMEOUT_SECONDS")
    @classmethod
    def image_host_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(
                f"IMAGE_HOST_TIMEOUT_SECONDS must be greater than 0. Got: {v}"
            )
        return v

    @field_validator("FEEDBACK_MAX_LIMIT")
    @classmethod
    def feedback_limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"FEEDBACK_MAX_LIMIT must be at least 1. Got: {v}")
        return v


settings = Settings()
