from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "Vendor Empanelment API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")

    # Database (MySQL/Postgres via async drivers or SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./empanelment_dev.db",
        alias="DATABASE_URL",
    )
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=0, alias="DB_MAX_OVERFLOW")
    auto_create_schema: bool = Field(default=False, alias="AUTO_CREATE_SCHEMA")

    # Document storage
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    max_files_per_submission: int = Field(default=5, alias="MAX_FILES_PER_SUBMISSION")
    max_upload_size_mb: int = Field(default=10, alias="MAX_UPLOAD_SIZE_MB")

    # Bearer tokens
    jwt_secret: str = Field(default="change-me-in-production", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expiry_minutes: int = Field(default=60, alias="JWT_EXPIRY_MINUTES")

    # Review workflow
    require_rejection_reason: bool = Field(
        default=True, alias="REQUIRE_REJECTION_REASON",
    )  # Rejected applications must carry a non-empty reason

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

settings = Settings()
