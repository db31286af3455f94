"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Marketplace Admin API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Firebase
    firebase_credentials_path: str | None = Field(
        default=None,
        alias="FIREBASE_CREDENTIALS_PATH",
        description="Path to Firebase service account JSON file",
    )

    firebase_config_json: str | None = Field(
        default=None,
        alias="FIREBASE_CONFIG_JSON",
        description="Raw JSON string of the Firebase service account",
    )

    firebase_project_id: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")
    firebase_client_email: str | None = Field(default=None, alias="FIREBASE_CLIENT_EMAIL")
    firebase_private_key: str | None = Field(
        default=None,
        alias="FIREBASE_PRIVATE_KEY",
        description="Service account private key, newlines may be escaped as \\n",
    )
    firebase_storage_bucket_name: str | None = Field(
        default=None,
        alias="FIREBASE_STORAGE_BUCKET",
    )

    # Collections
    default_list_limit: int = Field(default=100, alias="DEFAULT_LIST_LIMIT")
    max_list_limit: int = Field(default=1000, alias="MAX_LIST_LIMIT")

    # Uploads
    upload_default_path: str = Field(default="uploads", alias="UPLOAD_DEFAULT_PATH")

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        if isinstance(self.cors_origins_str, str):
            return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]
        return [self.cors_origins_str]

    @property
    def firebase_private_key_pem(self) -> str | None:
        """Private key with escaped newlines restored."""
        if not self.firebase_private_key:
            return None
        return self.firebase_private_key.replace("\\n", "\n")

    @property
    def firebase_storage_bucket(self) -> str | None:
        """Storage bucket name, defaulting to the project's appspot bucket."""
        if self.firebase_storage_bucket_name:
            return self.firebase_storage_bucket_name
        if self.firebase_project_id:
            return f"{self.firebase_project_id}.appspot.com"
        return None

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
