from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "TinyURL App"
    app_version: str = "1.0.0"
    secret_key: str = "your-secret-key-here-change-in-production"

    # Public base for building short links
    base_url: str = "http://127.0.0.1:8080"

    # Short code generation
    short_code_length: int = 6
    max_retries: int = 10

    # Credentials
    bcrypt_rounds: int = 12

    # Sessions
    session_cookie_name: str = "session"
    session_max_age: Optional[int] = None  # None = no expiry
    session_cookie_secure: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
