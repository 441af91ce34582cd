from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Database Configuration
    DB_USER: str = "root"
    DB_PASSWORD: str = "root"
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "formwave"
    DATABASE_URL: Optional[str] = None  # Full URL override, e.g. sqlite:// for tests

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # JWT Configuration
    ACCESS_TOKEN_EXP_TIME: int = 15
    SECRET_KEY: str
    ALGORITHM: str = 'HS256'
    REFRESH_TOKEN_EXP_TIME: int = 60 * 24
    REFRESH_SECRET_KEY: str

    # Public link of a published form, "{base}/{form_id}"
    PUBLIC_FORM_BASE_URL: str = "http://localhost:3000/forms"

    CORS_ORIGINS: List[str] = ["*"]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_TO_FILE: bool = True
    LOG_DIR: str = "logs"


# Global settings instance
settings = Settings()
