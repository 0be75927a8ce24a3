import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "Local Library")
    environment: str = os.getenv("ENVIRONMENT", "development")
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Database
    database_url: str = os.getenv("LOCALLIBRARY_DB", "sqlite:///./locallibrary.db")
    echo_sql: bool = _flag("SQL_ECHO")

    # Logging
    log_level: str = os.getenv("LOCALLIBRARY_LOG", "INFO")

    @property
    def debug(self) -> bool:
        return self.environment == "development"


settings = Settings()
