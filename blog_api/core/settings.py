"""Application settings loaded from environment / .env file.

Config precedence (highest to lowest):
    1. Environment variables
    2. ``.env`` file in project root
    3. Defaults defined in this module

Database credentials are never exposed in ``safe_dump()`` or logs.
"""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

# Project root is two levels up from this file (blog_api/core/settings.py)
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DB_PATH = str(_PROJECT_ROOT / "data" / "blog.db")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Document store — override via APP_DB_PATH, or APP_DATABASE_URL for a
    # full SQLAlchemy URL (takes precedence over the path)
    app_db_path: str = _DEFAULT_DB_PATH
    app_database_url: str | None = None

    @property
    def database_url(self) -> str:
        """Effective SQLAlchemy URL for the post store."""
        if self.app_database_url:
            return self.app_database_url
        return f"sqlite:///{self.app_db_path}"

    @model_validator(mode="after")
    def _validate_db_path(self) -> "Settings":
        """Ensure the DB path parent directory exists or can be created."""
        if self.app_database_url:
            return self
        parent = Path(self.app_db_path).parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = (
                f"Cannot create database directory '{parent}': {exc}. "
                f"Set APP_DB_PATH to a writable location."
            )
            raise ValueError(msg) from exc
        return self

    def safe_dump(self) -> dict[str, object]:
        """Return settings dict with credentials masked — safe for logging."""
        return {
            "api_host": self.api_host,
            "api_port": self.api_port,
            "debug": self.debug,
            "log_level": self.log_level,
            "app_db_path": self.app_db_path,
            "database_url": make_url(self.database_url).render_as_string(
                hide_password=True,
            ),
        }


settings = Settings()
