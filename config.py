"""
Application configuration

Settings are read from environment variables (or a local .env file).
The database URI can be given whole through DATABASE_URL, or built from
the DB_* parts the same way the old dbconnection.properties file did.
"""

from functools import lru_cache
from typing import List

from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str = ""
    database_name: str = "VueCourseworkLessons"
    db_prefix: str = "mongodb+srv://"
    db_user: str = ""
    db_password: str = ""
    db_host: str = ""
    db_params: str = ""

    # Collections
    lessons_collection: str = "lessons"
    orders_collection: str = "Orders"
    users_collection: str = "users"
    strict_collections: bool = False

    # HTTP
    cors_origins: List[str] = ["*"]
    static_dir: str = "static"
    json_indent: int = 3
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    @property
    def mongo_uri(self) -> str:
        if self.database_url:
            return self.database_url
        if not self.db_host:
            return "mongodb://localhost:27017"
        credentials = f"{self.db_user}:{self.db_password}" if self.db_user else ""
        return f"{self.db_prefix}{credentials}{self.db_host}{self.db_params}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings
