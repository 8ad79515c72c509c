# whisperer/core/config.py
"""
Environment-driven configuration.

Values are read from the process environment (and a local .env file) into a
single Settings object. Use get_settings() rather than instantiating Settings
directly so the whole process shares one instance.
"""
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    app_name: str = Field("Script Whisperer", alias="APP_NAME")

    # Database
    database_url: Optional[str] = Field(None, alias="DATABASE_URL")
    db_host: Optional[str] = Field(None, alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_name: Optional[str] = Field(None, alias="DB_NAME")
    db_user: Optional[str] = Field(None, alias="DB_USER")
    db_password: Optional[str] = Field(None, alias="DB_PASSWORD")
    db_pool_size: int = Field(20, alias="DB_POOL_SIZE")
    db_pool_timeout: int = Field(2, alias="DB_POOL_TIMEOUT")

    # Object storage. Objects live on local disk under storage_root/storage_bucket;
    # the project id and credentials path are read but unused until a GCS backend exists.
    gcs_project_id: Optional[str] = Field(None, alias="GOOGLE_CLOUD_PROJECT_ID")
    storage_bucket: str = Field("files", alias="GOOGLE_CLOUD_STORAGE_BUCKET")
    gcs_credentials_path: Optional[str] = Field(None, alias="GOOGLE_APPLICATION_CREDENTIALS")
    storage_root: str = Field("uploads", alias="STORAGE_ROOT")

    # OAuth / sessions
    google_client_id: Optional[str] = Field(None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = Field(None, alias="GOOGLE_CLIENT_SECRET")
    oauth_redirect_uri: str = Field("http://localhost:8000/api/auth/callback", alias="OAUTH_REDIRECT_URI")
    session_max_age_days: int = Field(30, alias="SESSION_MAX_AGE_DAYS")

    # LLM providers
    anthropic_api_key: Optional[str] = Field(None, alias="ANTHROPIC_API_KEY")
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    mistral_api_key: Optional[str] = Field(None, alias="MISTRAL_API_KEY")
    retrieval_endpoint: str = Field("http://localhost:8000/api/retrieval/retrieve", alias="RETRIEVAL_ENDPOINT")
    provider_timeout: float = Field(60.0, alias="PROVIDER_TIMEOUT")
    default_claude_model_id: Optional[str] = Field(None, alias="DEFAULT_CLAUDE_MODEL_ID")

    # Admin / debug
    admin_verify_token: Optional[str] = Field(None, alias="ADMIN_VERIFY_TOKEN")
    enable_debug: bool = Field(False, alias="ENABLE_DEBUG")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def sqlalchemy_url(self):
        """
        DATABASE_URL wins; otherwise the DB_* parts are assembled into a
        Postgres URL. With neither, fall back to a local SQLite file.
        """
        if self.database_url:
            return self.database_url
        if self.db_host:
            return URL.create(
                "postgresql+psycopg2",
                username=self.db_user,
                password=self.db_password,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            )
        return "sqlite:///./whisperer.db"

    def env_key_for(self, provider: str) -> Optional[str]:
        return {
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
            "mistral": self.mistral_api_key,
        }.get(provider)


@lru_cache
def get_settings() -> Settings:
    return Settings()
