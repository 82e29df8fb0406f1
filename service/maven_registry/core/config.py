# service/maven_registry/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # General
    ENV: str = "dev"
    APP_NAME: str = "Maven Package Registry"
    API_PREFIX: str = "/api/v4"

    # Storage / DB
    DB_URL: str = "sqlite:///./data/registry/db"
    DB_TIMEOUT_S: float = 30.0
    STORAGE_BACKEND: str = "local"
    BLOB_ROOT: str = "./data/blobs"
    S3_BUCKET: str = ""
    AWS_REGION: str = "us-east-1"
    STORE_TIMEOUT_S: float = 30.0

    # Actor tokens (issued by the external auth service)
    JWT_SECRET: str = "dev-secret-please-change"
    JWT_ISSUER: str = "maven-registry"
    JWT_AUDIENCE: str = "maven-registry-users"
    JWT_EXPIRE_HOURS: int = 24

    # Upload proxy
    UPLOAD_PROXY_SECRET: str = "dev-proxy-secret-please-change"
    UPLOAD_TEMP_PATH: str = "./data/uploads/tmp"
    MAX_UPLOAD_SIZE: int = 0  # 0 = unlimited

    # Feature gates
    PACKAGES_ENABLED: bool = True
    PACKAGES_DISABLED_PROJECTS: List[str] = []
    ALLOW_ANONYMOUS_READ: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

_settings: Settings | None = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
