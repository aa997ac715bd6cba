from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    MONGODB_URI: str = "mongodb://mongodb:27017"
    MONGODB_DB_NAME: str = "collabhub"
    # Multi-document transactions need a replica set or sharded cluster.
    # Standalone servers fall back to sequential writes.
    MONGODB_USE_TRANSACTIONS: bool = False

    ACCESS_TOKEN_SECRET: str = "change_me_access"
    ACCESS_TOKEN_EXPIRE_MIN: int = 60 * 24
    REFRESH_TOKEN_SECRET: str = "change_me_refresh"
    REFRESH_TOKEN_EXPIRE_MIN: int = 60 * 24 * 10
    JWT_ALG: str = "HS256"
    COOKIE_SECURE: bool = True

    # Local storage is used unless an object store upload endpoint is configured
    STORAGE_DIR: str = "storage"
    PUBLIC_FILE_BASE_URL: str = "/files"
    OBJECT_STORE_UPLOAD_URL: str | None = None
    OBJECT_STORE_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Read from environment variables first, then from .env file, then use defaults
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
