from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Database (defaults to a local SQLite file; point at postgresql+asyncpg:// in prod)
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/tradehub.db"
    AUTO_CREATE_TABLES: bool = True

    # JWT: no default, MUST be set in .env
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7

    # App
    APP_NAME: str = "TradeHub"
    API_PREFIX: str = "/api"
    DEBUG: bool = False  # Also gates DELETE /dev/clear-data
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]
    DEFAULT_AVATAR: str = "/placeholder.svg"


settings = Settings()
