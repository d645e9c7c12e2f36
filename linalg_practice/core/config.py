from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINALG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str
    redis_url: str
    practice_key_secret: str
    app_env: str = "development"
    practice_key_ttl_minutes: int = 30
    practice_key_issuer: str = "linalg-practice"
    session_target_count: int = 10
    history_max_take: int = 200
    progress_missed_limit: int = 20
    progress_recent_sessions: int = 12
    guest_cookie_name: str = "guestId"
    cors_allowed_origins: str = "http://localhost:3000"


settings = Settings()
