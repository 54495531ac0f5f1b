from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./collabdocs.db"
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Connection pool and lock waits, in seconds
    db_pool_size: int = 10
    db_acquire_timeout: float = 10.0
    db_lock_timeout: float = 5.0
    sql_echo: bool = False
    auto_create_schema: bool = True

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
