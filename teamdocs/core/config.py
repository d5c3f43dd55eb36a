from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./teamdocs.db"
    storage_backend: Literal["memory", "sql"] = "memory"
    create_tables: bool = True
    sql_echo: bool = False

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Gemini
    gemini_api_key: str = ""
    gemini_fast_model: str = "gemini-2.5-flash"
    gemini_pro_model: str = "gemini-2.5-pro"
    semantic_relevance_threshold: int = 30

    # Эти адреса получают роль admin при регистрации
    admin_emails: List[str] = []
    recent_activity_limit: int = 10
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
