from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # database
    DATABASE_URL: str = "sqlite:///./askify.db"
    DB_ECHO: bool = False

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT: float = 60.0

    # uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    PDF_PAGE_LIMIT: int = 10

    # sessions
    SESSION_COOKIE_NAME: str = "askify_session"
    SESSION_TTL_DAYS: int = 30

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
