"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    DATABASE_PATH: str = "database/nooklet.db"
    DOCUMENTS_PATH: str = "documents"

    JWT_SECRET_KEY: str = "dev-insecure-secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7

    BACKBOARD_API_KEY: str = ""
    BACKBOARD_MAX_RETRIES: int = 2
    BACKBOARD_RETRY_BASE_SECONDS: float = 0.5
    BACKBOARD_RETRY_MAX_SECONDS: float = 4.0

    LLM_PROVIDER: str = "openai"
    MODEL_NAME: str = "gpt-5-nano"
    EMBEDDING_PROVIDER: str = "openai"
    EMBEDDING_MODEL: str = "text-embedding-3-small"

    RAG_COLLECTION: str = "chunks_test"
    RAG_CHUNK_SIZE: int = 200
    RAG_CHUNK_OVERLAP: int = 20

    AUTOSAVE_DEBOUNCE_SECONDS: float = 2.0

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3333",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())

        docs_path = Path(self.DOCUMENTS_PATH)
        if not docs_path.is_absolute():
            self.DOCUMENTS_PATH = str((BASE_DIR / docs_path).resolve())

        return self

    @model_validator(mode="after")
    def check_rag_chunking(self):
        if self.RAG_CHUNK_SIZE <= 0:
            raise ValueError("RAG_CHUNK_SIZE must be positive")
        if not 0 <= self.RAG_CHUNK_OVERLAP < self.RAG_CHUNK_SIZE:
            raise ValueError("RAG_CHUNK_OVERLAP must be between 0 and RAG_CHUNK_SIZE")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
