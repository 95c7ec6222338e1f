from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/nomadmatch.db"
    openai_api_key: str = ""
    app_password: str = "changeme"
    secret_key: str = "dev-secret-key-change-in-production"
    log_level: str = "INFO"

    # Frontend origins allowed by CORS
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Ranking provider: "openai" or "mock"
    ranking_provider: str = "openai"
    ranking_model: str = "gpt-3.5-turbo"
    ranking_temperature: float = 0.7
    ranking_timeout_seconds: float = 30.0

    # Candidate pool: at most this many profiles go into one prompt
    candidate_pool_size: int = 20

    # Optional JSON file overriding the built-in dating question catalog
    dating_questions_path: str = ""

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
