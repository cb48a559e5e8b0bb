from typing import List, Literal, Optional, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "WatchMatch"
    API_STR: str = "/api"
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BACKEND_CORS_ORIGINS: Union[List[str], str] = []

    # Storage
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///watchmatch.db"

    # Movie catalog (TMDB)
    TMDB_API_KEY: Optional[str] = None
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_TIMEOUT: float = 10.0
    TMDB_MAX_RETRIES: int = 2
    TMDB_RETRY_BACKOFF: float = 0.5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @field_validator("TMDB_MAX_RETRIES")
    @classmethod
    def non_negative_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("TMDB_MAX_RETRIES must be >= 0")
        return v

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, env_ignore_empty=True, extra="ignore"
    )

settings = Settings()
