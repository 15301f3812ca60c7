from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "repodiagram"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    # Any OpenAI-compatible chat completions endpoint.
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str | None = None
    MODEL_DEFAULT: str = "gpt-4-turbo"
    LLM_TEMPERATURE: float = 0.2
    LLM_MAX_TOKENS: int = 4000

    GITHUB_TOKEN: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_WEB_URL: str = "https://github.com"
    GITHUB_USER_AGENT: str = "repodiagram"
    GITHUB_TIMEOUT_SECONDS: float = 30.0

    CACHE_BACKEND: Literal["sql", "memory"] = "sql"
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./repodiagram.db"

    COMPLETE_TTL_SECONDS: int = 60 * 60 * 24 * 7
    ERROR_TTL_SECONDS: int = 60 * 60 * 24
    # 0 keeps pending records until a terminal write lands.
    PENDING_TTL_SECONDS: int = 60 * 60
    CACHE_PURGE_INTERVAL_SECONDS: float = 300.0

    WORKER_ENABLED: bool = True
    WORKER_BATCH_SIZE: int = 10
    WORKER_POLL_SECONDS: float = 5.0


settings = Settings()  # type: ignore
