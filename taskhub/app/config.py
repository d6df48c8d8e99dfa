from functools import lru_cache
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Relational store (Postgres in production, SQLite for local runs)
    database_url: str = Field("sqlite:///./taskhub.db")

    # nsqd HTTP address; TCP port 4150 is not used, only the /pub endpoint on 4151
    nsqd_url: str = Field("http://127.0.0.1:4151")
    task_updates_topic: str = Field("task_updates")
    publish_timeout_sec: float = Field(5.0)

    # "nsq" talks to nsqd, "memory" keeps messages in-process (local runs, tests)
    publisher_backend: str = Field("nsq")

    # CORS_ALLOW_ORIGINS=https://a.example,https://b.example
    cors_allow_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])

    app_log_level: str = Field("INFO")

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        if isinstance(v, str):
            origins = [item.strip() for item in v.split(",") if item.strip()]
            return origins or ["*"]
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()
