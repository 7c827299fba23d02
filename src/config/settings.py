import uuid
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    port: int = 3001
    host: str = "127.0.0.1"
    debug: bool = False
    log_level: str = "info"
    json_logs: bool = False

    api_base_url: str = "https://api.uprockverify.com"
    api_key: str | None = None
    timeout_ms: int = Field(default=180000, gt=0)

    default_region: str = Field(default="NA", pattern=r"^(NA|EU|AS|AF|OC|SA)$")
    history_page_size: int = Field(default=10, ge=1, le=50)
    show_notifications: bool = True

    # Client identification headers
    extension_version: str = "1.0.1"
    app_name: str = "uprock-verify-python"
    machine_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    session_id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VERIFY_",
        extra="ignore",
    )

    @model_validator(mode="after")
    def strip_base_url(self) -> "Settings":
        self.api_base_url = self.api_base_url.rstrip("/")
        return self

    @model_validator(mode="after")
    def blank_api_key(self) -> "Settings":
        # An empty VERIFY_API_KEY= line in .env means "not configured"
        if self.api_key is not None and not self.api_key.strip():
            self.api_key = None
        return self

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
