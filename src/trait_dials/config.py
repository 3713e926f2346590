from functools import lru_cache
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import MissingConfiguration


class Settings(BaseSettings):
    openai_api_key: Optional[SecretStr] = None
    openai_model: str = "gpt-4o"
    openai_chat_url: str = "https://api.openai.com/v1/chat/completions"

    # Low temperature keeps trait scoring close to deterministic
    generation_temperature: float = 0.2
    generation_timeout: float = 60.0

    document_timeout: float = 20.0
    max_document_bytes: int = 25 * 1024 * 1024
    max_document_pages: int = 40
    max_document_chars: int = 12000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.get_secret_value())

    def require_api_key(self) -> str:
        """Return the plain API key or fail before any upstream call is made."""
        if not self.has_api_key:
            raise MissingConfiguration("Missing OPENAI_API_KEY")
        return self.openai_api_key.get_secret_value()


@lru_cache
def get_settings() -> Settings:
    return Settings()
