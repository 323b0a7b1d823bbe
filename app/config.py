import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict


OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.5
DEFAULT_MAX_TOKENS = 1000


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _env_timeout(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return float(raw)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    completions_url: str = OPENAI_CHAT_COMPLETIONS_URL
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    # None waits on the remote endpoint indefinitely.
    timeout: Optional[float] = None
    render_raw_html: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            api_key=os.getenv("OPENAI_API_KEY"),
            completions_url=os.getenv("OPENAI_CHAT_COMPLETIONS_URL", OPENAI_CHAT_COMPLETIONS_URL),
            model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
            temperature=float(os.getenv("OPENAI_TEMPERATURE", DEFAULT_TEMPERATURE)),
            max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            timeout=_env_timeout("OPENAI_TIMEOUT"),
            render_raw_html=_env_flag("FORMATTER_RENDER_RAW_HTML"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


__all__ = [
    "OPENAI_CHAT_COMPLETIONS_URL",
    "DEFAULT_MODEL",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
    "Settings",
    "get_settings",
]
