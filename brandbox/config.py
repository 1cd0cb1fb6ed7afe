import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from a local .env file if present.
load_dotenv()

# Every outbound call shares the hosting request's end-to-end budget.
REQUEST_TIMEOUT_S = 60.0

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_IMAGE_MODEL = "gpt-image-1"
DEFAULT_GROQ_MODEL = "llama3-8b-8192"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2:1b"

# Values of AI_PROVIDER that turn every copy provider off.
DISABLED_PROVIDER_VALUES = ("demo", "fallback", "none")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup and passed down explicitly."""

    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_image_model: str = DEFAULT_OPENAI_IMAGE_MODEL
    groq_api_key: str = ""
    groq_model: str = DEFAULT_GROQ_MODEL
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    provider_override: str = ""
    pexels_api_key: str = ""
    hosted: bool = False
    log_level: str = "INFO"

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_groq(self) -> bool:
        return bool(self.groq_api_key)

    @property
    def has_pexels(self) -> bool:
        return bool(self.pexels_api_key)

    @property
    def local_allowed(self) -> bool:
        """The local model is unreachable from a hosted deployment, so it is never tried there."""
        if self.hosted:
            return False
        if self.provider_override:
            return self.provider_override == "ollama"
        return not (self.has_openai or self.has_groq)


def _get(env: Mapping[str, str], name: str, default: str = "") -> str:
    return (env.get(name) or default).strip()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the process environment (or an explicit mapping in tests)."""
    env = os.environ if environ is None else environ
    return Settings(
        openai_api_key=_get(env, "OPENAI_API_KEY"),
        openai_model=_get(env, "OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        openai_image_model=_get(env, "OPENAI_IMAGE_MODEL", DEFAULT_OPENAI_IMAGE_MODEL),
        groq_api_key=_get(env, "GROQ_API_KEY"),
        groq_model=_get(env, "GROQ_MODEL", DEFAULT_GROQ_MODEL),
        ollama_base_url=_get(env, "OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL).rstrip("/"),
        ollama_model=_get(env, "OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL),
        provider_override=_get(env, "AI_PROVIDER").lower(),
        pexels_api_key=_get(env, "PEXELS_API_KEY"),
        hosted=_get(env, "VERCEL") == "1",
        log_level=_get(env, "BRANDBOX_LOG_LEVEL", "INFO").upper(),
    )
