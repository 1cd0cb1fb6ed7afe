from __future__ import annotations

from brandbox.config import DEFAULT_GROQ_MODEL, DEFAULT_OLLAMA_BASE_URL, Settings, load_settings


def test_defaults_from_empty_environment():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.ollama_base_url == DEFAULT_OLLAMA_BASE_URL
    assert settings.groq_model == DEFAULT_GROQ_MODEL
    assert settings.hosted is False
    assert settings.local_allowed is True


def test_environment_values_are_read_and_normalized():
    settings = load_settings(
        {
            "OPENAI_API_KEY": " sk-test ",
            "GROQ_API_KEY": "gk",
            "GROQ_MODEL": "mixtral-8x7b-32768",
            "OLLAMA_BASE_URL": "http://box:11434/",
            "OLLAMA_MODEL": "phi3:mini",
            "AI_PROVIDER": "Groq",
            "PEXELS_API_KEY": "px",
            "VERCEL": "1",
            "BRANDBOX_LOG_LEVEL": "debug",
        }
    )
    assert settings.openai_api_key == "sk-test"
    assert settings.has_openai and settings.has_groq and settings.has_pexels
    assert settings.groq_model == "mixtral-8x7b-32768"
    assert settings.ollama_base_url == "http://box:11434"
    assert settings.ollama_model == "phi3:mini"
    assert settings.provider_override == "groq"
    assert settings.hosted is True
    assert settings.log_level == "DEBUG"


def test_local_model_gate():
    assert Settings(openai_api_key="sk").local_allowed is False
    assert Settings(groq_api_key="gk").local_allowed is False
    assert Settings(groq_api_key="gk", provider_override="ollama").local_allowed is True
    assert Settings(openai_api_key="sk", provider_override="ollama").local_allowed is True
    assert Settings(hosted=True, provider_override="ollama").local_allowed is False
    assert load_settings({"VERCEL": "0"}).hosted is False
