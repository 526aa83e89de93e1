import pytest

from config.config import Config
from orchestrator.search_orchestrator import create_search_orchestrator

GROK_ENV = [
    "XAI_API_KEY",
    "GROK_TIMEOUT",
    "GROK_MAX_RETRIES",
    "GROK_MODEL",
    "GROK_CACHE_MAX_SIZE",
    "GROK_CACHE_TTL_MINUTES",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in GROK_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = Config()
    assert config.XAI_API_KEY is None
    assert config.GROK_TIMEOUT_MS == 30000
    assert config.GROK_MAX_RETRIES == 3
    assert config.GROK_MODEL == "grok-3-latest"
    assert config.GROK_CACHE_MAX_SIZE == 100
    assert config.GROK_CACHE_TTL_MINUTES == 30
    assert config.validate() is False


def test_environment_overrides(clean_env):
    clean_env.setenv("XAI_API_KEY", "xai-123")
    clean_env.setenv("GROK_TIMEOUT", "5000")
    clean_env.setenv("GROK_MAX_RETRIES", "1")
    clean_env.setenv("GROK_MODEL", "grok-4")

    config = Config()
    assert config.validate() is True
    assert config.GROK_TIMEOUT_MS == 5000
    assert config.GROK_MAX_RETRIES == 1
    assert config.get_model_info() == "xAI Grok (grok-4)"


@pytest.mark.parametrize("name,value", [("GROK_TIMEOUT", "soon"), ("GROK_MAX_RETRIES", "-1")])
def test_bad_numbers_are_rejected(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        Config()


def test_orchestrator_from_config(clean_env):
    clean_env.setenv("XAI_API_KEY", "xai-123")
    clean_env.setenv("GROK_TIMEOUT", "1500")
    clean_env.setenv("GROK_MAX_RETRIES", "2")

    orchestrator = create_search_orchestrator(Config())

    assert orchestrator.client.is_healthy
    assert orchestrator.client.timeout_ms == 1500
    assert orchestrator.client.max_retries == 2
    assert orchestrator.check_health()["cache_size"] == 0


def test_orchestrator_without_key_is_unhealthy(clean_env):
    orchestrator = create_search_orchestrator(Config())
    assert orchestrator.client.client is None
    assert orchestrator.check_health() == {
        "healthy": False,
        "has_api_key": False,
        "cache_size": 0,
        "last_error": None,
    }
