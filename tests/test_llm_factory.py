import pytest
from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from config.settings import Settings
from harness.exceptions import ConfigurationError
from models.schemas import ModelConfig, ModelParameters, ProviderConfig
from utils.llm_factory import create_chat_model, supports_temperature


@pytest.fixture
def settings():
    return Settings(
        OPENAI_API_KEY="sk-openai",
        GROQ_API_KEY="gsk-groq",
        ANTHROPIC_API_KEY="sk-ant",
        GEMINI_API_KEY="g-key",
        _env_file=None,
    )


def config(provider, model, api_key=None, **model_params):
    return ModelConfig(
        provider=ProviderConfig(name=provider, api_key=api_key, timeout_ms=5000, max_retries=2),
        model=ModelParameters(name=model, **model_params),
    )


@pytest.mark.parametrize("model_name,expected", [
    ("gpt-4o-mini", True),
    ("gpt-4.1", True),
    ("llama-3.1-8b-instant", True),
    ("openai/gpt-oss-120b", True),
    ("gpt-5-mini", False),
    ("o3-mini", False),
    ("o1", False),
])
def test_supports_temperature(model_name, expected):
    assert supports_temperature(model_name) is expected


def test_openai_model(settings):
    llm = create_chat_model(config("openai", "gpt-4o-mini", max_tokens=256), settings)

    assert isinstance(llm, ChatOpenAI)
    assert llm.model_name == "gpt-4o-mini"
    assert llm.temperature == 0.0
    assert llm.max_tokens == 256
    assert llm.max_retries == 2
    assert llm.openai_api_key.get_secret_value() == "sk-openai"


def test_groq_goes_through_openai_client_with_base_url(settings):
    llm = create_chat_model(config("groq", "llama-3.1-8b-instant"), settings)

    assert isinstance(llm, ChatOpenAI)
    assert llm.openai_api_base == "https://api.groq.com/openai/v1"
    assert llm.openai_api_key.get_secret_value() == "gsk-groq"


def test_explicit_api_key_wins(settings):
    llm = create_chat_model(config("openai", "gpt-4o", api_key="sk-explicit"), settings)
    assert llm.openai_api_key.get_secret_value() == "sk-explicit"


def test_reasoning_model_gets_no_temperature(settings):
    llm = create_chat_model(config("openai", "o3-mini"), settings)
    assert llm.temperature in (None, 1)


def test_anthropic_model(settings):
    llm = create_chat_model(config("anthropic", "claude-3-5-haiku-20241022", max_tokens=300), settings)

    assert isinstance(llm, ChatAnthropic)
    assert llm.max_tokens == 300


@pytest.mark.parametrize("provider", ["google", "vertexai"])
def test_google_models(settings, provider):
    llm = create_chat_model(config(provider, "gemini-2.5-flash", max_tokens=128), settings)

    assert isinstance(llm, ChatGoogleGenerativeAI)
    assert llm.max_output_tokens == 128
    assert llm.thinking_budget == 0


def test_missing_api_key_raises():
    settings = Settings(_env_file=None, OPENAI_API_KEY="")
    with pytest.raises(ConfigurationError) as exc_info:
        create_chat_model(config("openai", "gpt-4o-mini"), settings)
    assert exc_info.value.provider == "openai"


def test_unsupported_provider_raises(settings):
    with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
        create_chat_model(config("mystery", "m1", api_key="key"), settings)
