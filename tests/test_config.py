from pathlib import Path
import pytest

from meeting_batch_notes.config import AppConfig, ProviderConfig


ENV_VARS = [
    "OPENAI_API_KEY", "GROQ_API_KEY", "TRANSCRIPTION_PROVIDER", "NOTES_MODEL",
    "REQUEST_TIMEOUT", "INPUT_DIR", "OUTPUT_DIR",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAppConfig:

    def test_defaults(self, clean_env):
        config = AppConfig.load_from_env()

        assert config.providers.provider == "groq"
        assert config.providers.openai_api_key is None
        assert config.llm.model_name == "gpt-4o-mini"
        assert config.transcription.openai_model == "whisper-1"
        assert config.transcription.groq_model == "distil-whisper-large-v3-en"
        assert config.files.input_dir == Path("tmp")
        assert config.files.output_dir == Path("data")
        assert config.files.audio_extension == ".ogg"

    def test_load_from_env(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("GROQ_API_KEY", "gsk-env")
        clean_env.setenv("TRANSCRIPTION_PROVIDER", "OpenAI")
        clean_env.setenv("NOTES_MODEL", "gpt-4o")
        clean_env.setenv("REQUEST_TIMEOUT", "60")
        clean_env.setenv("INPUT_DIR", "/recordings")

        config = AppConfig.load_from_env()

        assert config.providers.openai_api_key == "sk-env"
        assert config.providers.groq_api_key == "gsk-env"
        assert config.providers.provider == "openai"
        assert config.llm.model_name == "gpt-4o"
        assert config.llm.timeout_seconds == 60
        assert config.transcription.timeout_seconds == 60
        assert config.files.input_dir == Path("/recordings")

    def test_overrides_take_precedence(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        base = AppConfig.load_from_env()

        config = base.with_overrides(provider="OPENAI", openai_api_key="sk-flag", output_dir="out")

        assert config.providers.provider == "openai"
        assert config.providers.openai_api_key == "sk-flag"
        assert config.files.output_dir == Path("out")
        # original untouched
        assert base.providers.openai_api_key == "sk-env"
        assert base.files.output_dir == Path("data")

    def test_none_overrides_keep_values(self, clean_env):
        clean_env.setenv("GROQ_API_KEY", "gsk-env")

        config = AppConfig.load_from_env().with_overrides()

        assert config.providers.groq_api_key == "gsk-env"
        assert config.providers.provider == "groq"


class TestProviderConfig:

    def test_api_key_for(self):
        providers = ProviderConfig(openai_api_key=" sk-test ", groq_api_key="  ")

        assert providers.api_key_for("openai") == "sk-test"
        assert providers.api_key_for("OPENAI") == "sk-test"
        assert providers.api_key_for("groq") is None
        assert providers.api_key_for("azure") is None
