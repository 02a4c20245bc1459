"""Configuration management for the batch meeting notes tool."""

import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field


SUPPORTED_PROVIDERS = ("openai", "groq")
DEFAULT_PROVIDER = "groq"


class ProviderConfig(BaseModel):
    """Transcription provider selection and credentials."""
    provider: str = Field(default=DEFAULT_PROVIDER, description="Transcription provider (openai or groq)")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the configured key for a provider, or None if unset or blank."""
        key = {
            "openai": self.openai_api_key,
            "groq": self.groq_api_key,
        }.get(provider.lower())
        if key is None or not key.strip():
            return None
        return key.strip()


class TranscriptionConfig(BaseModel):
    """Transcription service configuration."""
    openai_model: str = Field(default="whisper-1", description="OpenAI transcription model")
    groq_model: str = Field(default="distil-whisper-large-v3-en", description="Groq transcription model")
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL")
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1", description="Groq OpenAI-compatible base URL")
    timeout_seconds: int = Field(default=300, description="Timeout for transcription requests")


class LLMConfig(BaseModel):
    """Notes generation configuration."""
    model_name: str = Field(default="gpt-4o-mini", description="Chat model used for notes")
    base_url: str = Field(default="https://api.openai.com/v1", description="Chat completions base URL")
    temperature: Optional[float] = Field(default=None, description="Sampling temperature (provider default if None)")
    timeout_seconds: int = Field(default=300, description="Timeout for chat completion requests")


class FileConfig(BaseModel):
    """Artifact locations."""
    input_dir: Path = Field(default=Path("tmp"), description="Directory holding recorded audio")
    output_dir: Path = Field(default=Path("data"), description="Directory holding one folder per work item")
    audio_extension: str = Field(default=".ogg", description="Extension of recorded audio files")
    transcript_filename: str = Field(default="transcript.txt", description="Transcript file name inside an item folder")
    notes_filename: str = Field(default="notes.md", description="Notes file name inside an item folder")


class AppConfig(BaseModel):
    """Main application configuration."""
    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    files: FileConfig = Field(default_factory=FileConfig)

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        config = cls()

        # Credentials
        if os.getenv("OPENAI_API_KEY"):
            config.providers.openai_api_key = os.getenv("OPENAI_API_KEY")
        if os.getenv("GROQ_API_KEY"):
            config.providers.groq_api_key = os.getenv("GROQ_API_KEY")
        if os.getenv("TRANSCRIPTION_PROVIDER"):
            config.providers.provider = os.getenv("TRANSCRIPTION_PROVIDER").lower()

        # LLM settings
        if os.getenv("NOTES_MODEL"):
            config.llm.model_name = os.getenv("NOTES_MODEL")
        if os.getenv("REQUEST_TIMEOUT"):
            timeout = int(os.getenv("REQUEST_TIMEOUT"))
            config.llm.timeout_seconds = timeout
            config.transcription.timeout_seconds = timeout

        # File settings
        if os.getenv("INPUT_DIR"):
            config.files.input_dir = Path(os.getenv("INPUT_DIR"))
        if os.getenv("OUTPUT_DIR"):
            config.files.output_dir = Path(os.getenv("OUTPUT_DIR"))

        return config

    def with_overrides(
        self,
        provider: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        groq_api_key: Optional[str] = None,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
    ) -> "AppConfig":
        """Return a copy with command line values applied over this configuration."""
        config = self.model_copy(deep=True)

        if provider is not None:
            config.providers.provider = provider.lower()
        if openai_api_key is not None:
            config.providers.openai_api_key = openai_api_key
        if groq_api_key is not None:
            config.providers.groq_api_key = groq_api_key
        if input_dir is not None:
            config.files.input_dir = Path(input_dir)
        if output_dir is not None:
            config.files.output_dir = Path(output_dir)

        return config
