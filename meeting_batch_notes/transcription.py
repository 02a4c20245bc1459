import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import requests

from .config import AppConfig, TranscriptionConfig
from .error_handling import (
    MissingCredentialError, ProviderAPIError, UnsupportedProviderError
)


logger = logging.getLogger(__name__)


class Transcriber(ABC):
    """Turns one audio file into transcript text."""

    provider_name: str = "unknown"

    @abstractmethod
    def transcribe(self, audio_file: Path) -> str:
        """
        Transcribe an audio file to text.

        Args:
            audio_file: Path to the audio file

        Returns:
            The transcript text, possibly empty

        Raises:
            FileNotFoundError: If audio file doesn't exist
            ProviderAPIError: If the provider call fails
        """


class HTTPTranscriber(Transcriber):
    """Transcriber for OpenAI-compatible ``/audio/transcriptions`` endpoints."""

    def __init__(self, api_key: str, model_name: str, base_url: str, timeout_seconds: int = 300):
        if not api_key:
            raise MissingCredentialError(f"API key for provider '{self.provider_name}' is missing.")
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def transcribe(self, audio_file: Path) -> str:
        audio_file = Path(audio_file)
        if not audio_file.is_file():
            raise FileNotFoundError(f"Audio file not found: {audio_file}")

        url = f"{self.base_url}/audio/transcriptions"
        logger.debug(f"Calling {self.provider_name} transcription API with model {self.model_name}")

        try:
            with open(audio_file, "rb") as f:
                response = requests.post(
                    url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    files={"file": (audio_file.name, f)},
                    data={"model": self.model_name},
                    timeout=self.timeout_seconds,
                )
        except requests.exceptions.Timeout:
            raise ProviderAPIError(
                f"{self.provider_name} transcription request timed out after {self.timeout_seconds}s"
            )
        except requests.exceptions.ConnectionError as e:
            raise ProviderAPIError(f"Cannot connect to {self.provider_name} at {self.base_url}: {e}")
        except requests.exceptions.RequestException as e:
            raise ProviderAPIError(f"Network error calling {self.provider_name}: {e}")

        if response.status_code != 200:
            raise ProviderAPIError(
                f"{self.provider_name} transcription failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderAPIError(f"Invalid JSON response from {self.provider_name}: {e}")

        text = data.get("text") or ""
        logger.info(f"Transcribed {audio_file.name} with {self.provider_name} ({len(text)} characters)")
        return text


class OpenAITranscriber(HTTPTranscriber):
    provider_name = "openai"

    @classmethod
    def from_config(cls, api_key: str, config: TranscriptionConfig) -> "OpenAITranscriber":
        return cls(api_key, config.openai_model, config.openai_base_url, config.timeout_seconds)


class GroqTranscriber(HTTPTranscriber):
    provider_name = "groq"

    @classmethod
    def from_config(cls, api_key: str, config: TranscriptionConfig) -> "GroqTranscriber":
        return cls(api_key, config.groq_model, config.groq_base_url, config.timeout_seconds)


TRANSCRIBERS = {
    "openai": OpenAITranscriber,
    "groq": GroqTranscriber,
}


def create_transcriber(provider: str, config: Optional[AppConfig] = None) -> Transcriber:
    """
    Build the transcriber for a provider.

    Args:
        provider: Provider name ("openai" or "groq", case-insensitive)
        config: Application configuration holding credentials and models

    Raises:
        UnsupportedProviderError: If there is no transcriber for the provider
        MissingCredentialError: If the provider's API key is not configured
    """
    config = config or AppConfig()
    key = provider.lower()

    transcriber_cls = TRANSCRIBERS.get(key)
    if transcriber_cls is None:
        raise UnsupportedProviderError(f"Unsupported provider: {provider}")

    api_key = config.providers.api_key_for(key)
    if not api_key:
        raise MissingCredentialError(f"API key for provider '{key}' is missing.")

    return transcriber_cls.from_config(api_key, config.transcription)
