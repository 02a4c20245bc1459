"""
Notes generation through an OpenAI chat completion.

The notes model is fixed by configuration and always called on the OpenAI
API, whichever provider was chosen for transcription.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any

import requests

from .config import AppConfig
from .error_handling import MissingCredentialError, ProviderAPIError
from .models import NotesPrompt

logger = logging.getLogger(__name__)


NOTES_PROMPT_TEMPLATE = """
meeting date: {meeting_date}

give a very detailed report with minutes, decisions, and also write any github issues to be created. use this format and do not add extra fields to the github issues, use this exact format:

# Summary

[summary]

- Date: [yyyy/mm/dd hh:mm]
- Team: Name1, Name2, ... [or None]
- Visitors: Name1, Name2, ... [or None]

# Minutes

## [point 1]

[description]

- [subpoint]
- [subpoint]

## [point 2]

[description]

- [subpoint]
- [subpoint]
- [subpoint]

## [point 3...]

# Decisions

## [point 1]

[description]

- [subpoint]
- [subpoint]

## [point 2]

[description]

- [subpoint]
- [subpoint]
- [subpoint]

## [point 3...]

# GitHub Issues

## [title]

[description and detailed explanation]

- Assignees: Name1, Name2, ... [or None]
- Labels: label1, label2, ...

## [title]

[description and detailed explanation]

- Assignees: Name1, Name2, ... [or None]
- Labels: label1, label2, ...

## [title...]
"""


def build_system_prompt(meeting_date: str) -> str:
    """Render the fixed notes instructions for a meeting date."""
    return NOTES_PROMPT_TEMPLATE.format(meeting_date=meeting_date)


class NotesSummarizer(ABC):
    """Turns a transcript and its meeting date into notes text."""

    @abstractmethod
    def summarize(self, prompt: NotesPrompt) -> str:
        """
        Generate notes for a transcript.

        Returns:
            The notes text, possibly empty
        """


class NotesGenerator(NotesSummarizer):
    """
    Generates meeting notes from a transcript with a single chat completion.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()
        self.api_key = self.config.providers.api_key_for("openai")
        self.model_name = self.config.llm.model_name
        self.base_url = self.config.llm.base_url.rstrip("/")
        self.temperature = self.config.llm.temperature
        self.timeout_seconds = self.config.llm.timeout_seconds

    def summarize(self, prompt: NotesPrompt) -> str:
        """
        Generate notes for a transcript.

        Args:
            prompt: Meeting date and transcript to summarize

        Returns:
            The notes text, empty if the model returned no content

        Raises:
            MissingCredentialError: If no OpenAI API key is configured
            ProviderAPIError: If the chat completion call fails
        """
        if not self.api_key:
            raise MissingCredentialError(
                "OpenAI API key is required for notes generation but is missing."
            )

        messages = prompt.to_messages(build_system_prompt(prompt.meeting_date))
        data = self._call_chat_api(messages)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ProviderAPIError(f"Invalid chat completion response format: {data}")

        return content or ""

    def _call_chat_api(self, messages: list) -> Dict[str, Any]:
        """Call the chat completions endpoint and return the decoded body."""
        payload: Dict[str, Any] = {"model": self.model_name, "messages": messages}
        if self.temperature is not None:
            payload["temperature"] = self.temperature

        try:
            logger.debug(f"Calling chat completions API with model {self.model_name}")
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=self.timeout_seconds,
            )
        except requests.exceptions.Timeout:
            raise ProviderAPIError(
                f"Chat completion request timed out after {self.timeout_seconds}s. "
                "The transcript may be too long."
            )
        except requests.exceptions.ConnectionError as e:
            raise ProviderAPIError(f"Cannot connect to chat API at {self.base_url}: {e}")
        except requests.exceptions.RequestException as e:
            raise ProviderAPIError(f"Network error calling chat API: {e}")

        if response.status_code != 200:
            raise ProviderAPIError(
                f"Chat completion failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderAPIError(f"Invalid JSON response from chat API: {e}")
