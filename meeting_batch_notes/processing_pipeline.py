"""
Idempotent processing pipeline for one work item.

Audio is turned into a transcript, and the transcript into notes. A stage
only runs when its output is missing, so running the pipeline again over a
finished item reads the stored artifacts and makes no external calls.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .date_parser import parse_date_string_safe
from .error_handling import (
    NotesGenerationFailedError, ProcessingError, TranscriptionFailedError,
    handle_processing_error
)
from .file_manager import ArtifactStore
from .models import NotesPrompt, ProcessingResult
from .notes_generator import NotesSummarizer
from .transcription import Transcriber

logger = logging.getLogger(__name__)

UNKNOWN_DATE = "unknown"


def choose_display_date(
    audio_modified_at: Optional[datetime],
    name: str,
    transcript_modified_at: Optional[datetime],
    date_parser: Callable[[str], Optional[datetime]] = parse_date_string_safe
) -> str:
    """
    Pick the meeting date shown in the notes prompt.

    Preference order: audio modification time, a date parsed from the work
    item name, transcript modification time, then "unknown".
    """
    date = audio_modified_at or date_parser(name) or transcript_modified_at
    return date.isoformat() if date else UNKNOWN_DATE


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


class ArtifactPipeline:
    """
    Produces the missing transcript and notes of a work item using the
    injected transcription and notes capabilities.
    """

    def __init__(
        self,
        store: ArtifactStore,
        transcriber: Transcriber,
        notes_generator: NotesSummarizer,
        date_parser: Callable[[str], Optional[datetime]] = parse_date_string_safe
    ):
        """
        Initialize the pipeline.

        Args:
            store: Where audio is found and transcripts and notes are kept
            transcriber: Transcription capability
            notes_generator: Notes generation capability
            date_parser: Best-effort parser for dates in work item names
        """
        self.store = store
        self.transcriber = transcriber
        self.notes_generator = notes_generator
        self.date_parser = date_parser

    def process(self, name: str) -> ProcessingResult:
        """
        Bring one work item up to date.

        Args:
            name: Work item name

        Returns:
            ProcessingResult with the transcript and notes now known

        Raises:
            ProcessingError: If a stage fails; the failed stage writes nothing
        """
        operation = "lookup"
        try:
            result = ProcessingResult(name=name)

            audio = self.store.audio_info(name)
            transcript_info = self.store.transcript_info(name)
            notes_info = self.store.notes_info(name)

            if transcript_info.exists:
                result.transcript = self.store.read_transcript(name)
            elif audio.exists:
                operation = "transcribe"
                result.transcript = self._transcribe(name, audio.path)
                result.transcribed = True

            if notes_info.exists:
                result.notes = self.store.read_notes(name)
            elif result.transcript:
                operation = "generate_notes"
                result.display_date = choose_display_date(
                    audio.modified_at, name, transcript_info.modified_at, self.date_parser
                )
                result.notes = self._generate_notes(name, result.transcript, result.display_date)
                result.notes_generated = True

            logger.info(f"{name}: {result.get_status_display()}")
            return result

        except ProcessingError as e:
            raise handle_processing_error(e, "artifact_pipeline", operation, work_item=name)
        except Exception as e:
            raise handle_processing_error(e, "artifact_pipeline", operation, work_item=name) from e

    def _transcribe(self, name: str, audio_path) -> str:
        self.store.ensure_item_dir(name)
        logger.info(f"Creating transcription using {self.transcriber.provider_name}: {name}")

        transcript = self.transcriber.transcribe(audio_path)
        if not _has_text(transcript):
            raise TranscriptionFailedError(f"Transcription returned no text for {name}")

        self.store.write_transcript(name, transcript)
        return transcript

    def _generate_notes(self, name: str, transcript: str, display_date: str) -> str:
        self.store.ensure_item_dir(name)
        logger.info(f"Creating notes: {name}")

        notes = self.notes_generator.summarize(
            NotesPrompt(meeting_date=display_date, transcript=transcript)
        )
        if not _has_text(notes):
            raise NotesGenerationFailedError(f"Notes generation returned no text for {name}")

        self.store.write_notes(name, notes)
        return notes
