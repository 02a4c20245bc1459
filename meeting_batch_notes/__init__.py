"""Batch meeting notes - transcribe recorded meetings and generate notes, skipping work already done."""

__version__ = "0.1.0"

from .date_parser import parse_date_string, parse_date_string_safe
from .file_manager import ArtifactStore, DirectoryWorkItemSource, StaticWorkItemSource
from .models import (
    ArtifactInfo,
    BatchReport,
    NotesPrompt,
    ProcessingResult
)
from .processing_pipeline import ArtifactPipeline, choose_display_date

__all__ = [
    "parse_date_string",
    "parse_date_string_safe",
    "ArtifactStore",
    "DirectoryWorkItemSource",
    "StaticWorkItemSource",
    "ArtifactInfo",
    "BatchReport",
    "NotesPrompt",
    "ProcessingResult",
    "ArtifactPipeline",
    "choose_display_date"
]
