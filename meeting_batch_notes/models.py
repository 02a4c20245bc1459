from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ArtifactInfo(BaseModel):
    """Presence and modification time of one artifact of a work item."""
    path: Path
    exists: bool = False
    modified_at: Optional[datetime] = None


class NotesPrompt(BaseModel):
    """Input for a notes generation call."""
    meeting_date: str = "unknown"
    transcript: str

    def to_messages(self, system_prompt: str) -> List[Dict[str, str]]:
        """Render as a chat message list: instructions first, transcript as user content."""
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": self.transcript},
        ]


class ProcessingResult(BaseModel):
    """Outcome of running the pipeline for one work item."""
    name: str
    transcript: Optional[str] = None
    notes: Optional[str] = None
    transcribed: bool = Field(default=False)  # True if transcription ran in this call
    notes_generated: bool = Field(default=False)  # True if notes were generated in this call
    display_date: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """Both transcript and notes are available."""
        return self.transcript is not None and self.notes is not None

    def get_status_display(self) -> str:
        """Get a short, user-friendly status line."""
        if self.transcript is None and self.notes is None:
            return "no audio or artifacts"
        parts = []
        if self.transcribed:
            parts.append("transcribed")
        if self.notes_generated:
            parts.append("notes generated")
        if not parts:
            return "up to date" if self.is_complete else "nothing to do"
        return ", ".join(parts)


class BatchReport(BaseModel):
    """Summary of one driver run over all work items."""
    results: List[ProcessingResult] = Field(default_factory=list)
    failed: Dict[str, str] = Field(default_factory=dict)  # name -> error message

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> bool:
        return not self.failed
