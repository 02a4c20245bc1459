import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, List
import logging

from .error_handling import ArtifactExistsError
from .models import ArtifactInfo

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Locates, reads and writes the audio, transcript and notes of each work item.

    Layout::

        <input_dir>/<name><audio_extension>      recorded audio
        <output_dir>/<name>/<transcript_filename>
        <output_dir>/<name>/<notes_filename>

    Transcript and notes are write-once: an existing artifact is never replaced.
    """

    def __init__(self, input_dir: str = "tmp", output_dir: str = "data",
                 audio_extension: str = ".ogg", transcript_filename: str = "transcript.txt",
                 notes_filename: str = "notes.md"):
        """
        Initialize ArtifactStore with configuration.

        Args:
            input_dir: Directory holding recorded audio files
            output_dir: Directory holding one folder per work item
            audio_extension: Extension of the audio files, including the dot
            transcript_filename: Transcript file name inside an item folder
            notes_filename: Notes file name inside an item folder
        """
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.audio_extension = audio_extension
        self.transcript_filename = transcript_filename
        self.notes_filename = notes_filename

    @classmethod
    def from_config(cls, files_config) -> "ArtifactStore":
        """Build a store from a FileConfig."""
        return cls(
            input_dir=files_config.input_dir,
            output_dir=files_config.output_dir,
            audio_extension=files_config.audio_extension,
            transcript_filename=files_config.transcript_filename,
            notes_filename=files_config.notes_filename,
        )

    def audio_path(self, name: str) -> Path:
        return self.input_dir / f"{name}{self.audio_extension}"

    def item_dir(self, name: str) -> Path:
        return self.output_dir / name

    def transcript_path(self, name: str) -> Path:
        return self.item_dir(name) / self.transcript_filename

    def notes_path(self, name: str) -> Path:
        return self.item_dir(name) / self.notes_filename

    def _info(self, path: Path) -> ArtifactInfo:
        try:
            stat = path.stat()
        except OSError:
            return ArtifactInfo(path=path)
        if not path.is_file():
            return ArtifactInfo(path=path)
        return ArtifactInfo(
            path=path,
            exists=True,
            modified_at=datetime.fromtimestamp(stat.st_mtime)
        )

    def audio_info(self, name: str) -> ArtifactInfo:
        return self._info(self.audio_path(name))

    def transcript_info(self, name: str) -> ArtifactInfo:
        return self._info(self.transcript_path(name))

    def notes_info(self, name: str) -> ArtifactInfo:
        return self._info(self.notes_path(name))

    def read_transcript(self, name: str) -> str:
        return self.transcript_path(name).read_text(encoding="utf-8")

    def read_notes(self, name: str) -> str:
        return self.notes_path(name).read_text(encoding="utf-8")

    def write_transcript(self, name: str, text: str) -> Path:
        return self._write_once(self.transcript_path(name), text)

    def write_notes(self, name: str, text: str) -> Path:
        return self._write_once(self.notes_path(name), text)

    def ensure_item_dir(self, name: str) -> Path:
        """Create the item folder if it doesn't exist."""
        item_dir = self.item_dir(name)
        item_dir.mkdir(parents=True, exist_ok=True)
        return item_dir

    def _write_once(self, path: Path, text: str) -> Path:
        """
        Write text to a new artifact file.

        The content goes to a temporary file in the same folder first and is
        then moved into place, so a failed write never leaves a partial file.

        Raises:
            ArtifactExistsError: If the artifact is already present
        """
        if path.exists():
            raise ArtifactExistsError(f"Artifact already exists: {path}")

        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

        logger.debug(f"Wrote {len(text)} characters to {path}")
        return path


class StaticWorkItemSource:
    """Work item names given up front."""

    def __init__(self, names: Iterable[str]):
        self._names = list(names)

    def list_names(self) -> List[str]:
        return list(self._names)


class DirectoryWorkItemSource:
    """Discovers work item names from the audio and output folders.

    A name comes either from an audio file in ``input_dir`` (the part before
    the first dot) or from a subfolder of ``output_dir``. Audio names come
    first; duplicates keep their first position.
    """

    def __init__(self, input_dir: str = "tmp", output_dir: str = "data",
                 audio_extension: str = ".ogg"):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.audio_extension = audio_extension

    @classmethod
    def from_config(cls, files_config) -> "DirectoryWorkItemSource":
        return cls(
            input_dir=files_config.input_dir,
            output_dir=files_config.output_dir,
            audio_extension=files_config.audio_extension,
        )

    def _list_dir(self, directory: Path) -> List[Path]:
        if not directory.is_dir():
            logger.debug(f"Directory not found, skipping: {directory}")
            return []
        return sorted(directory.iterdir())

    def audio_names(self) -> List[str]:
        return [
            entry.name.split(".")[0]
            for entry in self._list_dir(self.input_dir)
            if entry.is_file() and entry.name.endswith(self.audio_extension)
        ]

    def output_names(self) -> List[str]:
        return [entry.name for entry in self._list_dir(self.output_dir) if entry.is_dir()]

    def list_names(self) -> List[str]:
        names: List[str] = []
        seen = set()
        for name in self.audio_names() + self.output_names():
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        logger.info(f"Found {len(names)} work items")
        return names

