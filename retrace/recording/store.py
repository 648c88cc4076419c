"""
Recording Store - Recordings on local disk, one JSON file per name.

Usage:
    store = RecordingStore(recording_dir="~/.retrace/recordings")

    store.save("duel", session.checkpoint())
    recording = store.get("duel")
    if recording:
        session = Session.resume(recording, ...)
"""

from __future__ import annotations
import logging
import re
import shutil
from pathlib import Path

from ..config import Settings
from .codec import Recording, dump_recording, load_recording

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class RecordingStore:
    """
    File-based store for recordings.

    Names map to `<recording_dir>/<name>.json`.
    """

    def __init__(self, recording_dir: str | Path | None = None):
        if recording_dir is None:
            recording_dir = Settings.from_env().recording_dir
        self.recording_dir = Path(recording_dir).expanduser()

        # Ensure recording directory exists
        self.recording_dir.mkdir(parents=True, exist_ok=True)

    def save(self, name: str, recording: Recording) -> Path:
        """Write a recording, replacing any previous one with that name."""
        path = self.path_for(name)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(dump_recording(recording), encoding="utf-8")
        tmp_path.replace(path)
        logger.info("Saved recording %s (%d calls)", name, recording.call_count)
        return path

    def get(self, name: str) -> Recording | None:
        """
        Load a recording by name.

        Returns None if there is no such recording. A file that exists
        but cannot be read raises RecordingFormatError.
        """
        path = self.path_for(name)
        if not path.exists():
            return None
        return self.load_path(path)

    @staticmethod
    def load_path(path: str | Path) -> Recording:
        return load_recording(Path(path).read_bytes())

    def delete(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_recordings(self) -> list[str]:
        if not self.recording_dir.exists():
            return []
        return sorted(f.stem for f in self.recording_dir.glob("*.json"))

    def clear(self):
        """Remove every recording."""
        if self.recording_dir.exists():
            shutil.rmtree(self.recording_dir)
        self.recording_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        if not _NAME_PATTERN.match(name):
            raise ValueError(f"Invalid recording name: {name!r}")
        return self.recording_dir / f"{name}.json"
