"""
JSON session storage implementation.

Persists the whole tournament state to a single pretty-printed JSON file.
Field names match the session files written by earlier versions of the
tool, so old sessions keep loading.
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from typing_extensions import override

from ..exceptions import StorageError, ValidationError
from ..interfaces import SessionRecord, Storage
from ..logging_config import get_logger
from ..models import Sample, TournamentState

# Module-level logger
logger = get_logger("json_storage")

_session_adapter = TypeAdapter(SessionRecord)


def state_to_record(state: TournamentState) -> SessionRecord:
    """Convert a state into its serializable record."""
    return {
        "samples": [
            {
                "path": s.path,
                "filename": s.filename,
                "score": s.score,
                "comparisons": s.comparisons,
            }
            for s in state.samples
        ],
        "current_round": state.current_round,
        "comparisons_this_round": [(a, b) for a, b in state.pairings],
        "current_comparison_index": state.current_pairing_index,
        "advancement_threshold": state.advancement_threshold,
        "source_directory": state.source_directory,
    }


def state_from_record(record: SessionRecord) -> TournamentState:
    """Rebuild a state from a validated record."""
    return TournamentState(
        samples=tuple(Sample(**s) for s in record["samples"]),
        source_directory=record["source_directory"],
        advancement_threshold=record["advancement_threshold"],
        current_round=record["current_round"],
        pairings=tuple((a, b) for a, b in record["comparisons_this_round"]),
        current_pairing_index=record["current_comparison_index"],
    )


class JSONSessionStorage(Storage):
    """
    Single-file JSON session storage.

    Writes go to a temporary file in the same directory first and are moved
    into place, so an interrupted save never leaves a truncated session.
    """

    session_path: Path

    def __init__(self, session_path: Path):
        """
        Initialize JSON session storage.

        Args:
            session_path: Path of the session file to read and write
        """
        self.session_path = Path(session_path)
        logger.debug(f"JSON session storage initialized: {self.session_path}")

    @override
    def save_progress(self, state: TournamentState) -> None:
        """Write the state to the session file."""
        record = state_to_record(state)
        self.session_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.session_path.parent, prefix=f".{self.session_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.session_path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not save session to {self.session_path}: {e}") from e

        logger.info(
            f"Saved round {state.current_round} ({state.current_pairing_index}/{len(state.pairings)}) to {self.session_path}"
        )

    @override
    def load_progress(self) -> TournamentState:
        """Read and validate the session file."""
        if not self.session_path.exists():
            raise StorageError(f"Session file does not exist: {self.session_path}")

        logger.info(f"Loading session from {self.session_path}")
        try:
            with open(self.session_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            record = _session_adapter.validate_python(data)
            state = state_from_record(record)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read session {self.session_path}: {e}") from e
        except (PydanticValidationError, ValidationError) as e:
            raise StorageError(f"Session {self.session_path} is not a valid tournament: {e}") from e

        logger.info(
            f"Loaded round {state.current_round} with {len(state.samples)} samples from {self.session_path}"
        )
        return state


class LastSessionPointer:
    """Remembers the most recently used session file."""

    def __init__(self, state_dir: Path):
        self.pointer_path: Path = Path(state_dir) / "last_session"

    def remember(self, session_path: Path) -> None:
        self.pointer_path.parent.mkdir(parents=True, exist_ok=True)
        self.pointer_path.write_text(str(Path(session_path).resolve()), encoding="utf-8")
        logger.debug(f"Remembered last session: {session_path}")

    def recall(self) -> Path | None:
        """Return the last session path, or None if unknown or since deleted."""
        if not self.pointer_path.exists():
            return None
        raw = self.pointer_path.read_text(encoding="utf-8").strip()
        if not raw:
            return None
        path = Path(raw)
        if not path.exists():
            logger.warning(f"Last session {path} no longer exists")
            return None
        return path
