"""
Tests for JSONSessionStorage and LastSessionPointer.

Focus on persistence and compatibility of the session file format.
"""

import json
import random
import tempfile
from pathlib import Path

import pytest

from sample_tournament.exceptions import StorageError
from sample_tournament.models import ELIMINATED_SCORE, Sample
from sample_tournament.storage.json_storage import JSONSessionStorage, LastSessionPointer
from sample_tournament.tournament import (
    create_tournament,
    eliminate_both,
    get_current_pairing_indices,
    record_comparison,
)


def played_state():
    samples = [Sample(path=f"/samples/{n}.wav", filename=f"{n}.wav") for n in "abcdef"]
    state = create_tournament(samples, "/samples", advancement_threshold=0.25, rng=random.Random(8))
    state = record_comparison(state, get_current_pairing_indices(state)[1])
    return eliminate_both(state)


class TestJSONSessionStorage:
    """Test JSONSessionStorage behavior through public interface."""

    def test_save_and_load_returns_equal_state(self) -> None:
        """A saved state should load back unchanged."""
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            storage = JSONSessionStorage(Path(temp_dir) / "session.json")
            state = played_state()

            # Act
            storage.save_progress(state)
            loaded = storage.load_progress()

            # Assert
            assert loaded == state
            assert loaded.samples[0] is not state.samples[0]

    def test_file_uses_stable_field_names(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            state = played_state()

            JSONSessionStorage(session_path).save_progress(state)
            data = json.loads(session_path.read_text(encoding="utf-8"))

            assert set(data) == {
                "samples",
                "current_round",
                "comparisons_this_round",
                "current_comparison_index",
                "advancement_threshold",
                "source_directory",
            }
            assert set(data["samples"][0]) == {"path", "filename", "score", "comparisons"}
            assert data["comparisons_this_round"] == [list(p) for p in state.pairings]
            assert ELIMINATED_SCORE in [s["score"] for s in data["samples"]]

    def test_loads_hand_written_session(self) -> None:
        """Sessions written by earlier versions should load as-is."""
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "old.json"
            session_path.write_text(
                json.dumps({
                    "samples": [
                        {"path": "/s/a.wav", "filename": "a.wav", "score": 1, "comparisons": 1},
                        {"path": "/s/b.wav", "filename": "b.wav", "score": 0, "comparisons": 1},
                        {"path": "/s/c.wav", "filename": "c.wav", "score": -1000, "comparisons": 1},
                        {"path": "/s/d.wav", "filename": "d.wav", "score": -1000, "comparisons": 1},
                    ],
                    "current_round": 2,
                    "comparisons_this_round": [[0, 1], [2, 3]],
                    "current_comparison_index": 2,
                    "advancement_threshold": 0.5,
                    "source_directory": "/s",
                }),
                encoding="utf-8",
            )

            state = JSONSessionStorage(session_path).load_progress()

            assert state.current_round == 2
            assert state.pairings == ((0, 1), (2, 3))
            assert state.current_pairing_index == 2
            assert state.samples[2].eliminated

    def test_save_overwrites_and_leaves_no_temp_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            storage = JSONSessionStorage(session_path)
            first = played_state()
            second = record_comparison(first, get_current_pairing_indices(first)[0])

            storage.save_progress(first)
            storage.save_progress(second)

            assert storage.load_progress() == second
            assert [p.name for p in Path(temp_dir).iterdir()] == ["session.json"]

    def test_save_creates_parent_directories(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "nested" / "dir" / "session.json"

            JSONSessionStorage(session_path).save_progress(played_state())

            assert session_path.exists()

    def test_missing_file_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JSONSessionStorage(Path(temp_dir) / "missing.json")

            assert not storage.session_path.exists()
            with pytest.raises(StorageError):
                storage.load_progress()

    def test_corrupted_json_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            session_path.write_text("{not json", encoding="utf-8")

            with pytest.raises(StorageError):
                JSONSessionStorage(session_path).load_progress()

    def test_missing_field_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            session_path.write_text(json.dumps({"samples": [], "current_round": 1}), encoding="utf-8")

            with pytest.raises(StorageError):
                JSONSessionStorage(session_path).load_progress()

    def test_broken_invariant_raises_storage_error(self) -> None:
        """A cursor past the end of the schedule is not a valid session."""
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            session_path.write_text(
                json.dumps({
                    "samples": [
                        {"path": "/s/a.wav", "filename": "a.wav", "score": 0, "comparisons": 0},
                        {"path": "/s/b.wav", "filename": "b.wav", "score": 0, "comparisons": 0},
                    ],
                    "current_round": 1,
                    "comparisons_this_round": [[0, 1]],
                    "current_comparison_index": 5,
                    "advancement_threshold": 0.5,
                    "source_directory": "/s",
                }),
                encoding="utf-8",
            )

            with pytest.raises(StorageError):
                JSONSessionStorage(session_path).load_progress()


class TestLastSessionPointer:
    """Test LastSessionPointer behavior."""

    def test_remember_and_recall(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            session_path.write_text("{}", encoding="utf-8")
            pointer = LastSessionPointer(Path(temp_dir) / "state")

            pointer.remember(session_path)

            assert pointer.recall() == session_path.resolve()

    def test_recall_without_history_is_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            assert LastSessionPointer(Path(temp_dir)).recall() is None

    def test_recall_of_deleted_session_is_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            session_path = Path(temp_dir) / "session.json"
            session_path.write_text("{}", encoding="utf-8")
            pointer = LastSessionPointer(Path(temp_dir))
            pointer.remember(session_path)

            session_path.unlink()

            assert pointer.recall() is None
