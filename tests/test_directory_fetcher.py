"""
Tests for DirectorySampleFetcher implementation.

Focus on directory scanning and extension filtering.
"""

import os
import tempfile
from pathlib import Path

import pytest

from sample_tournament.fetchers.directory_fetcher import DirectorySampleFetcher


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"RIFF")
    return path


class TestDirectorySampleFetcher:
    """Test DirectorySampleFetcher behavior through public interface."""

    def test_finds_audio_files_recursively(self) -> None:
        """Should pick up audio files in nested directories."""
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            root = Path(temp_dir)
            touch(root / "kick.wav")
            touch(root / "drums" / "snare.mp3")
            touch(root / "drums" / "hats" / "open.flac")
            touch(root / "pads" / "warm.ogg")

            # Act
            samples = list(DirectorySampleFetcher(root).list_samples())

            # Assert
            assert sorted(s.filename for s in samples) == ["kick.wav", "open.flac", "snare.mp3", "warm.ogg"]
            assert all(s.score == 0 and s.comparisons == 0 for s in samples)
            assert all(Path(s.path).is_absolute() for s in samples)

    def test_ignores_non_audio_files(self) -> None:
        """Should skip files whose extension is not an audio format."""
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            touch(root / "loop.aiff")
            touch(root / "notes.txt")
            touch(root / "session.json")
            touch(root / "wav")

            samples = list(DirectorySampleFetcher(root).list_samples())

            assert [s.filename for s in samples] == ["loop.aiff"]

    def test_extension_match_is_case_insensitive(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            touch(root / "LOUD.WAV")
            touch(root / "vocal.M4a")

            samples = list(DirectorySampleFetcher(root).list_samples())

            assert sorted(s.filename for s in samples) == ["LOUD.WAV", "vocal.M4a"]

    def test_custom_extensions(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            touch(root / "a.wav")
            touch(root / "b.opus")

            samples = list(DirectorySampleFetcher(root, extensions=[".opus"]).list_samples())

            assert [s.filename for s in samples] == ["b.opus"]

    def test_results_are_sorted_by_path(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            for name in ["c.wav", "a.wav", "b/z.wav", "b/a.wav"]:
                touch(root / name)

            samples = list(DirectorySampleFetcher(root).list_samples())

            paths = [s.path for s in samples]
            assert paths == sorted(paths)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_does_not_follow_symlinks(self) -> None:
        """Symlinked files and directories should be skipped."""
        with tempfile.TemporaryDirectory() as outside_dir, tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            outside = Path(outside_dir)
            touch(root / "real.wav")
            secret = touch(outside / "secret.wav")
            touch(outside / "more" / "hidden.wav")
            try:
                (root / "link.wav").symlink_to(secret)
                (root / "linked_dir").symlink_to(outside / "more", target_is_directory=True)
            except OSError:
                pytest.skip("cannot create symlinks here")

            samples = list(DirectorySampleFetcher(root).list_samples())

            assert [s.filename for s in samples] == ["real.wav"]

    def test_empty_directory_yields_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            fetcher = DirectorySampleFetcher(Path(temp_dir))

            assert list(fetcher.list_samples()) == []
            assert fetcher.get_sample_count() == 0

    def test_missing_directory_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with pytest.raises(FileNotFoundError):
                DirectorySampleFetcher(Path(temp_dir) / "nope")

    def test_file_instead_of_directory_raises(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = touch(Path(temp_dir) / "kick.wav")

            with pytest.raises(NotADirectoryError):
                DirectorySampleFetcher(file_path)

    def test_reload_picks_up_new_files(self) -> None:
        """Results are cached until reload() is called."""
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            touch(root / "a.wav")
            fetcher = DirectorySampleFetcher(root)
            assert fetcher.get_sample_count() == 1

            touch(root / "b.wav")
            assert fetcher.get_sample_count() == 1

            fetcher.reload()
            assert fetcher.get_sample_count() == 2
