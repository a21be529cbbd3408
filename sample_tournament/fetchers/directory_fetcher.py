"""
Directory sample fetcher implementation.

Walks a directory tree and collects audio files by extension.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from typing_extensions import override

from ..interfaces import SampleFetcher
from ..logging_config import get_logger
from ..models import Sample

AUDIO_EXTENSIONS = frozenset({"wav", "mp3", "flac", "ogg", "aiff", "m4a"})


class DirectorySampleFetcher(SampleFetcher):
    """
    Sample fetcher that scans a directory recursively.

    Audio files are treated as opaque - only paths and file names are kept.
    Symlinks are never followed.
    """

    def __init__(self, directory: Path, extensions: Iterable[str] = AUDIO_EXTENSIONS):
        """
        Initialize directory sample fetcher.

        Args:
            directory: Directory containing audio files
            extensions: File extensions to accept, without the dot (case-insensitive)
        """
        self.directory: Path = Path(directory)
        self.extensions: frozenset[str] = frozenset(ext.lower().lstrip(".") for ext in extensions)

        self.logger = get_logger("directory_fetcher")

        if not self.directory.exists():
            raise FileNotFoundError(f"Directory does not exist: {self.directory}")

        if not self.directory.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {self.directory}")

        self.root: Path = self.directory.resolve()

        self._cache = list[Sample]()
        self._cache_loaded: bool = False

    def _is_audio(self, path: Path) -> bool:
        return path.suffix.lower().lstrip(".") in self.extensions

    def _scan(self) -> None:
        """Scan the directory into the cache."""
        if self._cache_loaded:
            return

        found = list[Path]()
        # os.walk does not descend into symlinked directories by default
        for dirpath, _, filenames in os.walk(self.root):
            for filename in filenames:
                path = Path(dirpath) / filename
                if path.is_symlink() or not path.is_file():
                    continue
                if not self._is_audio(path):
                    continue
                # Path traversal protection
                try:
                    path.resolve().relative_to(self.root)
                except ValueError:
                    self.logger.warning(f"Skipping file outside sample directory: {path}")
                    continue
                found.append(path)

        if not found:
            self.logger.warning(f"No audio files found in {self.directory}")

        self._cache = [Sample(path=str(p), filename=p.name) for p in sorted(found)]
        self._cache_loaded = True
        self.logger.info(f"Found {len(self._cache)} samples in {self.directory}")

    @override
    def list_samples(self) -> Iterable[Sample]:
        """Return all audio files under the directory, sorted by path."""
        self._scan()
        return list(self._cache)

    def get_sample_count(self) -> int:
        """Get total number of samples found."""
        self._scan()
        return len(self._cache)

    def reload(self) -> None:
        """Force a rescan on the next access."""
        self._cache.clear()
        self._cache_loaded = False
