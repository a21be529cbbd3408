"""
Sample fetcher implementations.

Provides implementations of the SampleFetcher interface for building a
tournament roster.

Available implementations:
- DirectorySampleFetcher: Recursively scans a directory for audio files
"""

from .directory_fetcher import AUDIO_EXTENSIONS, DirectorySampleFetcher

__all__ = ["AUDIO_EXTENSIONS", "DirectorySampleFetcher"]
