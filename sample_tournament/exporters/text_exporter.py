"""
Plain-text list exporter.

Writes the paths of samples that cleared a minimum score, one per line,
ready to be fed to other tools (xargs, playlist builders, etc.).
"""

from collections.abc import Sequence
from pathlib import Path

from typing_extensions import override

from ..exceptions import StorageError
from ..interfaces import Exporter
from ..logging_config import get_logger
from ..models import Sample

# Module-level logger
logger = get_logger("text_exporter")


def filter_results(samples: Sequence[Sample], min_score: int) -> list[Sample]:
    """Keep samples with `score >= min_score`, preserving order."""
    return [s for s in samples if s.score >= min_score]


class TextListExporter(Exporter):
    """Exports sample paths to a text file."""

    def __init__(self, output_path: Path):
        self.output_path: Path = Path(output_path)

    @override
    def export(self, samples: Sequence[Sample], min_score: int) -> int:
        kept = filter_results(samples, min_score)
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_text("\n".join(s.path for s in kept), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not export results to {self.output_path}: {e}") from e

        logger.info(f"Exported {len(kept)}/{len(samples)} samples (min score {min_score}) to {self.output_path}")
        return len(kept)
