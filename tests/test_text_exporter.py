"""
Tests for the text list exporter.
"""

import tempfile
from pathlib import Path

from sample_tournament.exporters.text_exporter import TextListExporter, filter_results
from sample_tournament.models import Sample


def leaderboard() -> list[Sample]:
    return [
        Sample(path="/s/best.wav", filename="best.wav", score=3, comparisons=3),
        Sample(path="/s/good.wav", filename="good.wav", score=2, comparisons=3),
        Sample(path="/s/ok.wav", filename="ok.wav", score=0, comparisons=2),
    ]


class TestFilterResults:
    """filter_results is a pure cut on score."""

    def test_keeps_scores_at_or_above_cutoff(self) -> None:
        kept = filter_results(leaderboard(), 2)

        assert [s.filename for s in kept] == ["best.wav", "good.wav"]

    def test_zero_cutoff_keeps_everything_active(self) -> None:
        assert len(filter_results(leaderboard(), 0)) == 3

    def test_cutoff_above_best_keeps_nothing(self) -> None:
        assert filter_results(leaderboard(), 4) == []


class TestTextListExporter:
    """Test TextListExporter behavior through public interface."""

    def test_writes_one_path_per_line(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            output = Path(temp_dir) / "good.txt"

            # Act
            count = TextListExporter(output).export(leaderboard(), min_score=2)

            # Assert
            assert count == 2
            assert output.read_text(encoding="utf-8") == "/s/best.wav\n/s/good.wav"

    def test_empty_export_writes_empty_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            output = Path(temp_dir) / "out" / "none.txt"

            count = TextListExporter(output).export(leaderboard(), min_score=10)

            assert count == 0
            assert output.read_text(encoding="utf-8") == ""
