"""
CLI entry point for sample tournament.

Parses arguments, wires components and runs one of the subcommands:
new, resume, results, export.
"""

import argparse
import random
import sys
from argparse import Namespace
from collections.abc import Sequence
from pathlib import Path

from prettytable import PrettyTable

from . import tournament
from .exceptions import TournamentError
from .exporters.text_exporter import TextListExporter, filter_results
from .fetchers.directory_fetcher import DirectorySampleFetcher
from .interfaces import Judge
from .judges.dummy_judge import DummyJudge
from .judges.interactive_judge import InteractiveJudge
from .logging_config import get_logger, setup_logging
from .models import Sample, TournamentState
from .session import SessionConfig, TournamentSession
from .storage.json_storage import JSONSessionStorage, LastSessionPointer

DEFAULT_STATE_DIR = Path.home() / ".sample_tournament"
DEFAULT_SESSION_NAME = "tournament_session.json"


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sample-tournament",
        description="Sample Tournament - rank audio samples with a Swiss-style pairwise tournament",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)"
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    _ = parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file (rotated)"
    )
    _ = parser.add_argument(
        "--state-dir",
        type=Path,
        default=DEFAULT_STATE_DIR,
        help=f"Where the last-session pointer is kept (default: {DEFAULT_STATE_DIR})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    play_args = argparse.ArgumentParser(add_help=False)
    _ = play_args.add_argument(
        "--judge",
        choices=["interactive", "dummy", "random"],
        default="interactive",
        help="Who decides pairings (default: interactive)"
    )
    _ = play_args.add_argument(
        "--player",
        default=None,
        help="Command used to play a sample, e.g. 'afplay' or 'ffplay -nodisp -autoexit'"
    )
    _ = play_args.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for pairing order and the random judge"
    )
    _ = play_args.add_argument(
        "--lookahead",
        type=int,
        default=2,
        help="Upcoming pairings to prefetch (default: 2)"
    )
    _ = play_args.add_argument(
        "--no-autosave",
        action="store_true",
        help="Only save on 's', 'q' and when the run stops"
    )

    new = subparsers.add_parser("new", parents=[play_args], help="Scan a directory and start a tournament")
    _ = new.add_argument("directory", type=Path, help="Directory to scan for audio files")
    _ = new.add_argument(
        "--threshold",
        type=float,
        default=0.5,
        help="Share of samples that advance each round, in (0, 1] (default: 0.5)"
    )
    _ = new.add_argument(
        "--session",
        type=Path,
        default=None,
        help=f"Session file to write (default: DIRECTORY/{DEFAULT_SESSION_NAME})"
    )

    resume = subparsers.add_parser("resume", parents=[play_args], help="Continue a saved tournament")
    _ = resume.add_argument("session", type=Path, nargs="?", default=None, help="Session file (default: last session)")

    results = subparsers.add_parser("results", help="Show the leaderboard of a session")
    _ = results.add_argument("session", type=Path, nargs="?", default=None, help="Session file (default: last session)")
    _ = results.add_argument("--top", type=int, default=None, help="Only show the first N samples")
    _ = results.add_argument("--min-score", type=int, default=None, help="Only show samples scoring at least this")

    export = subparsers.add_parser("export", help="Write paths of good samples to a text file")
    _ = export.add_argument("session", type=Path, help="Session file")
    _ = export.add_argument("output", type=Path, help="Text file to write")
    _ = export.add_argument("--min-score", type=int, default=0, help="Minimum score to export (default: 0)")

    return parser.parse_args(argv)


def resolve_session_path(args: Namespace) -> Path:
    """Use the given session path, falling back to the last one used."""
    if args.session is not None:
        return args.session
    last = LastSessionPointer(args.state_dir).recall()
    if last is None:
        raise TournamentError("No session given and no previous session recorded")
    print(f"Using last session: {last}")
    return last


def build_judge(args: Namespace) -> Judge:
    """Create the judge selected on the command line."""
    if args.judge == "interactive":
        return InteractiveJudge(player_command=args.player)
    if args.judge == "dummy":
        return DummyJudge(mode="deterministic")
    return DummyJudge(mode="random", seed=args.seed if args.seed is not None else 42)


def render_leaderboard(samples: Sequence[Sample], min_score: int | None = None) -> PrettyTable:
    """Build a leaderboard table; samples under `min_score` are marked excluded."""
    table = PrettyTable()
    table.field_names = ["Rank", "Sample", "Score", "Comparisons", "Win rate", "Export"]
    table.align["Sample"] = "l"
    table.align["Score"] = "r"
    table.align["Comparisons"] = "r"
    table.align["Win rate"] = "r"

    for i, sample in enumerate(samples, 1):
        included = min_score is None or sample.score >= min_score
        table.add_row([
            i,
            sample.filename,
            sample.score,
            sample.comparisons,
            f"{sample.win_rate * 100:.0f}%",
            "yes" if included else "-",
        ])
    return table


def print_results(state: TournamentState, top: int | None = None, min_score: int | None = None) -> None:
    results = tournament.get_sorted_results(state)
    progress = tournament.get_progress(state)
    status = "complete" if tournament.is_tournament_complete(state) else f"round {progress.current_round} in progress"

    print(f"\nResults ({status}): {len(results)} active samples from {state.source_directory}")
    print(render_leaderboard(results[:top] if top else results, min_score=min_score))
    if min_score is not None:
        print(f"{len(filter_results(results, min_score))} samples score {min_score} or more")


def play(state: TournamentState, storage: JSONSessionStorage, args: Namespace) -> None:
    """Run an interactive (or scripted) session and print where it stopped."""
    config = SessionConfig(
        lookahead=args.lookahead,
        autosave=not args.no_autosave,
    )
    rng = random.Random(args.seed) if args.seed is not None else None
    session = TournamentSession(state, build_judge(args), storage=storage, config=config, rng=rng)
    final = session.run()
    print_results(final, top=10)


def cmd_new(args: Namespace) -> None:
    logger = get_logger("cmd_new")

    fetcher = DirectorySampleFetcher(args.directory)
    samples = list(fetcher.list_samples())
    if len(samples) < 2:
        raise TournamentError(f"Need at least 2 audio files to compare, found {len(samples)} in {args.directory}")

    rng = random.Random(args.seed) if args.seed is not None else None
    state = tournament.create_tournament(
        samples, str(args.directory.resolve()), advancement_threshold=args.threshold, rng=rng
    )
    logger.info(f"Created tournament: {len(samples)} samples, threshold {args.threshold}")

    session_path = args.session or args.directory / DEFAULT_SESSION_NAME
    storage = JSONSessionStorage(session_path)
    storage.save_progress(state)
    LastSessionPointer(args.state_dir).remember(session_path)

    print(f"Found {len(samples)} samples in {args.directory}")
    print(f"Session file: {session_path}")
    play(state, storage, args)


def cmd_resume(args: Namespace) -> None:
    session_path = resolve_session_path(args)
    storage = JSONSessionStorage(session_path)
    state = storage.load_progress()
    LastSessionPointer(args.state_dir).remember(session_path)

    print(f"Resuming round {state.current_round} ({state.current_pairing_index}/{len(state.pairings)} comparisons)")
    play(state, storage, args)


def cmd_results(args: Namespace) -> None:
    state = JSONSessionStorage(resolve_session_path(args)).load_progress()
    print_results(state, top=args.top, min_score=args.min_score)


def cmd_export(args: Namespace) -> None:
    state = JSONSessionStorage(args.session).load_progress()
    count = TextListExporter(args.output).export(tournament.get_sorted_results(state), args.min_score)
    print(f"Exported {count} samples to {args.output}")


COMMANDS = {
    "new": cmd_new,
    "resume": cmd_resume,
    "results": cmd_results,
    "export": cmd_export,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(level=args.log_level, debug=args.debug, log_file=args.log_file)
    logger = get_logger("main")

    try:
        COMMANDS[args.command](args)
    except (TournamentError, FileNotFoundError, NotADirectoryError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        logger.warning("Interrupted by user")
        print("\nInterrupted. Progress up to the last save is kept.")
        sys.exit(1)


if __name__ == "__main__":
    main()
