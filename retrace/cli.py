"""
Retrace CLI - Command-line interface for the interpreter.

Usage:
    retrace demo [--turns N] [--save NAME]   Play the example duel
    retrace show NAME|PATH                   Print a recorded effect tree
    retrace replay NAME|PATH                 Replay the duel against a recording
    retrace list                             List stored recordings

NAME refers to a recording in RETRACE_RECORDING_DIR; anything that exists
as a file is read as a path instead.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Settings


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Retrace - Deterministic, replayable effect interpreter",
        prog="retrace",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Play the example duel")
    demo_parser.add_argument("--turns", type=int, default=3, help="Number of turns to play (1-3)")
    demo_parser.add_argument("--save", help="Save the recording under this name")

    # Show command
    show_parser = subparsers.add_parser("show", help="Print a recorded effect tree")
    show_parser.add_argument("target", help="Recording name or path")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay the duel against a recording")
    replay_parser.add_argument("target", help="Recording name or path")
    replay_parser.add_argument("--save", help="Save the extended recording under this name")

    # List command
    subparsers.add_parser("list", help="List stored recordings")

    args = parser.parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "demo":
        cmd_demo(args, settings)
    elif args.command == "show":
        cmd_show(args, settings)
    elif args.command == "replay":
        cmd_replay(args, settings)
    elif args.command == "list":
        cmd_list(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_demo(args, settings):
    """Play the example duel and print what happened."""
    from .games.duel import create_game, standard_turns
    from .recording import RecordingStore, dump_effects
    from .session import SessionManager

    turns = standard_turns()
    if not 1 <= args.turns <= len(turns):
        print(f"Error: --turns must be between 1 and {len(turns)}")
        sys.exit(1)

    store = RecordingStore(settings.recording_dir) if args.save else None
    manager = SessionManager(store=store)
    session = manager.create_session("duel", create_game())

    for number, turn in enumerate(turns[:args.turns], start=1):
        messages = session.run(turn)
        print(f"Turn {number}: {'; '.join(messages)}")

    print("\nFinal state:")
    print(json.dumps(session.state.to_dict(), indent=2))
    print("\nEffect tree:")
    print(dump_effects(session.interpreter.effects, indent=2))

    if args.save:
        manager.save_checkpoint(session.session_id, args.save)
        print(f"\nSaved recording: {args.save}")


def cmd_show(args, settings):
    """Print each recorded call with its path."""
    from .engine_core import walk_effects

    recording = _load(args.target, settings)
    print(f"Game: {recording.game}")
    print(f"Calls: {recording.call_count}")
    for path, node in walk_effects(recording.effects):
        indent = "  " * (len(path) - 1)
        label = ".".join(str(i) for i in path)
        print(f"{indent}[{label}] {json.dumps(node.result.root)}")


def cmd_replay(args, settings):
    """Replay the standard duel turns on top of a recording's checkpoint."""
    from .engine_core import InterpreterError
    from .games.duel import CALL_COUNTS, Game, reset_call_counts, standard_turns
    from .recording import RecordingStore
    from .session import Session

    recording = _load(args.target, settings)
    if recording.game != "duel":
        print(f"Error: Cannot replay a recording of {recording.game!r}")
        sys.exit(1)

    try:
        game = Game.from_dict(recording.state)
    except ValueError as exc:
        print(f"Error: Invalid checkpoint state: {exc}")
        sys.exit(1)

    reset_call_counts()
    session = Session.resume(recording, game)
    try:
        session.run_all(standard_turns())
    except InterpreterError as exc:
        print(f"Error: Replay failed: {exc}")
        sys.exit(1)

    print(f"Replayed: {session.replayed}")
    print(f"Executed: {session.executed}")
    print(f"Effect functions run: {sum(CALL_COUNTS.values())}")
    unchanged = session.interpreter.effects == recording.effects
    print(f"Effect tree unchanged: {'yes' if unchanged else 'no (extended)'}")

    if args.save:
        RecordingStore(settings.recording_dir).save(args.save, session.checkpoint())
        print(f"Saved recording: {args.save}")


def cmd_list(args, settings):
    """List stored recordings."""
    from .recording import RecordingStore

    names = RecordingStore(settings.recording_dir).list_recordings()
    if not names:
        print("No recordings")
    for name in names:
        print(name)


def _load(target, settings):
    from .recording import RecordingFormatError, RecordingStore

    store = RecordingStore(settings.recording_dir)
    path = Path(target)
    try:
        if path.is_file():
            return store.load_path(path)
        recording = store.get(target)
    except (RecordingFormatError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    if recording is None:
        print(f"Error: Recording not found: {target}")
        sys.exit(1)
    return recording


if __name__ == "__main__":
    main()
