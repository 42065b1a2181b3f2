"""
Tak CLI - Command-line interface for the engine.

Usage:
    tak setup [size]                     Show starting reserves
    tak replay --size N MOVE [MOVE ...]  Apply moves and show the result
    tak play --size N                    Play interactively on stdin
    tak serve                            Run the REST API
"""

import argparse
import logging
import sys

from .ascii_board import show
from .engine_core.errors import InvalidBoardSize
from .engine_core.state import BOARD_SETUPS, Player


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tak - rules engine for the board game Tak",
        prog="tak",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Setup command
    setup_parser = subparsers.add_parser("setup", help="Show starting reserves per board size")
    setup_parser.add_argument("size", nargs="?", type=int, help="Only show this board size")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Apply a list of moves")
    replay_parser.add_argument("moves", nargs="+", help="Moves in notation")
    replay_parser.add_argument("--size", type=int, default=5, help="Board size")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game on stdin")
    play_parser.add_argument("--size", type=int, default=5, help="Board size")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "setup":
        return cmd_setup(args)
    elif args.command == "replay":
        return cmd_replay(args)
    elif args.command == "play":
        return cmd_play(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def cmd_setup(args):
    """Print the piece table."""
    sizes = [args.size] if args.size is not None else sorted(BOARD_SETUPS)
    for size in sizes:
        setup = BOARD_SETUPS.get(size)
        if setup is None:
            print(f"Error: no setup known for board size {size}")
            return 1
        print(f"{size}x{size}: {setup[0]} stones, {setup[1]} capstones")
    return 0


def _new_game(size):
    from .session import GameLoop, SessionManager

    manager = SessionManager()
    try:
        session = manager.create_session(size)
    except InvalidBoardSize as e:
        print(f"Error: {e}")
        return None, None
    return session, GameLoop(session)


def _report_result(session):
    if session.winner == Player.BOTH:
        print("Game over: draw")
    elif session.winner != Player.NONE:
        print(f"Game over: {session.player_name(session.winner)} wins with {session.score} points")


def cmd_replay(args):
    """Apply moves in order, stop at the first rejected one."""
    session, loop = _new_game(args.size)
    if session is None:
        return 1

    for number, text in enumerate(args.moves, start=1):
        result = loop.submit_notation(text)
        if not result.success:
            show(session.board, header=f"After {number - 1} move(s):")
            print(f"Move {number} '{text}' rejected: {'; '.join(result.errors)}")
            return 1

    show(session.board, header=f"After {len(args.moves)} move(s):")
    _report_result(session)
    return 0


def cmd_play(args):
    """Interactive play: one move per line, empty line or 'quit' to stop."""
    session, loop = _new_game(args.size)
    if session is None:
        return 1

    show(session.board)
    while session.is_active():
        player = session.board.active_player()
        try:
            text = input(f"{session.player_name(player)}> ").strip()
        except EOFError:
            break
        if not text or text == "quit":
            break

        result = loop.submit_notation(text)
        if not result.success:
            print(f"Rejected: {'; '.join(result.errors)}")
            continue
        show(session.board)

    _report_result(session)
    return 0


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("tak.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
