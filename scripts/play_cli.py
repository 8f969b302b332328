#!/usr/bin/env python
"""Play a session in the terminal.

Usage:
  python scripts/play_cli.py --seed 7

Commands:
  r <row> <col>   reveal a tile
  f <row> <col>   toggle a flag
  n               new game
  a               acknowledge completion (prints the unseen summary)
  d               debug: print the full board, mines included
  q               quit
"""
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import logging

from backend.config import load_config
from backend.exceptions import InvalidCoordinate
from backend.game import GameSession

ACTIONS = {"r": "reveal", "f": "flag"}


def parse_command(line):
    """
    Parse one input line into (action, row, col). row and col are None for
    the commands that take no coordinates.
    """
    parts = line.strip().lower().split()
    if not parts:
        raise ValueError("empty command")

    cmd = parts[0]
    if cmd in ("n", "a", "d", "q"):
        return cmd, None, None
    if cmd not in ACTIONS:
        raise ValueError(f"unknown command '{cmd}'")
    if len(parts) != 3:
        raise ValueError(f"'{cmd}' needs a row and a column")
    return ACTIONS[cmd], int(parts[1]), int(parts[2])


def render_board(state):
    lines = []
    for row in state["board"]:
        cells = []
        for cell in row:
            if cell["is_flagged"]:
                cells.append("F")
            elif not cell["is_revealed"]:
                cells.append("~" if cell["ghost"] else ".")
            elif cell["is_mine"]:
                cells.append("*")
            else:
                cells.append(str(cell["neighbor_mines"]) if cell["neighbor_mines"] else " ")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None, help="seed for a reproducible board")
    p.add_argument("--section", default="default", help="config section inside backend/config.yaml")
    p.add_argument("--debug", action="store_true", help="enable debug logging")
    args = p.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    game = GameSession(config=load_config(args.section), seed=args.seed)
    print(render_board(game.get_state()))

    try:
        while True:
            try:
                action, row, col = parse_command(input("> "))
            except ValueError as exc:
                print(f"? {exc}")
                continue

            if action == "q":
                break
            if action == "d":
                game.board.print_debug_board()
                continue
            if action == "n":
                print(render_board(game.reinit()))
                continue
            if action == "a":
                summary = game.acknowledge_completion()
                if summary is None:
                    print("Session not completed yet.")
                else:
                    print(summary.title)
                    print(summary.body)
                continue

            try:
                result = game.step(action, row, col)
            except InvalidCoordinate as exc:
                print(f"? {exc}")
                continue

            for event in result["events"]:
                print(f"[{event['title']}] {event['body']}")
            print(render_board(result))
            print(f"time {result['time']}  moves {result['moves_made']}")
            if result["completed"]:
                print("SYSTEM VISIBILITY LIMIT REACHED. Type 'a' for the unseen summary.")
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        game.close()


if __name__ == "__main__":
    main()
