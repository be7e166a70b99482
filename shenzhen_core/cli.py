from __future__ import annotations

import argparse
from typing import Optional

from .board import Board, all_cards
from .deal import new_game
from .solver import NoSolution, StepEvent, WonEvent, Won, apply, iter_steps, solve


def _summary(board: Board) -> str:
    goals = ' '.join(str(len(p)) for p in board.goals)
    free = sum(len(c) for c in board.free_cells)
    tableau = sum(len(c) for c in board.tableau)
    return f"goals={goals} free={free} flower={len(board.flower)} tableau={tableau}"


def _print_steps(board: Board, limit: int, max_states: Optional[int]) -> None:
    stepper = iter_steps(board, max_states=max_states)
    for n, event in enumerate(stepper, start=1):
        if isinstance(event, WonEvent):
            print(f"Won after {len(event.moves)} moves")
            return
        assert isinstance(event, StepEvent)
        best = event.candidates[0] if event.candidates else None
        best_txt = f"{best.action} (score {best.score})" if best else 'none (backtrack)'
        print(f"step {n}: depth={len(event.path)} candidates={len(event.candidates)} best={best_txt}")
        if n >= limit:
            return


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description='Shenzhen solitaire dealer and solver')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--max-states', type=int, default=None, help='Stop after this many distinct boards')
    parser.add_argument('--canonical', action='store_true', help='Merge boards that only differ by zone order')
    parser.add_argument('--step', type=int, default=0, metavar='N', help='Print the first N search steps instead of solving')
    parser.add_argument('--replay', action='store_true', help='Print a board summary after each solution move')
    args = parser.parse_args(argv)

    board = new_game(seed=args.seed)
    print(f"Dealt {len(all_cards(board))} cards (seed={args.seed})")

    if args.step > 0:
        _print_steps(board, args.step, args.max_states)
        return

    res = solve(board, canonical=args.canonical, max_states=args.max_states)
    if isinstance(res, Won):
        print(f"Solved in {len(res.moves)} moves ({res.visited} boards seen):")
        cur = board
        for i, action in enumerate(res.moves, start=1):
            line = f"{i:4d}. {action}"
            if args.replay:
                cur = apply(cur, action)
                line += f"    [{_summary(cur)}]"
            print(line)
        return

    assert isinstance(res, NoSolution)
    if res.complete:
        print(f"No solution ({res.visited} boards seen)")
    else:
        print(f"Gave up after {res.visited} boards; raise --max-states to search further")
