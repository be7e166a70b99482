from __future__ import annotations

# Facade module that re-exports the Shenzhen solitaire core.
# The Flask app and tests import from here; single-responsibility
# modules live under shenzhen_core/*.

from shenzhen_core.cards import (
    BLACK,
    COLORS,
    DRAGON,
    FLOWER,
    FLOWER_CARD,
    GREEN,
    RED,
    Card,
    build_deck,
    card_code,
    color_index,
    dragon,
    parse_card,
)
from shenzhen_core.board import (
    FLOWER_CELL,
    FREE,
    GOAL,
    TABLEAU,
    Board,
    Location,
    Move,
    all_cards,
    empty_board,
    get_run,
    is_won,
    make_board,
    transfer,
)
from shenzhen_core.deal import deal_board, new_game, shuffled_deck
from shenzhen_core.moves import (
    Consolidation,
    apply_validated,
    can_stack,
    consolidate_dragons,
    consolidation_eligible,
    goal_accepts,
    valid_destinations,
    valid_sequence,
)
from shenzhen_core.normalize import canonicalize, is_canonical
from shenzhen_core.hashkey import board_key, canonical_key
from shenzhen_core.solver import (
    Action,
    Candidate,
    ConsolidateDragons,
    NoSolution,
    SolveResult,
    StepEvent,
    VisitTable,
    Won,
    WonEvent,
    apply,
    consolidation_available,
    iter_steps,
    possible_moves,
    score,
    solve,
)


def main() -> None:
    # CLI driver delegated to shenzhen_core.cli
    from shenzhen_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
