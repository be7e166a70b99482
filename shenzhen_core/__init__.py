"""
Shenzhen solitaire core Python package.

Board model, move legality and the search solver, kept free of any I/O so
the Flask app, the CLI and tests can share them.
Modules:
- cards.py: Card, colors and ranks, the canonical deck
- board.py: Board, Location, Move, get_run/transfer/is_won
- deal.py: shuffling and dealing (new_game)
- moves.py: legality rules, dragon consolidation, apply_validated
- normalize.py / hashkey.py: canonical ordering and visited-state keys
- solver.py: move generation, scoring, depth-first search, stepping
- cli.py: command line driver
"""
