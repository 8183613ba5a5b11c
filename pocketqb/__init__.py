"""pocketqb - Quarterback mini-game play simulation core.

Snap, route, throw, catch, result: one down of football as an explicit
state machine, plus the drive ledger that turns plays into a game.
"""

__version__ = "0.1.0"
