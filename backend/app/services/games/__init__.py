"""Game domain services: deck, clock, scoring, state machine, leaderboard.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .deck import Tile, build_deck
from .engine import GameResult, GameState, MemoryGame, Phase
from .scoring import format_time, score_for_attempts
from .timer import Timer
