"""Flip/evaluate/lock state machine for a memory match game.

The transitions are pure functions over an immutable ``GameState``
(``flip``, ``resolve``, ``restart``). ``MemoryGame`` wires them to a deck,
a ``Timer`` and a scheduler for the delayed pair resolution.
"""

import logging
import random
import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

from .deck import Tile, build_deck
from .scoring import DEFAULT_SCORE_BASE, DEFAULT_SCORE_PENALTY, format_time, score_for_attempts
from .timer import Timer

logger = logging.getLogger(__name__)

DEFAULT_MATCH_DELAY_MS = 350
DEFAULT_MISMATCH_DELAY_MS = 700


class Phase(str, Enum):
    IDLE = 'idle'
    ONE_FLIPPED = 'one_flipped'
    EVALUATING = 'evaluating'
    COMPLETE = 'complete'


@dataclass(frozen=True)
class GameState:
    flipped: Tuple[str, ...] = ()
    matched: FrozenSet[str] = field(default_factory=frozenset)
    attempts: int = 0
    locked: bool = False
    elapsed_ms: int = 0
    epoch: int = 0


class PendingResolution(NamedTuple):
    epoch: int
    delay_ms: int
    is_match: bool


class GameResult(NamedTuple):
    attempts: int
    time_ms: int
    score: int


def phase_of(state: GameState, deck_size: int) -> Phase:
    if len(state.matched) == deck_size:
        return Phase.COMPLETE
    if state.locked:
        return Phase.EVALUATING
    if len(state.flipped) == 1:
        return Phase.ONE_FLIPPED
    return Phase.IDLE


def flip(
    state: GameState,
    tiles_by_id: Dict[str, Tile],
    tile_id: str,
    match_delay_ms: int = DEFAULT_MATCH_DELAY_MS,
    mismatch_delay_ms: int = DEFAULT_MISMATCH_DELAY_MS,
) -> Tuple[GameState, Optional[PendingResolution]]:
    """Turn a tile face up.

    Returns the new state and, when this completes a pair, the resolution to
    schedule. Ignored flips (locked board, tile already up or matched,
    unknown id) return ``state`` itself unchanged.
    """
    if state.locked or tile_id not in tiles_by_id:
        return state, None
    if tile_id in state.flipped or tile_id in state.matched:
        return state, None

    if not state.flipped:
        return replace(state, flipped=(tile_id,)), None

    first_id = state.flipped[0]
    is_match = tiles_by_id[first_id].symbol == tiles_by_id[tile_id].symbol
    # the attempt counts now, before the pair is resolved
    new_state = replace(
        state,
        flipped=(first_id, tile_id),
        locked=True,
        attempts=state.attempts + 1,
    )
    delay = match_delay_ms if is_match else mismatch_delay_ms
    return new_state, PendingResolution(epoch=state.epoch, delay_ms=delay, is_match=is_match)


def resolve(state: GameState, tiles_by_id: Dict[str, Tile], epoch: int) -> GameState:
    """Commit a match or hide a mismatch for the pair awaiting resolution.

    A resolution queued under an older epoch is discarded.
    """
    if epoch != state.epoch or not state.locked or len(state.flipped) != 2:
        return state
    first_id, second_id = state.flipped
    if tiles_by_id[first_id].symbol == tiles_by_id[second_id].symbol:
        return replace(state, flipped=(), matched=state.matched | {first_id, second_id}, locked=False)
    return replace(state, flipped=(), locked=False)


def restart(state: GameState) -> GameState:
    return GameState(epoch=state.epoch + 1)


class MemoryGame:
    """One active game: deck, state, clock and pending resolution."""

    def __init__(
        self,
        symbols: Sequence[str],
        scheduler,
        match_delay_ms: int = DEFAULT_MATCH_DELAY_MS,
        mismatch_delay_ms: int = DEFAULT_MISMATCH_DELAY_MS,
        tick_ms: int = 1000,
        score_base: int = DEFAULT_SCORE_BASE,
        score_penalty: int = DEFAULT_SCORE_PENALTY,
        rng: Optional[random.Random] = None,
        on_change: Optional[Callable[['MemoryGame'], None]] = None,
        on_complete: Optional[Callable[['MemoryGame', GameResult], None]] = None,
    ):
        self.symbols = list(symbols)
        self.scheduler = scheduler
        self.match_delay_ms = match_delay_ms
        self.mismatch_delay_ms = mismatch_delay_ms
        self.score_base = score_base
        self.score_penalty = score_penalty
        self.rng = rng or random.Random()
        self.on_change = on_change
        self.on_complete = on_complete
        self._lock = threading.RLock()
        self.timer = Timer(scheduler, tick_ms=tick_ms, on_tick=self._on_tick, lock=self._lock)
        self.deck: List[Tile] = build_deck(self.symbols, self.rng)
        self._tiles_by_id = {t.id: t for t in self.deck}
        self.state = GameState()
        self._complete_if_empty()

    @property
    def phase(self) -> Phase:
        return phase_of(self.state, len(self.deck))

    @property
    def is_complete(self) -> bool:
        return self.phase is Phase.COMPLETE

    @property
    def score(self) -> int:
        return score_for_attempts(self.state.attempts, self.score_base, self.score_penalty)

    def snapshot(self) -> GameState:
        with self._lock:
            return replace(self.state, elapsed_ms=self.timer.elapsed_ms)

    def result(self) -> GameResult:
        return GameResult(attempts=self.state.attempts, time_ms=self.timer.elapsed_ms, score=self.score)

    def tile(self, tile_id: str) -> Optional[Tile]:
        return self._tiles_by_id.get(tile_id)

    def flip(self, tile_id: str) -> None:
        with self._lock:
            new_state, pending = flip(
                self.state, self._tiles_by_id, tile_id, self.match_delay_ms, self.mismatch_delay_ms
            )
            if new_state is self.state:
                logger.debug(f"[flip-ignored] tile={tile_id} phase={self.phase.value}")
                return
            self.state = new_state
            self.timer.start()
            if pending is not None:
                logger.info(
                    f"[flip-pair] epoch={pending.epoch} attempts={new_state.attempts} "
                    f"match={pending.is_match} delay={pending.delay_ms}ms"
                )
                self.scheduler.call_later(pending.delay_ms, self._resolve, pending.epoch)
        self._notify()

    def restart(self, deck: Optional[Sequence[Tile]] = None) -> None:
        with self._lock:
            self.timer.stop()
            self.timer.reset()
            self.deck = list(deck) if deck is not None else build_deck(self.symbols, self.rng)
            self._tiles_by_id = {t.id: t for t in self.deck}
            self.state = restart(self.state)
            logger.info(f"[restart] epoch={self.state.epoch} tiles={len(self.deck)}")
        self._notify()
        self._complete_if_empty()

    def _resolve(self, epoch: int) -> None:
        result = None
        with self._lock:
            if epoch != self.state.epoch:
                logger.info(f"[resolve-stale] epoch={epoch} current={self.state.epoch}")
                return
            new_state = resolve(self.state, self._tiles_by_id, epoch)
            if new_state is self.state:
                return
            self.state = new_state
            if self.is_complete:
                self.timer.stop()
                result = self.result()
                logger.info(
                    f"[complete] epoch={epoch} attempts={self.state.attempts} "
                    f"time_ms={self.timer.elapsed_ms} score={self.score}"
                )
        self._notify()
        if result is not None and self.on_complete:
            self.on_complete(self, result)

    def _complete_if_empty(self) -> None:
        # an empty deck is complete before any flip; report it once per deal
        if not self.deck and self.on_complete:
            self.on_complete(self, self.result())

    def _on_tick(self, elapsed_ms: int) -> None:
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self)

    def to_dict(self):
        state = self.snapshot()
        tiles = []
        for t in self.deck:
            is_flipped = t.id in state.flipped
            is_matched = t.id in state.matched
            payload = t.to_dict(face_up=is_flipped or is_matched)
            payload['flipped'] = is_flipped
            payload['matched'] = is_matched
            tiles.append(payload)
        return {
            'phase': self.phase.value,
            'tiles': tiles,
            'flipped': list(state.flipped),
            'matched': sorted(state.matched),
            'attempts': state.attempts,
            'score': self.score,
            'locked': state.locked,
            'elapsed_ms': state.elapsed_ms,
            'time_display': format_time(state.elapsed_ms),
            'epoch': state.epoch,
            'complete': self.is_complete,
            'delays': {
                'match_ms': self.match_delay_ms,
                'mismatch_ms': self.mismatch_delay_ms,
                'tick_ms': self.timer.tick_ms,
            },
        }
