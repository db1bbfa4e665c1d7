import logging
import random
import string
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .engine import GameResult, MemoryGame

logger = logging.getLogger(__name__)


def _now() -> float:
    return time.monotonic()


@dataclass
class GameSession:
    """A live game plus its transient score-submission status."""
    game_code: str
    game: MemoryGame
    saving: bool = False
    has_submitted: bool = False
    save_error: str = ''
    player_name: str = ''
    result: Optional[GameResult] = None
    last_activity: float = field(default_factory=lambda: _now())
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def touch(self) -> None:
        self.last_activity = _now()

    def idle_for(self) -> float:
        return _now() - self.last_activity

    def reset_submission(self) -> None:
        self.saving = False
        self.has_submitted = False
        self.save_error = ''
        self.player_name = ''
        self.result = None

    def to_dict(self):
        payload = self.game.to_dict()
        payload['game_code'] = self.game_code
        payload['submission'] = {
            'saving': self.saving,
            'submitted': self.has_submitted,
            'error': self.save_error or None,
        }
        return payload


_sessions: Dict[str, GameSession] = {}
_sessions_lock = threading.Lock()


def generate_game_code(length=4):
    """Generate a short game code not used by any live session."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _sessions:
            return code


def create_session(make_game: Callable[[str], MemoryGame], idle_ttl_sec: float = 0) -> GameSession:
    """Register a new session; ``make_game`` receives the allocated code.

    Sessions idle for longer than ``idle_ttl_sec`` are swept first.
    """
    sweep_idle_sessions(idle_ttl_sec)
    with _sessions_lock:
        code = generate_game_code()
        session = GameSession(game_code=code, game=make_game(code))
        _sessions[code] = session
    return session


def get_session(game_code: str) -> Optional[GameSession]:
    if not game_code:
        return None
    return _sessions.get(game_code.upper())


def end_session(game_code: str) -> Optional[GameSession]:
    with _sessions_lock:
        session = _sessions.pop(game_code.upper(), None)
    if session:
        # park the clock; pending callbacks see a stopped timer and no-op
        session.game.timer.stop()
    return session


def sweep_idle_sessions(idle_ttl_sec: float) -> List[str]:
    """End every session with no activity for more than ``idle_ttl_sec``.

    A non-positive TTL disables eviction.
    """
    if not idle_ttl_sec or idle_ttl_sec <= 0:
        return []
    with _sessions_lock:
        stale = [code for code, s in _sessions.items() if s.idle_for() > idle_ttl_sec]
    ended = [code for code in stale if end_session(code)]
    if ended:
        logger.info(f"[session-sweep] ended={','.join(ended)} ttl={idle_ttl_sec}s")
    return ended


def clear_sessions() -> None:
    with _sessions_lock:
        for session in _sessions.values():
            session.game.timer.stop()
        _sessions.clear()
