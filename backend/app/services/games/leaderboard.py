"""Leaderboard collaborator: submit a finished game, fetch the top scores.

Both operations report failures as user-facing messages instead of raising,
so a broken or missing database never interrupts play.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models import LeaderboardEntry

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAME = 'Anonymous'
NOT_CONFIGURED = 'Leaderboard not configured.'
SAVE_FAILED = 'Failed to save score. Try again.'
LOAD_FAILED = 'Failed to load leaderboard.'


class SubmitOutcome(NamedTuple):
    ok: bool
    error: Optional[str] = None
    entry: Optional[Dict[str, Any]] = None


class FetchOutcome(NamedTuple):
    ok: bool
    error: Optional[str] = None
    entries: Optional[List[Dict[str, Any]]] = None


def normalize_player_name(name: Optional[str], max_len: int = 20) -> str:
    trimmed = (name or '').strip()
    if not trimmed:
        return DEFAULT_PLAYER_NAME
    return trimmed[:max_len].rstrip() or DEFAULT_PLAYER_NAME


def build_submission(name: Optional[str], result, max_len: int = 20) -> Dict[str, Any]:
    return {
        'player_name': normalize_player_name(name, max_len),
        'attempts': int(result.attempts),
        'time_ms': int(result.time_ms),
        'score': int(result.score),
    }


class SqlLeaderboard:
    """Leaderboard backed by the ``leaderboard`` table."""

    def __init__(self, session):
        self.session = session

    def submit(self, payload: Dict[str, Any]) -> SubmitOutcome:
        entry = LeaderboardEntry(**payload)
        try:
            self.session.add(entry)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning(f"[leaderboard-save-failed] {exc}")
            return SubmitOutcome(ok=False, error=SAVE_FAILED)
        logger.info(f"[leaderboard-save] id={entry.id} name={entry.player_name} score={entry.score}")
        return SubmitOutcome(ok=True, entry=entry.to_dict())

    def top(self, limit: int) -> FetchOutcome:
        try:
            rows = (
                LeaderboardEntry.query
                .order_by(
                    LeaderboardEntry.score.desc(),
                    LeaderboardEntry.created_at.asc(),
                    LeaderboardEntry.id.asc(),
                )
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning(f"[leaderboard-load-failed] {exc}")
            return FetchOutcome(ok=False, error=LOAD_FAILED)
        return FetchOutcome(ok=True, entries=[r.to_dict() for r in rows])


class DisabledLeaderboard:
    """Stand-in used when no leaderboard is configured; every call fails."""

    def submit(self, payload: Dict[str, Any]) -> SubmitOutcome:
        return SubmitOutcome(ok=False, error=NOT_CONFIGURED)

    def top(self, limit: int) -> FetchOutcome:
        return FetchOutcome(ok=False, error=NOT_CONFIGURED)


def get_leaderboard(app):
    if not app.config.get('LEADERBOARD_ENABLED', True):
        return DisabledLeaderboard()
    return SqlLeaderboard(db.session)
