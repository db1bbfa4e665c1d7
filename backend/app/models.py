from datetime import datetime, timezone

from app import db


def _utcnow():
    return datetime.now(timezone.utc)


class LeaderboardEntry(db.Model):
    __tablename__ = 'leaderboard'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(64), nullable=False, default='Anonymous')
    attempts = db.Column(db.Integer, nullable=False)
    time_ms = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Integer, nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'player_name': self.player_name,
            'attempts': self.attempts,
            'time_ms': self.time_ms,
            'score': self.score,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
