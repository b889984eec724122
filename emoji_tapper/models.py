from emoji_tapper import db
from datetime import datetime, timezone
import uuid


def utcnow():
    """Naive UTC timestamp; SQLite drops tzinfo so we never store it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_score_id():
    return uuid.uuid4().hex


class HighScore(db.Model):
    """One submitted score. Rows are only ever appended."""
    __tablename__ = 'highscores'
    __table_args__ = (
        db.Index('ix_highscores_board', 'game', 'mode', 'platform', 'score'),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_score_id)
    game = db.Column(db.String(100), nullable=False)
    mode = db.Column(db.String(50), nullable=False)
    platform = db.Column(db.String(50), nullable=False)
    player = db.Column(db.String(50), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'game': self.game,
            'mode': self.mode,
            'platform': self.platform,
            'player': self.player,
            'score': self.score,
            'datetime': self.submitted_at.replace(tzinfo=timezone.utc).isoformat().replace('+00:00', 'Z')
            if self.submitted_at else None,
        }
