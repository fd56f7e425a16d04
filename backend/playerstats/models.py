from playerstats import db
from flask_login import UserMixin
from datetime import datetime, timezone
import uuid


def _new_player_id():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class Player(UserMixin, db.Model):
    __tablename__ = 'player'
    __table_args__ = (
        db.CheckConstraint('wins >= 0 AND losses >= 0 AND ties >= 0', name='ck_player_counters_non_negative'),
        db.CheckConstraint('total_games = wins + losses + ties', name='ck_player_total_games'),
    )
    id = db.Column(db.String(36), primary_key=True, default=_new_player_id)
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    secret_hash = db.Column(db.String(128), nullable=True)
    wins = db.Column(db.Integer, default=0, nullable=False)
    losses = db.Column(db.Integer, default=0, nullable=False)
    ties = db.Column(db.Integer, default=0, nullable=False)
    total_games = db.Column(db.Integer, default=0, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    last_login_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f'<Player {self.name}>'

    @property
    def win_rate(self):
        """Win percentage rounded to one decimal, or None before the first game."""
        if not self.total_games:
            return None
        return round(self.wins / self.total_games * 100, 1)

    def to_dict(self):
        # Credential material is never part of the projection
        return {
            'id': self.id,
            'name': self.name,
            'wins': self.wins,
            'losses': self.losses,
            'ties': self.ties,
            'totalGames': self.total_games,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
