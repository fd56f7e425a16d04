"""Outcome recording and leaderboard ranking."""

import enum
from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy import Float, cast, update
from sqlalchemy.exc import SQLAlchemyError

from playerstats import db
from playerstats.errors import InvalidOutcome, NotFound, StorageFailure, ValidationFailed
from playerstats.models import Player


class Outcome(enum.Enum):
    WIN = 'win'
    LOSS = 'loss'
    TIE = 'tie'


_COUNTERS = {
    Outcome.WIN: Player.wins,
    Outcome.LOSS: Player.losses,
    Outcome.TIE: Player.ties,
}


@dataclass
class LeaderboardEntry:
    rank: int
    id: str
    name: str
    wins: int
    losses: int
    ties: int
    total_games: int
    win_rate: float

    def to_dict(self):
        return {
            'rank': self.rank,
            'name': self.name,
            'wins': self.wins,
            'losses': self.losses,
            'ties': self.ties,
            'totalGames': self.total_games,
            'winRate': self.win_rate,
        }


def parse_outcome(raw) -> Outcome:
    if isinstance(raw, Outcome):
        return raw
    if not isinstance(raw, str):
        raise InvalidOutcome()
    try:
        return Outcome(raw.strip())
    except ValueError:
        raise InvalidOutcome()


def report_outcome(player_id: str, outcome) -> Player:
    """Add one finished game to a player's record.

    The matching counter and total_games move together in a single UPDATE,
    committed as one transaction; the database serialises concurrent reports
    on the same row.
    """
    outcome = parse_outcome(outcome)
    counter = _COUNTERS[outcome]
    stmt = (
        update(Player)
        .where(Player.id == player_id)
        .values({counter: counter + 1, Player.total_games: Player.total_games + 1})
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.session.execute(stmt)
        if result.rowcount == 0:
            db.session.rollback()
            raise NotFound()
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[report-failed] player={player_id} outcome={outcome.value} error={type(exc).__name__}")
        raise StorageFailure()

    player = db.session.get(Player, player_id)
    # Rows loaded before the UPDATE carry stale counters
    db.session.refresh(player)
    current_app.logger.info(
        f"[report] player={player_id} outcome={outcome.value} "
        f"wins={player.wins} losses={player.losses} ties={player.ties} total={player.total_games}"
    )
    return player


def _clamp_limit(limit: Optional[int]) -> int:
    cfg = current_app.config
    if limit is None:
        limit = int(cfg.get('LEADERBOARD_DEFAULT_LIMIT', 10))
    if limit < 1:
        raise ValidationFailed('limit must be a positive integer')
    return min(limit, int(cfg.get('LEADERBOARD_MAX_LIMIT', 100)))


def leaderboard(limit: Optional[int] = None) -> List[LeaderboardEntry]:
    """Players with at least one game, best first.

    Ordered by wins, then win rate (computed per query, never stored), then
    name so equal records list in a stable order.
    """
    limit = _clamp_limit(limit)
    win_ratio = cast(Player.wins, Float) / Player.total_games
    players = (
        Player.query
        .filter(Player.total_games > 0)
        .order_by(Player.wins.desc(), win_ratio.desc(), Player.name.asc())
        .limit(limit)
        .all()
    )
    return [
        LeaderboardEntry(
            rank=idx,
            id=p.id,
            name=p.name,
            wins=p.wins,
            losses=p.losses,
            ties=p.ties,
            total_games=p.total_games,
            win_rate=p.win_rate,
        )
        for idx, p in enumerate(players, start=1)
    ]
