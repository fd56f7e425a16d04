"""Persistence of player identities and hashed secrets."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from playerstats import bcrypt, db
from playerstats.errors import DuplicateName, NotFound
from playerstats.models import Player

# Compared against when the identity is unknown so both login failure paths
# do the same amount of bcrypt work.
_DUMMY_HASH: Optional[str] = None


def hash_secret(secret: str) -> str:
    return bcrypt.generate_password_hash(secret).decode('utf-8')


def store(name: str, secret_hash: str, email: Optional[str] = None) -> str:
    """Persist a new player and return its id.

    Raises DuplicateName when the name (or email) already exists; an
    existing record is never overwritten.
    """
    _check_available(name, email)

    player = Player(name=name, email=email, secret_hash=secret_hash)
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration
        db.session.rollback()
        if email and 'email' in str(exc.orig).lower():
            raise DuplicateName('Email is already registered')
        raise DuplicateName(f"Name '{name}' is already taken")
    return player.id


def _check_available(name: str, email: Optional[str]) -> None:
    if Player.query.filter_by(name=name).first():
        raise DuplicateName(f"Name '{name}' is already taken")
    if email and Player.query.filter_by(email=email).first():
        raise DuplicateName('Email is already registered')


def lookup_by_name(name: str) -> Player:
    player = Player.query.filter_by(name=name).first()
    if player is None:
        raise NotFound()
    return player


def lookup_by_email(email: str) -> Player:
    player = Player.query.filter_by(email=email).first()
    if player is None:
        raise NotFound()
    return player


def lookup_by_id(player_id: str) -> Player:
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFound()
    return player


def secret_matches(player: Player, secret: str) -> bool:
    if not player.secret_hash:
        burn_comparison(secret)
        return False
    return bcrypt.check_password_hash(player.secret_hash, secret or '')


def burn_comparison(secret: str) -> None:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_secret('not-a-real-secret')
    bcrypt.check_password_hash(_DUMMY_HASH, secret or '')
