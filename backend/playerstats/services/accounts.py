"""Registration, login and identity resolution."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import current_app

from playerstats import db, tokens
from playerstats.errors import (
    InvalidCredentials,
    NotFound,
    Unauthenticated,
    ValidationFailed,
)
from playerstats.models import Player
from playerstats.services import credentials

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


@dataclass
class AuthResult:
    player: Player
    token: str

    def to_dict(self):
        return {'player': self.player.to_dict(), 'token': self.token}


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationFailed('Name is required')
    name = name.strip()
    max_len = int(current_app.config.get('MAX_NAME_LENGTH', 64))
    if len(name) > max_len:
        raise ValidationFailed(f'Name must be at most {max_len} characters')
    # '@' marks an email at login
    if '@' in name:
        raise ValidationFailed("Name may not contain '@'")
    return name


def _check_secret(secret) -> str:
    min_len = int(current_app.config.get('MIN_SECRET_LENGTH', 8))
    if not isinstance(secret, str) or len(secret) < min_len:
        raise ValidationFailed(f'Secret must be at least {min_len} characters')
    return secret


def _clean_email(email) -> Optional[str]:
    if email is None or (isinstance(email, str) and not email.strip()):
        return None
    if not isinstance(email, str) or not _EMAIL_RE.match(email.strip()):
        raise ValidationFailed('Email address is not valid')
    return email.strip().lower()


def register(name, secret, email=None) -> AuthResult:
    name = _clean_name(name)
    secret = _check_secret(secret)
    email = _clean_email(email)

    secret_hash = credentials.hash_secret(secret)
    player_id = credentials.store(name, secret_hash, email=email)
    player = credentials.lookup_by_id(player_id)
    current_app.logger.info(f"[register] player={player.id} name={player.name}")
    return AuthResult(player=player, token=tokens.issue(player.id))


def login(identifier, secret) -> AuthResult:
    """Authenticate by name or email.

    Unknown identities and wrong secrets both end in the same
    InvalidCredentials error.
    """
    if not isinstance(identifier, str) or not identifier.strip() or not isinstance(secret, str):
        raise ValidationFailed('Name (or email) and secret are required')
    identifier = identifier.strip()

    try:
        if '@' in identifier:
            player = credentials.lookup_by_email(identifier.lower())
        else:
            player = credentials.lookup_by_name(identifier)
    except NotFound:
        credentials.burn_comparison(secret)
        current_app.logger.info(f"[login-failed] identifier={identifier!r}")
        raise InvalidCredentials()

    if not credentials.secret_matches(player, secret):
        current_app.logger.info(f"[login-failed] identifier={identifier!r}")
        raise InvalidCredentials()

    player.last_login_at = datetime.now(timezone.utc)
    db.session.add(player)
    db.session.commit()
    current_app.logger.info(f"[login] player={player.id}")
    return AuthResult(player=player, token=tokens.issue(player.id))


def current_identity(token) -> Player:
    claims = tokens.verify(token)
    if claims is None:
        raise Unauthenticated('Invalid or expired token')
    player = db.session.get(Player, claims.player_id)
    if player is None:
        raise Unauthenticated('Invalid or expired token')
    return player
