"""Signed, time-limited session tokens.

Tokens are stateless: validity is decided by the signature and the embedded
expiry alone. There is no revocation list, so the TTL is the only way a token
stops working.
"""

import hashlib
import time
from dataclasses import dataclass
from typing import Callable, Optional

from itsdangerous import BadData, URLSafeSerializer
from itsdangerous.encoding import base64_decode, base64_encode


@dataclass(frozen=True)
class TokenClaims:
    player_id: str
    issued_at: int
    expires_at: int


class TokenService:
    """Issues and verifies bearer tokens for players.

    Follows the Flask extension pattern: create once at import time, bind the
    signing key with ``init_app``. The key never leaves this object.
    """

    def __init__(self, app=None, clock: Callable[[], float] = time.time):
        self.clock = clock
        self.default_ttl = 0
        self._serializer: Optional[URLSafeSerializer] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.configure(
            app.config['SECRET_KEY'],
            salt=app.config.get('TOKEN_SALT', 'player-session'),
            default_ttl=int(app.config.get('TOKEN_TTL_SEC', 7 * 24 * 3600)),
        )

    def configure(self, secret_key: str, salt: str = 'player-session', default_ttl: int = 3600) -> None:
        if not secret_key:
            raise ValueError('A signing key is required to issue tokens')
        self.default_ttl = default_ttl
        self._serializer = URLSafeSerializer(
            secret_key,
            salt=salt,
            signer_kwargs={'digest_method': hashlib.sha256},
        )

    def issue(self, player_id: str, ttl: Optional[int] = None) -> str:
        if self._serializer is None:
            raise RuntimeError('TokenService is not configured')
        ttl = self.default_ttl if ttl is None else int(ttl)
        if ttl <= 0:
            raise ValueError('Token TTL must be positive')
        now = int(self.clock())
        return self._serializer.dumps({'sub': str(player_id), 'iat': now, 'exp': now + ttl})

    def verify(self, token) -> Optional[TokenClaims]:
        """Return the claims of a valid token, or None.

        Any malformed input, bad signature, bad payload shape or expired
        token is rejected.
        """
        if self._serializer is None or not isinstance(token, str) or not token:
            return None
        try:
            if not _canonical_signature(token):
                return None
            payload = self._serializer.loads(token)
        except (BadData, UnicodeError, ValueError):
            return None
        if not isinstance(payload, dict):
            return None
        player_id = payload.get('sub')
        issued_at = payload.get('iat')
        expires_at = payload.get('exp')
        if not isinstance(player_id, str) or not player_id:
            return None
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            return None
        if self.clock() >= expires_at:
            return None
        return TokenClaims(player_id=player_id, issued_at=issued_at, expires_at=expires_at)


def _canonical_signature(token: str) -> bool:
    """True when the signature segment re-encodes to exactly the same text.

    The base64 decoder ignores the spare low bits of the last character, so
    without this check several token strings would share one signature.
    """
    _, sep, sig = token.rpartition('.')
    if not sep or not sig:
        return False
    return base64_encode(base64_decode(sig)).decode('ascii') == sig
