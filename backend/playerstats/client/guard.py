"""Single-flight reporting of a finished game.

The caller re-evaluates "is the game over?" whenever its own state changes,
including when the refreshed player record from a report lands. The guard
makes sure that only the first of those observations reaches the server for
a given game instance.
"""

import enum
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class GuardState(enum.Enum):
    ARMED = 'armed'
    FIRED = 'fired'


class ReportingGuard:
    """Two-state controller around a ``submit(outcome)`` callable.

    ARMED -> FIRED happens before ``submit`` runs, so observations made while
    the report is in flight (or caused by its result) are ignored. A failure
    re-arms the guard and propagates; nothing is retried until the caller
    observes the conclusion again. ``new_game`` re-arms for the next instance.
    """

    def __init__(self, submit: Callable[[str], Any]):
        self._submit = submit
        self._state = GuardState.ARMED
        self.game_instance = 0

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def fired(self) -> bool:
        return self._state is GuardState.FIRED

    def new_game(self) -> None:
        self.game_instance += 1
        self._state = GuardState.ARMED

    def observe(self, outcome: Optional[str]) -> Optional[Any]:
        """Report ``outcome`` if this game has not been reported yet.

        ``None`` means the game is still running. Returns whatever ``submit``
        returned, or None when the observation was a no-op.
        """
        if outcome is None or self._state is GuardState.FIRED:
            return None
        self._state = GuardState.FIRED
        instance = self.game_instance
        try:
            result = self._submit(outcome)
        except Exception:
            # A new game may have started meanwhile; only re-arm our own instance
            if self.game_instance == instance:
                self._state = GuardState.ARMED
            logger.warning('Reporting %s for game %d failed; will retry on next conclusion', outcome, instance)
            raise
        logger.debug('Reported %s for game %d', outcome, instance)
        return result
