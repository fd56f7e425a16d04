from typing import Any, Dict, Optional

from playerstats.client.guard import ReportingGuard
from playerstats.client.http import StatsClient


class PlayerSession:
    """A logged-in player on the client side.

    Holds the cached player record and the reporting guard for the current
    game. Replacing ``player`` with a refreshed record never touches the
    guard, so re-evaluating the finished board afterwards stays a no-op.
    """

    def __init__(self, client: StatsClient, player: Dict[str, Any]):
        self.client = client
        self.player = player
        self.guard = ReportingGuard(self._submit)

    @classmethod
    def register(cls, client: StatsClient, name: str, secret: str, email: Optional[str] = None):
        return cls(client, client.register(name, secret, email=email))

    @classmethod
    def login(cls, client: StatsClient, identifier: str, secret: str):
        return cls(client, client.login(identifier, secret))

    def _submit(self, outcome: str) -> Dict[str, Any]:
        updated = self.client.report_outcome(self.player['id'], outcome)
        self.player = updated
        return updated

    def start_game(self) -> None:
        self.guard.new_game()

    def game_state_changed(self, outcome: Optional[str]) -> Optional[Dict[str, Any]]:
        """Call after every board update; ``outcome`` is None while playing."""
        return self.guard.observe(outcome)

    def refresh(self) -> Dict[str, Any]:
        self.player = self.client.me()
        return self.player
