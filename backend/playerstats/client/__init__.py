"""Client-side helpers for talking to the stats server."""

from playerstats.client.guard import GuardState, ReportingGuard
from playerstats.client.http import StatsClient, StatsClientError
from playerstats.client.session import PlayerSession

__all__ = ['GuardState', 'ReportingGuard', 'StatsClient', 'StatsClientError', 'PlayerSession']
