import pytest
import requests

from playerstats.client import GuardState, PlayerSession, StatsClient, StatsClientError
from playerstats.models import Player


@pytest.fixture()
def stats_client(http_session):
    return StatsClient('http://testserver', session=http_session)


def test_register_login_me(stats_client):
    player = stats_client.register('Alice', 'correct-horse', email='alice@example.com')
    assert player['name'] == 'Alice'
    assert stats_client.me()['id'] == player['id']

    other = StatsClient('http://testserver', session=stats_client.session)
    assert other.login('alice@example.com', 'correct-horse')['id'] == player['id']
    assert other.login('Alice', 'correct-horse')['id'] == player['id']


def test_errors_carry_status_and_code(stats_client):
    stats_client.register('Alice', 'correct-horse')
    with pytest.raises(StatsClientError) as exc:
        StatsClient('http://testserver', session=stats_client.session).login('Alice', 'wrong-horse')
    assert exc.value.status == 401
    assert exc.value.code == 'InvalidCredentials'

    with pytest.raises(StatsClientError) as exc:
        stats_client.report_outcome(stats_client.me()['id'], 'draw')
    assert exc.value.status == 400
    assert exc.value.code == 'InvalidOutcome'


def test_me_without_login_fails_locally(stats_client, http_session):
    with pytest.raises(StatsClientError) as exc:
        stats_client.me()
    assert exc.value.status == 401
    assert http_session.calls == []


def test_network_errors_wrapped():
    class DownSession:
        def request(self, *args, **kwargs):
            raise requests.exceptions.ConnectionError('refused')

    client = StatsClient('http://nowhere', token='t', session=DownSession())
    with pytest.raises(StatsClientError) as exc:
        client.report_outcome('p1', 'win')
    assert exc.value.status is None


def test_session_reports_finished_game_once(stats_client, http_session):
    session = PlayerSession.register(stats_client, 'Alice', 'correct-horse')
    session.start_game()
    assert session.game_state_changed(None) is None

    # Board re-evaluated three times after the game ends
    for _ in range(3):
        session.game_state_changed('win')

    report_calls = [c for c in http_session.calls if c[0] == 'POST' and c[1].endswith('/stats')]
    assert len(report_calls) == 1
    assert session.player['wins'] == 1
    assert session.guard.state is GuardState.FIRED
    assert Player.query.filter_by(name='Alice').first().total_games == 1

    session.start_game()
    session.game_state_changed('tie')
    assert session.player['ties'] == 1
    assert session.player['totalGames'] == 2


def test_session_retries_after_failure(stats_client):
    session = PlayerSession.register(stats_client, 'Alice', 'correct-horse')
    good_token = stats_client.token
    stats_client.token = 'expired-or-forged'
    session.start_game()
    with pytest.raises(StatsClientError):
        session.game_state_changed('loss')
    assert session.guard.state is GuardState.ARMED
    assert Player.query.filter_by(name='Alice').first().total_games == 0

    stats_client.token = good_token
    session.game_state_changed('loss')
    session.game_state_changed('loss')
    assert session.player['losses'] == 1
    assert Player.query.filter_by(name='Alice').first().total_games == 1


def test_leaderboard_via_client(stats_client):
    session = PlayerSession.register(stats_client, 'Alice', 'correct-horse')
    session.start_game()
    session.game_state_changed('win')
    entries = stats_client.leaderboard(limit=5)
    assert [e['name'] for e in entries] == ['Alice']
    assert entries[0]['winRate'] == 100.0
    assert session.refresh()['wins'] == 1
