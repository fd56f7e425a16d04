from flask_socketio import join_room, leave_room, emit
from playerstats import socketio

LEADERBOARD_ROOM = 'leaderboard'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_leaderboard(data=None):
    join_room(LEADERBOARD_ROOM)
    emit('joined', {'room': LEADERBOARD_ROOM})


def handle_leave_leaderboard(data=None):
    leave_room(LEADERBOARD_ROOM)
    emit('left', {'room': LEADERBOARD_ROOM})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_leaderboard': handle_join_leaderboard,
        'leave_leaderboard': handle_leave_leaderboard,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
