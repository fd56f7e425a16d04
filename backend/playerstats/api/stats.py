from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from playerstats import socketio
from playerstats.errors import Forbidden, ValidationFailed
from playerstats.services import credentials
from playerstats.services import stats as svc_stats


stats = Blueprint('stats', __name__)


@stats.route('/players/<string:player_id>/stats', methods=['POST'])
@login_required
def report_outcome(player_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    # Only the path id and the token identity matter; ids in the body are ignored
    outcome = svc_stats.parse_outcome(data.get('result'))
    credentials.lookup_by_id(player_id)
    if player_id != current_user.id:
        raise Forbidden('You can only report results for your own account')

    player = svc_stats.report_outcome(current_user.id, outcome)
    payload = player.to_dict()
    socketio.emit('leaderboard_update', {'player': payload}, to='leaderboard', namespace='/ws')
    return jsonify({'player': payload})


@stats.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    raw_limit = request.args.get('limit')
    limit = None
    if raw_limit is not None:
        try:
            limit = int(raw_limit)
        except ValueError:
            raise ValidationFailed('limit must be a positive integer')
    entries = svc_stats.leaderboard(limit)
    return jsonify({'entries': [e.to_dict() for e in entries]})
