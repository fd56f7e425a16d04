from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from playerstats.errors import ValidationFailed
from playerstats.services import accounts as svc_accounts


accounts = Blueprint('accounts', __name__)


@accounts.route('/accounts', methods=['POST'])
def register():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed('JSON body with name and secret is required')
    result = svc_accounts.register(data.get('name'), data.get('secret'), email=data.get('email'))
    return jsonify(result.to_dict()), 201


@accounts.route('/sessions', methods=['POST'])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed('JSON body with name (or email) and secret is required')
    identifier = data.get('name') or data.get('email')
    result = svc_accounts.login(identifier, data.get('secret'))
    return jsonify(result.to_dict())


@accounts.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'player': current_user.to_dict()})
