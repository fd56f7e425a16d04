"""Bearer-token identity for protected views.

Flask-Login resolves ``current_user`` from the ``Authorization`` header on
every request; ``login_required`` stops the request with a 401 before the
view runs when the token is missing, forged or expired.
"""

from flask import g, jsonify

from playerstats import login_manager
from playerstats.errors import Unauthenticated
from playerstats.services import accounts


def bearer_token(req):
    header = req.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


@login_manager.request_loader
def load_player_from_request(req):
    token = bearer_token(req)
    if token is None:
        return None
    try:
        return accounts.current_identity(token)
    except Unauthenticated:
        return None


@login_manager.unauthorized_handler
def unauthorized():
    err = Unauthenticated()
    return jsonify({'error': err.message, 'code': err.code}), err.status_code


def reset_identity():
    # g lives on the app context, which may outlive a single request
    g.pop('_login_user', None)
