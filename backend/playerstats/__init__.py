from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
import click
from config import Config
from playerstats.services.tokens import TokenService

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
tokens = TokenService()
default_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or default_origins

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    tokens.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from playerstats.main import main
    flask_app.register_blueprint(main)

    from playerstats.api.accounts import accounts
    flask_app.register_blueprint(accounts)

    from playerstats.api.stats import stats
    flask_app.register_blueprint(stats)

    from playerstats.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Bearer-token identity for protected views
    from playerstats import auth
    flask_app.before_request(auth.reset_identity)

    _register_error_handlers(flask_app)
    _register_commands(flask_app)

    return flask_app


def _register_error_handlers(flask_app):
    from playerstats.errors import PlayerStatsError, StorageFailure

    @flask_app.errorhandler(PlayerStatsError)
    def handle_domain_error(err):
        return jsonify({'error': err.message, 'code': err.code}), err.status_code

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err):
        db.session.rollback()
        flask_app.logger.exception(f"[storage] unhandled database error: {type(err).__name__}")
        failure = StorageFailure()
        return jsonify({'error': failure.message, 'code': failure.code}), failure.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({'error': err.description, 'code': err.name.replace(' ', '')}), err.code


def _register_commands(flask_app):

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from playerstats.services import accounts, stats
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed players with a few finished games each
            seed = {
                'alice': ['win', 'win', 'loss'],
                'bob': ['loss', 'tie'],
                'cara': [],
            }
            for name, results in seed.items():
                registered = accounts.register(name, 'password123')
                for result in results:
                    stats.report_outcome(registered.player.id, result)

            click.echo('Database has been reset and seeded!')

    @click.command('leaderboard')
    @click.option('--limit', default=None, type=int, help='Number of entries to show.')
    def leaderboard_command(limit):
        """Prints the current leaderboard."""
        from playerstats.services import stats
        with flask_app.app_context():
            entries = stats.leaderboard(limit)
            if not entries:
                click.echo('No finished games yet.')
                return
            for entry in entries:
                click.echo(
                    f"{entry.rank:>3}. {entry.name:<20} W{entry.wins} L{entry.losses} "
                    f"T{entry.ties} ({entry.win_rate:.1f}%)"
                )

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(leaderboard_command)
