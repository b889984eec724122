from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _cors_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    origins = _cors_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # Import and register blueprints here
    from emoji_tapper.routes import main
    flask_app.register_blueprint(main)

    from emoji_tapper.api.leaderboard import leaderboard
    # Leaderboard endpoints live at the root to match deployed clients
    flask_app.register_blueprint(leaderboard)

    # Register Socket.IO event handlers for live game sessions
    from emoji_tapper.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    @click.option('--seed', is_flag=True, help='Insert a handful of demo scores.')
    def db_reset_command(seed):
        """Drops, recreates, and optionally seeds the database."""
        from emoji_tapper.models import HighScore
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            if seed:
                demo = [('Josh', 115), ('Alice', 98), ('Bob', 87), ('Carol', 123), ('David', 76)]
                for player, score in demo:
                    db.session.add(HighScore(game='Emoji Tapper', mode='Classic', platform='iOS',
                                             player=player, score=score))
                db.session.commit()
            print('Database has been reset' + (' and seeded!' if seed else '!'))

    flask_app.cli.add_command(db_reset_command)

    return flask_app
