from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import json
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    origins = flask_app.config.get('CORS_ORIGINS') or Config.CORS_ORIGINS

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from colorlock.errors import register_error_handlers
    register_error_handlers(flask_app)

    from colorlock.main import main
    flask_app.register_blueprint(main)

    from colorlock.api.puzzles import puzzles
    flask_app.register_blueprint(puzzles, url_prefix='/api/puzzles')

    from colorlock.api.attempts import attempts
    flask_app.register_blueprint(attempts, url_prefix='/api')

    from colorlock.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Flask-Login user loader
    from colorlock.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        from colorlock.errors import ApiError
        raise ApiError('unauthenticated', 'Login required')

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('import-puzzles')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_puzzles_command(path):
        """Loads daily puzzles from a JSON file keyed by ISO date."""
        from colorlock.models import Puzzle
        from colorlock.services.puzzles import PuzzleDefinition

        with open(path) as fh:
            source = json.load(fh)
        with flask_app.app_context():
            created = updated = 0
            for day, record in sorted(source.items()):
                try:
                    definition = PuzzleDefinition.from_dict(day, record)
                except (ValueError, KeyError, TypeError) as exc:
                    raise click.ClickException(f"puzzle {day}: {exc}")
                existing = Puzzle.query.filter_by(date=day).first()
                if existing is None:
                    db.session.add(Puzzle.from_definition(definition))
                    created += 1
                    continue
                fresh = Puzzle.from_definition(definition)
                for column in ('initial_grid', 'target_color', 'actions', 'optimal_move_count', 'color_map'):
                    setattr(existing, column, getattr(fresh, column))
                updated += 1
            db.session.commit()
            print(f'Imported puzzles: {created} created, {updated} updated.')

    @click.command('rescore')
    @click.option('--puzzle', 'puzzle_id', default=None, help='Only rescore this ISO date.')
    def rescore_command(puzzle_id):
        """Re-derives Elo scores and rebuilds users' Elo totals."""
        from colorlock.services.ledger.rescore import rescore
        with flask_app.app_context():
            changed = rescore(puzzle_id)
            print(f'Rescored records: {changed} changed.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(import_puzzles_command)
    flask_app.cli.add_command(rescore_command)

    return flask_app
