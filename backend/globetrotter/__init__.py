from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()


def _engine_options(config):
    """Bound every store statement on PostgreSQL so a stuck query fails the request."""
    options = dict(config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})
    uri = config.get('SQLALCHEMY_DATABASE_URI') or ''
    timeout_ms = int(config.get('STORE_STATEMENT_TIMEOUT_MS', 0) or 0)
    if uri.startswith('postgresql') and timeout_ms > 0:
        connect_args = dict(options.get('connect_args') or {})
        connect_args.setdefault('options', f'-c statement_timeout={timeout_ms}')
        options['connect_args'] = connect_args
        options.setdefault('pool_pre_ping', True)
    return options


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.config['SQLALCHEMY_ENGINE_OPTIONS'] = _engine_options(flask_app.config)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    origins = flask_app.config.get('CORS_ORIGINS', '*')
    if origins != '*':
        origins = [o.strip() for o in origins.split(',') if o.strip()]
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Import and register blueprints here
    from globetrotter.main import main
    flask_app.register_blueprint(main)

    from globetrotter.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    from globetrotter.api.challenges import challenges
    flask_app.register_blueprint(challenges, url_prefix='/api/challenges')

    from globetrotter.api.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Flask-Login loaders: session cookie by id, API clients by auth token
    from globetrotter.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(req):
        token = req.headers.get('Authorization')
        if not token:
            return None
        if token.lower().startswith('bearer '):
            token = token[7:]
        return User.query.filter_by(auth_token=token).first()

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
            click.echo('Database has been reset and seeded!')

    @click.command('import-destinations')
    @click.argument('path', required=False)
    def import_destinations_command(path):
        """Loads destinations, clues, fun facts and trivia from a JSON dataset."""
        from globetrotter.services.challenges.importer import import_dataset_file
        with flask_app.app_context():
            count = import_dataset_file(path or flask_app.config['DATASET_PATH'])
            click.echo(f'Imported {count} destinations.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(import_destinations_command)

    return flask_app
