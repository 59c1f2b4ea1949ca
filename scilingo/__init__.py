"""
SciLingo - Application Factory
"""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Initialize extensions
db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()


def create_app(config_name=None):
    """Create and configure the Flask application"""
    from scilingo.config import config

    app = Flask(__name__)

    # Configuration
    if config_name is None:
        config_name = os.getenv('FLASK_CONFIG', 'default')
    app.config.from_object(config[config_name])

    _configure_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    from scilingo.services.cache_service import cache_service
    cache_service.init_app(app)

    # Register every table with the metadata before create_all / migrations
    from scilingo import models  # noqa: F401

    # Register blueprints
    from scilingo.auth import auth_bp
    from scilingo.student import student_bp
    from scilingo.teacher import teacher_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(student_bp, url_prefix='/student')
    app.register_blueprint(teacher_bp, url_prefix='/teacher')

    _register_error_handlers(app)

    # Home route
    @app.route('/')
    def index():
        from flask import redirect, url_for
        from flask_login import current_user

        if current_user.is_authenticated:
            if current_user.is_teacher:
                return redirect(url_for('teacher.dashboard'))
            return redirect(url_for('student.dashboard'))
        return jsonify({'success': False, 'message': 'Not authenticated'}), 401

    # Auto-initialize database on first run
    if app.config.get('AUTO_INIT_DB'):
        with app.app_context():
            _auto_initialize_database()

    return app


def _configure_logging(app):
    """Configure root logging once from LOG_LEVEL"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(level)


def _register_error_handlers(app):
    """Render domain errors that escape a route as JSON"""
    from scilingo.errors import ScilingoError

    @app.errorhandler(ScilingoError)
    def handle_scilingo_error(error):
        return jsonify({'success': False, 'message': error.public_message}), error.status_code


def _auto_initialize_database():
    """Create tables on a fresh installation"""
    from sqlalchemy import inspect

    logger = logging.getLogger(__name__)
    try:
        inspector = inspect(db.engine)
        if 'profiles' not in inspector.get_table_names():
            logger.info("[Init] New installation detected - creating database tables")
            db.create_all()
    except Exception:
        logger.warning("[Init] Auto-initialization skipped", exc_info=True)


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login"""
    from scilingo.models.user import User
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    """Every handler speaks JSON, so an anonymous request gets a 401 body"""
    return jsonify({'success': False, 'message': 'Not authenticated'}), 401
