"""Flask application factory."""

import logging
import os
from flask import Flask, jsonify, request, abort
from werkzeug.exceptions import HTTPException
from .config import config
from .extensions import db, migrate, login_manager, bcrypt, csrf, mail


def configure_logging(app):
    """Send module loggers to stderr at the configured level."""
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logging.getLogger('tastydash').setLevel(level)
    app.logger.setLevel(level)


def create_app(config_name=None):
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    configure_logging(app)

    # Create the SQLite directory
    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///') and ':memory:' not in uri:
        directory = os.path.dirname(uri[len('sqlite:///'):])
        if directory:
            os.makedirs(directory, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)
    mail.init_app(app)

    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    # Template filters
    from .utils.formatting import format_currency, format_date
    app.add_template_filter(format_currency, 'format_currency')
    app.add_template_filter(format_date, 'format_date')

    # User loader for Flask-Login
    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Please log in to continue.'}), 401

    register_error_handlers(app)

    return app


def register_error_handlers(app):
    """Reject non-object JSON bodies; turn domain and HTTP errors into JSON responses."""
    from .errors import TastyDashError

    @app.before_request
    def reject_non_object_json():
        # Handlers and forms read JSON bodies as field mappings
        if request.is_json and request.content_length:
            if not isinstance(request.get_json(silent=True), dict):
                abort(400, description='Request body must be a JSON object.')

    @app.errorhandler(TastyDashError)
    def domain_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'success': False, 'message': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error('Unhandled error: %s', error)
        return jsonify({'success': False, 'message': 'Something went wrong. Please try again.'}), 500
