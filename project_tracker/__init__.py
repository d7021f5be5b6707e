"""Flask application factory.

This module contains the create_app factory function that initializes
and configures the Flask application.
"""
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from project_tracker.config import Config

# Initialize extensions without app context
# These will be initialized with the app in create_app()
db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class: type = Config) -> Flask:
    """Create and configure the Flask application.

    Uses the application factory pattern to allow creating multiple
    app instances with different configurations (e.g., for testing).

    Args:
        config_class: Configuration class to use. Defaults to Config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    from project_tracker.logger import configure_logging
    configure_logging(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        log_file=app.config.get('LOG_FILE'),
    )

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before create_all / migrations see them
    from project_tracker import models  # noqa: F401

    from project_tracker.routes import register_blueprints
    register_blueprints(app)

    @app.route('/health')
    def health_check():
        return {'status': 'healthy'}

    return app
