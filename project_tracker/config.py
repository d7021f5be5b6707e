"""Application configuration module.

Loads configuration from environment variables with sensible defaults
for development.
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _database_url(env_var: str, default: str) -> str:
    """Read a database URL, fixing the legacy postgres:// scheme."""
    url = os.environ.get(env_var, default)
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Base configuration class.

    Reads configuration from environment variables. All sensitive values
    should be set via environment variables, never hardcoded.
    """

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.environ.get('DEBUG', 'false').lower() in ('true', '1', 'yes')

    # Local durable store: holds the key-value slot with the project list
    SQLALCHEMY_DATABASE_URI = _database_url(
        'DATABASE_URL',
        'sqlite:///projects_tracker.db'
    )

    # Remote document store, reached through its own bind
    SQLALCHEMY_BINDS = {
        'remote': _database_url(
            'REMOTE_DATABASE_URL',
            'sqlite:///projects_remote.db'
        ),
    }

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Storage names
    STORAGE_KEY = os.environ.get('STORAGE_KEY', 'projects-tracker-data')
    REMOTE_COLLECTION = os.environ.get('REMOTE_COLLECTION', 'projects')

    # How long (seconds) clients should show sync status messages
    SYNC_MESSAGE_TIMEOUT = int(os.environ.get('SYNC_MESSAGE_TIMEOUT', '5'))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE')

    # Application settings
    APP_NAME = 'Projects Tracker'
