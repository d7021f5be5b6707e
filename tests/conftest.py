"""Pytest fixtures for the Projects Tracker tests.

This module provides fixtures for setting up test storage and application
context. Uses in-memory SQLite databases for both the local slot and the
remote collection to ensure test isolation and avoid affecting
development data.
"""
import pytest
from datetime import date, datetime, timezone

from project_tracker import create_app, db
from project_tracker.config import Config
from project_tracker.models import (
    ARDetails,
    ASDetails,
    Contacts,
    DesignStatus,
    HistoryEntry,
    Project,
    generate_id,
)
from project_tracker.services.project_service import get_repository
from project_tracker.services.sample_data import build_sample_projects


class TestConfig(Config):
    """Test configuration using in-memory SQLite databases.

    This ensures tests are isolated from development data and run quickly.
    """
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_BINDS = {'remote': 'sqlite:///:memory:'}
    SECRET_KEY = 'test-secret-key'
    STORAGE_KEY = 'test-projects'
    REMOTE_COLLECTION = 'test-projects'
    LOG_LEVEL = 'WARNING'
    LOG_FILE = None


@pytest.fixture(scope='function')
def app():
    """Create and configure a test application instance.

    Tables are created fresh for each test function.

    Yields:
        Flask application configured for testing.
    """
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for the application.

    Args:
        app: Flask application fixture.

    Returns:
        Flask test client for making HTTP requests.
    """
    return app.test_client()


@pytest.fixture
def repository(app):
    """The application's repository, seeded with the sample dataset.

    The local slot starts empty, so the first load falls back to the
    six sample projects.
    """
    return get_repository()


@pytest.fixture
def sample_projects():
    """A fresh copy of the six sample projects."""
    return build_sample_projects()


@pytest.fixture
def make_project():
    """Factory fixture building standalone Project instances."""
    def _make_project(**kwargs):
        defaults = {
            'id': generate_id(),
            'project_name': 'Test Project',
            'district': 'Kannur',
            'lac': 'Thalassery (LAC No. 13)',
            'as_details': ASDetails('Approved', 'AS-1', date(2024, 1, 15)),
            'sr_details': 'SR details',
            'ar_details': ARDetails(
                status='Approved',
                number='AR-1',
                date=date(2024, 2, 20),
                revision_details='Original',
                number_of_floors='2',
                total_area='1000 sq.m',
            ),
            'contacts': Contacts('AE', '1', 'AEE', '2', 'Builder', '3'),
            'design_status': DesignStatus.TENTATIVE_ONGOING,
            'history': [],
            'created_at': datetime(2024, 1, 1, tzinfo=timezone.utc),
            'updated_at': datetime(2024, 6, 1, tzinfo=timezone.utc),
        }
        defaults.update(kwargs)
        return Project(**defaults)
    return _make_project


@pytest.fixture
def sample_project_json():
    """Sample project payload in the wire (camelCase) format."""
    return {
        'projectName': 'Village Office',
        'district': 'Wayanad',
        'lac': 'Kalpetta (LAC No. 19)',
        'asDetails': {'status': 'Approved', 'number': 'AS-9', 'date': '2025-01-10'},
        'srDetails': 'SR received',
        'arDetails': {
            'status': 'Pending',
            'number': 'AR-9',
            'date': '',
            'revisionDetails': '',
            'numberOfFloors': '1',
            'totalArea': '300 sq.m',
        },
        'contacts': {
            'aeName': 'Anil',
            'aePhone': '9000000001',
            'aeeName': 'Beena',
            'aeePhone': '9000000002',
            'contractorName': '',
            'contractorPhone': '',
        },
        'designStatus': '02 Tentative Design On Hold',
        'history': [{'event': 'File opened', 'date': '2025-01-02'}],
    }


@pytest.fixture
def history_entries():
    """Two history entries, deliberately out of chronological order."""
    return [
        HistoryEntry(id='h1', event='Site visit', date=date(2024, 5, 1)),
        HistoryEntry(id='h2', event='Drawings issued', date=date(2024, 3, 1)),
    ]
