"""Cloud synchronisation service.

Pushes the local collection to a remote document collection and pulls
it back. The model is "local is truth": a push deletes every remote
document and writes the local records in one transaction, a pull
returns the remote records verbatim. There is no merge and no retry.
"""
import json
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from project_tracker import db
from project_tracker.logger import get_logger
from project_tracker.models import Project, RemoteDocument
from project_tracker.models.project import parse_timestamp
from project_tracker.services.project_service import ProjectRepository

logger = get_logger(__name__)

DEFAULT_COLLECTION = 'projects'

PUSH_FAILED_MESSAGE = (
    'Failed to upload data to cloud. '
    'Please check your internet connection and try again.'
)
PULL_FAILED_MESSAGE = (
    'Failed to download data from cloud. '
    'Please check your internet connection and try again.'
)


class CloudSyncError(Exception):
    """Raised when the remote store cannot be reached or written."""


class SyncInProgressError(Exception):
    """Raised when a push or pull starts while another is in flight."""


def _utcnow():
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _timestamp_or_now(value) -> datetime:
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return _utcnow()


class RemoteCollection:
    """A named collection of JSON documents keyed by project id.

    Args:
        name: Collection name.
    """

    def __init__(self, name: str = DEFAULT_COLLECTION):
        self.name = name

    def push_all(self, projects: list[Project]) -> str:
        """Replace the remote collection with projects, atomically.

        Args:
            projects: The complete local collection.

        Returns:
            Success message including the number of uploaded projects.

        Raises:
            CloudSyncError: If the remote store fails; nothing is changed.
        """
        try:
            db.session.query(RemoteDocument).filter(
                RemoteDocument.collection == self.name
            ).delete(synchronize_session=False)
            for project in projects:
                db.session.add(RemoteDocument(
                    collection=self.name,
                    doc_id=project.id,
                    data=json.dumps(project.to_dict()),
                ))
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Error pushing to remote collection '%s': %s", self.name, e)
            raise CloudSyncError(PUSH_FAILED_MESSAGE) from e

        logger.info("Pushed %d project(s) to '%s'", len(projects), self.name)
        return f'Successfully uploaded {len(projects)} project(s) to cloud'

    def pull_all(self) -> list[Project]:
        """Read every remote document back into Project records.

        The document key becomes the project id; missing or unparseable
        timestamps default to now.

        Returns:
            List of Project instances.

        Raises:
            CloudSyncError: If the remote store cannot be read, or any
                document cannot be rebuilt (nothing is returned).
        """
        try:
            documents = (
                db.session.query(RemoteDocument)
                .filter(RemoteDocument.collection == self.name)
                .all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Error pulling from remote collection '%s': %s", self.name, e)
            raise CloudSyncError(PULL_FAILED_MESSAGE) from e

        projects = []
        for document in documents:
            try:
                data = json.loads(document.data)
                data['id'] = document.doc_id
                data['createdAt'] = _timestamp_or_now(data.get('createdAt'))
                data['updatedAt'] = _timestamp_or_now(data.get('updatedAt'))
                projects.append(Project.from_dict(data))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.error("Unreadable remote document %s: %s", document.doc_id, e)
                raise CloudSyncError(
                    f'Failed to download data from cloud: '
                    f'document {document.doc_id} could not be read.'
                ) from e

        logger.info("Pulled %d project(s) from '%s'", len(projects), self.name)
        return projects


class CloudSync:
    """Serializes push and pull behind a single busy flag.

    Only one transfer may be in flight; a second attempt is rejected
    with SyncInProgressError rather than queued.

    Args:
        remote: The remote collection to synchronise with.
    """

    def __init__(self, remote: RemoteCollection):
        self.remote = remote
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def _exclusive(self):
        if not self._busy.acquire(blocking=False):
            raise SyncInProgressError('A cloud sync is already in progress.')
        try:
            yield
        finally:
            self._busy.release()

    def push(self, repository: ProjectRepository) -> str:
        """Upload the repository's collection, replacing the remote one."""
        with self._exclusive():
            return self.remote.push_all(repository.snapshot())

    def pull(self, repository: ProjectRepository) -> int:
        """Download the remote collection and replace the local one.

        The repository is only touched after a successful read.

        Returns:
            Number of projects now held locally.
        """
        with self._exclusive():
            projects = self.remote.pull_all()
            repository.replace_all(projects)
            return len(projects)


_SYNC_EXTENSION_KEY = 'cloud_sync'


def get_cloud_sync(app=None) -> CloudSync:
    """Return the application's CloudSync, creating it on first use."""
    app = app or current_app._get_current_object()
    sync: Optional[CloudSync] = app.extensions.get(_SYNC_EXTENSION_KEY)
    if sync is None:
        sync = CloudSync(RemoteCollection(app.config.get('REMOTE_COLLECTION', DEFAULT_COLLECTION)))
        app.extensions[_SYNC_EXTENSION_KEY] = sync
    return sync
