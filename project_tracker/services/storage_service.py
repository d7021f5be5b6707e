"""Local storage service for the project collection.

The whole collection lives as one JSON array in a named key-value slot.
Loading is self-healing: an absent, empty, unreadable or legacy-schema
slot is replaced by the seed dataset, which is written back at once.
"""
import json

from project_tracker import db
from project_tracker.logger import get_logger
from project_tracker.models import Project, StorageSlot
from project_tracker.services.sample_data import build_sample_projects

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = 'projects-tracker-data'


def _has_current_schema(records: list) -> bool:
    """Detect the current schema by the nested asDetails object."""
    first = records[0]
    return isinstance(first, dict) and isinstance(first.get('asDetails'), dict)


class LocalStore:
    """Durable local slot holding the serialized project collection.

    Must be used inside an application context.

    Args:
        key: Name of the slot to read and write.
    """

    def __init__(self, key: str = DEFAULT_STORAGE_KEY):
        self.key = key

    def read_raw(self):
        """Return the raw slot contents, or None if the slot is absent."""
        slot = db.session.get(StorageSlot, self.key)
        return slot.value if slot else None

    def load_all(self) -> list[Project]:
        """Load the collection, falling back to the seed dataset.

        Returns:
            List of Project instances; never empty.
        """
        raw = self.read_raw()
        if not raw:
            logger.info("Storage slot '%s' is empty, loading sample data", self.key)
            return self._reseed()

        try:
            records = json.loads(raw)
        except ValueError:
            logger.warning("Storage slot '%s' is not valid JSON, loading sample data", self.key)
            return self._reseed()

        if not isinstance(records, list) or not records:
            logger.info("Storage slot '%s' holds no projects, loading sample data", self.key)
            return self._reseed()

        if not _has_current_schema(records):
            logger.warning("Old data structure detected in '%s', loading sample data", self.key)
            return self._reseed()

        try:
            projects = [Project.from_dict(record) for record in records]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Failed to parse stored projects: %s; loading sample data", e)
            return self._reseed()

        logger.debug("Loaded %d project(s) from '%s'", len(projects), self.key)
        return projects

    def save_all(self, projects: list[Project]) -> None:
        """Serialize the collection and overwrite the slot in full.

        Args:
            projects: The complete collection to persist.
        """
        payload = json.dumps([p.to_dict() for p in projects])
        slot = db.session.get(StorageSlot, self.key)
        if slot is None:
            slot = StorageSlot(key=self.key)
            db.session.add(slot)
        slot.value = payload
        db.session.commit()
        logger.debug("Saved %d project(s) to '%s'", len(projects), self.key)

    def clear(self) -> None:
        """Delete the slot entirely."""
        slot = db.session.get(StorageSlot, self.key)
        if slot is not None:
            db.session.delete(slot)
            db.session.commit()

    def _reseed(self) -> list[Project]:
        projects = build_sample_projects()
        self.save_all(projects)
        return projects
