"""Project service for business logic operations.

This module provides the ProjectRepository, the in-memory owner of the
project collection, plus the input-boundary helpers routes use before
calling it: payload parsing, validation and district/LAC reconciliation.
Every repository mutation is persisted through the LocalStore.
"""
import copy
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from flask import current_app

from project_tracker.logger import get_logger
from project_tracker.models import (
    ARDetails,
    ASDetails,
    Contacts,
    DISTRICTS,
    DesignStatus,
    HistoryEntry,
    Project,
    generate_id,
    is_valid_lac,
)
from project_tracker.models.project import parse_date
from project_tracker.services.storage_service import LocalStore

logger = get_logger(__name__)

EXTENSION_KEY = 'project_repository'

# Attributes that never change after creation
IMMUTABLE_FIELDS = ['id', 'created_at']


def _string(value) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValueError(f"Expected a string, got {type(value).__name__}")
    return value


def _record(from_dict):
    """Wrap a sub-record parser so only JSON objects (or null) get through."""
    def parse(value):
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Expected an object, got {type(value).__name__}")
        return from_dict(value)
    return parse


def _history(value) -> list[HistoryEntry]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"history must be a list, got {type(value).__name__}")
    return clean_history(value)


# Wire key -> (attribute, parser) for incoming payloads
_FIELD_PARSERS = {
    'projectName': ('project_name', lambda v: _string(v).strip()),
    'district': ('district', _string),
    'lac': ('lac', _string),
    'srDetails': ('sr_details', _string),
    'asDetails': ('as_details', _record(ASDetails.from_dict)),
    'arDetails': ('ar_details', _record(ARDetails.from_dict)),
    'contacts': ('contacts', _record(Contacts.from_dict)),
    'designStatus': ('design_status', DesignStatus.parse),
    'history': ('history', _history),
}


def _utcnow():
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _touch(previous: Optional[datetime]) -> datetime:
    """Return a fresh updated_at strictly later than previous."""
    now = _utcnow()
    if previous is not None and now <= previous:
        # Clock granularity can repeat a timestamp on fast successive edits
        now = previous + timedelta(microseconds=1)
    return now


class ProjectRepository:
    """In-memory project collection with persistence on every change.

    The repository exclusively owns its list. Reads hand out the stored
    Project objects; callers must go through update() to change them.

    Args:
        projects: Initial collection.
        on_change: Callback receiving the full collection after each
            mutation, normally LocalStore.save_all.
    """

    def __init__(self, projects: Optional[list[Project]] = None,
                 on_change: Optional[Callable[[list[Project]], None]] = None):
        self._projects: list[Project] = list(projects or [])
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._projects)

    def all(self) -> list[Project]:
        """Return the collection in insertion order (shallow copy)."""
        return list(self._projects)

    def get(self, id: str) -> Optional[Project]:
        """Get a project by ID.

        Args:
            id: The project ID to retrieve.

        Returns:
            The Project instance if found, None otherwise.
        """
        for project in self._projects:
            if project.id == id:
                return project
        return None

    def add(self, fields: dict) -> Project:
        """Create a new project from typed attribute values.

        Assigns a new id and sets created_at and updated_at to now.
        Any id or timestamps in fields are ignored; omitted attributes take
        their defaults. Required fields are checked by
        validate_project_input, not here.

        Args:
            fields: Attribute name -> value (as produced by
                parse_project_fields).

        Returns:
            The created Project instance.
        """
        values = {
            k: v for k, v in fields.items()
            if k not in IMMUTABLE_FIELDS and k != 'updated_at'
        }
        now = _utcnow()
        project = Project(id=generate_id(), created_at=now, updated_at=now, **values)
        self._projects.append(project)
        logger.info("Added project %s (%s)", project.id, project.project_name)
        self._save()
        return project

    def update(self, id: str, fields: dict) -> Optional[Project]:
        """Merge fields into an existing project and bump updated_at.

        Sub-records (as_details, ar_details, contacts) are replaced whole.
        The repository does not re-validate district/LAC combinations.

        Args:
            id: The project ID to update.
            fields: Attribute name -> new value.

        Returns:
            The updated Project instance, or None if not found.
        """
        project = self.get(id)
        if not project:
            return None

        for key, value in fields.items():
            if hasattr(project, key) and key not in IMMUTABLE_FIELDS and key != 'updated_at':
                setattr(project, key, value)
        project.updated_at = _touch(project.updated_at)

        logger.info("Updated project %s", id)
        self._save()
        return project

    def update_history(self, id: str, history: list[HistoryEntry]) -> Optional[Project]:
        """Replace a project's history and bump updated_at.

        Args:
            id: The project ID.
            history: The complete new history sequence.

        Returns:
            The updated Project instance, or None if not found.
        """
        project = self.get(id)
        if not project:
            return None

        project.history = list(history)
        project.updated_at = _touch(project.updated_at)

        logger.info("Replaced history of project %s (%d entries)", id, len(history))
        self._save()
        return project

    def delete(self, id: str) -> bool:
        """Remove a project from the collection.

        There is no soft delete: the record is gone once removed.

        Args:
            id: The project ID to delete.

        Returns:
            True if project was deleted, False if not found.
        """
        project = self.get(id)
        if not project:
            return False

        self._projects.remove(project)
        logger.info("Deleted project %s", id)
        self._save()
        return True

    def replace_all(self, projects: list[Project]) -> None:
        """Overwrite the whole collection (e.g. after a cloud pull)."""
        self._projects = list(projects)
        logger.info("Replaced collection with %d project(s)", len(self._projects))
        self._save()

    def snapshot(self) -> list[Project]:
        """Return a deep copy of the collection, safe to hand to slow consumers."""
        return copy.deepcopy(self._projects)

    def _save(self) -> None:
        if self._on_change is not None:
            self._on_change(self._projects)


def get_repository() -> ProjectRepository:
    """Return the application's repository, loading it on first use.

    The repository is created from the LocalStore named by STORAGE_KEY
    and cached on the app's extensions. Requires an application context.
    """
    app = current_app._get_current_object()
    repository = app.extensions.get(EXTENSION_KEY)
    if repository is None:
        store = LocalStore(app.config.get('STORAGE_KEY', 'projects-tracker-data'))
        repository = ProjectRepository(store.load_all(), on_change=store.save_all)
        app.extensions[EXTENSION_KEY] = repository
    return repository


# ============================================================================
# Input boundary helpers
# ============================================================================

def parse_project_fields(payload: dict) -> dict:
    """Convert a JSON payload into typed project attribute values.

    Only keys present in the payload are returned, so the result can be
    used for partial updates. Unknown keys are ignored.

    Args:
        payload: Request JSON using wire (camelCase) keys.

    Returns:
        Dictionary of attribute name -> typed value.

    Raises:
        ValueError: On an invalid design status or malformed date.
    """
    if not isinstance(payload, dict):
        raise ValueError('Request body must be a JSON object')
    result = {}
    for wire_key, (attr, parse) in _FIELD_PARSERS.items():
        if wire_key in payload:
            result[attr] = parse(payload[wire_key])
    return result


def validate_project_input(fields: dict, partial: bool = False) -> None:
    """Validate parsed project fields before they reach the repository.

    Args:
        fields: Output of parse_project_fields (possibly reconciled).
        partial: If True only the supplied fields are checked and an
            empty lac is accepted as the cleared state.

    Raises:
        ValueError: Describing the first problem found.
    """
    required = ['project_name', 'district', 'lac']
    if not partial:
        missing = [f for f in required if not fields.get(f)]
        if missing:
            raise ValueError(f"Missing required fields: {missing}")
    elif 'project_name' in fields and not fields['project_name']:
        raise ValueError("Missing required fields: ['project_name']")

    district = fields.get('district')
    if district is not None and district not in DISTRICTS:
        raise ValueError(
            f"Invalid district: {district}. Must be one of: {DISTRICTS}"
        )

    lac = fields.get('lac')
    if lac and district is not None and not is_valid_lac(district, lac):
        raise ValueError(f"LAC '{lac}' does not belong to district '{district}'")


def reconcile_lac(district: str, lac: str) -> str:
    """Return lac if it belongs to district, otherwise an empty string."""
    return lac if lac and is_valid_lac(district, lac) else ''


def prepare_update(project: Project, fields: dict) -> dict:
    """Apply form-layer rules to an update before it is stored.

    When the district changes, the LAC (the supplied one, or the
    project's current one) is cleared unless it belongs to the new
    district. The merged district/LAC pair is then validated.

    Args:
        project: The project being edited.
        fields: Parsed update fields.

    Returns:
        The fields to pass to ProjectRepository.update().

    Raises:
        ValueError: If the update is invalid.
    """
    result = dict(fields)
    if 'district' in result and result['district'] != project.district:
        result['lac'] = reconcile_lac(
            result['district'], result.get('lac', project.lac)
        )

    merged = {
        'district': result.get('district', project.district),
        'lac': result.get('lac', project.lac),
    }
    if 'project_name' in result:
        merged['project_name'] = result['project_name']
    validate_project_input(merged, partial=True)
    return result


def clean_history(entries: list) -> list[HistoryEntry]:
    """Normalize submitted history rows.

    Rows with a blank event and no date are dropped; rows without an id
    get a fresh one. Order is preserved.

    Args:
        entries: HistoryEntry instances or wire dicts.

    Returns:
        List of HistoryEntry instances.

    Raises:
        ValueError: If a row is not an object or carries a malformed date.
    """
    result = []
    for entry in entries:
        if isinstance(entry, HistoryEntry):
            item = entry
        elif not isinstance(entry, dict):
            raise ValueError(f"Invalid history entry: {entry!r}")
        else:
            item = HistoryEntry(
                id=str(entry.get('id') or '') or generate_id(),
                event=str(entry.get('event') or ''),
                date=parse_date(entry.get('date')),
            )
        if not item.event.strip() and item.date is None:
            continue
        result.append(item)
    return result
