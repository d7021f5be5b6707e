"""Domain models package.

This package contains the project record, its reference data and the
database tables used for persistence. Models are imported here and
exposed for use throughout the app.
"""
from project_tracker.models.districts import (
    DISTRICTS,
    LACS_BY_DISTRICT,
    district_for_lac,
    is_valid_lac,
    lacs_for,
)
from project_tracker.models.project import (
    ALL_DESIGN_STATUSES,
    ARDetails,
    ASDetails,
    Contacts,
    DesignStatus,
    HistoryEntry,
    Project,
    generate_id,
)
from project_tracker.models.storage import RemoteDocument, StorageSlot

__all__ = [
    'ALL_DESIGN_STATUSES',
    'ARDetails',
    'ASDetails',
    'Contacts',
    'DISTRICTS',
    'DesignStatus',
    'HistoryEntry',
    'LACS_BY_DISTRICT',
    'Project',
    'RemoteDocument',
    'StorageSlot',
    'district_for_lac',
    'generate_id',
    'is_valid_lac',
    'lacs_for',
]
