"""Project model for the Projects Tracker.

This module defines the Project record and its nested value objects
(administrative sanction, architectural review, contacts, history),
plus the DesignStatus enumeration that drives colour coding.

Projects are plain dataclasses: the whole collection is persisted as a
single JSON document, so to_dict()/from_dict() define the wire shape
shared by local storage, the remote collection and the HTTP API.
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional


# Alias so dataclass fields named "date" can still refer to the type
CalendarDate = date


def _utcnow():
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Return a new random identifier for projects and history entries."""
    return uuid.uuid4().hex


def parse_date(value) -> Optional[date]:
    """Parse a calendar date from a wire value.

    Accepts date objects, 'YYYY-MM-DD' strings and full ISO timestamps
    (only the date part is kept). Empty values mean "no date".

    Raises:
        ValueError: If the value is not a recognisable date.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")
    return date.fromisoformat(value.strip()[:10])


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Handles the trailing 'Z' written by JavaScript's toISOString().
    Naive values are assumed to be UTC.

    Raises:
        ValueError: If the value is not a recognisable timestamp.
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        result = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")
    if result.tzinfo is None:
        result = result.replace(tzinfo=timezone.utc)
    return result.astimezone(timezone.utc)


def _format_date(d: Optional[date]) -> str:
    return d.isoformat() if d else ''


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return '' if value is None else str(value)


class DesignStatus(Enum):
    """The nine design lifecycle states, in canonical order.

    Each member carries an explicit ordinal (used for ordering), a
    display label and a colour. ``code`` is the prefixed literal that is
    stored on the wire, e.g. "01 Tentative Design Ongoing".
    """
    TENTATIVE_ONGOING = (1, 'Tentative Design Ongoing', '#3b82f6')
    TENTATIVE_ON_HOLD = (2, 'Tentative Design On Hold', '#f59e0b')
    TENTATIVE_ISSUED = (3, 'Tentative Design Issued', '#10b981')
    DETAILED_ONGOING = (4, 'Detailed Design Ongoing', '#8b5cf6')
    DETAILED_ON_HOLD = (5, 'Detailed Design On Hold', '#ef4444')
    DETAILED_ISSUED = (6, 'Detailed Design Issued', '#06b6d4')
    FILE_NOT_OPENED = (7, 'File Not Yet Opened', '#6b7280')
    DISCARDED = (8, 'Discarded Work', '#dc2626')
    RETURNED_TO_SITE = (9, 'Returned to Site', '#ec4899')

    def __init__(self, ordinal: int, label: str, color: str):
        self.ordinal = ordinal
        self.label = label
        self.color = color

    @property
    def code(self) -> str:
        """Stored literal: two-digit ordinal followed by the label."""
        return f'{self.ordinal:02d} {self.label}'

    @classmethod
    def parse(cls, value) -> 'DesignStatus':
        """Resolve a member from a member, name, code or label.

        Raises:
            ValueError: If value does not name one of the nine statuses.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            for status in cls:
                if text in (status.name, status.code, status.label):
                    return status
        raise ValueError(
            f"Invalid design status: {value!r}. "
            f"Must be one of: {[s.code for s in cls]}"
        )


ALL_DESIGN_STATUSES = list(DesignStatus)


@dataclass
class ASDetails:
    """Administrative sanction milestone."""
    status: str = ''
    number: str = ''
    date: Optional[CalendarDate] = None

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'number': self.number,
            'date': _format_date(self.date),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ASDetails':
        data = data or {}
        return cls(
            status=_text(data, 'status'),
            number=_text(data, 'number'),
            date=parse_date(data.get('date')),
        )


@dataclass
class ARDetails:
    """Architectural review milestone.

    total_area is free text and may carry units ("15000 sq.m").
    """
    status: str = ''
    number: str = ''
    date: Optional[CalendarDate] = None
    revision_details: str = ''
    number_of_floors: str = ''
    total_area: str = ''

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'number': self.number,
            'date': _format_date(self.date),
            'revisionDetails': self.revision_details,
            'numberOfFloors': self.number_of_floors,
            'totalArea': self.total_area,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ARDetails':
        data = data or {}
        return cls(
            status=_text(data, 'status'),
            number=_text(data, 'number'),
            date=parse_date(data.get('date')),
            revision_details=_text(data, 'revisionDetails'),
            number_of_floors=_text(data, 'numberOfFloors'),
            total_area=_text(data, 'totalArea'),
        )


@dataclass
class Contacts:
    """Assistant engineer, assistant executive engineer and contractor."""
    ae_name: str = ''
    ae_phone: str = ''
    aee_name: str = ''
    aee_phone: str = ''
    contractor_name: str = ''
    contractor_phone: str = ''

    _WIRE_KEYS = {
        'ae_name': 'aeName',
        'ae_phone': 'aePhone',
        'aee_name': 'aeeName',
        'aee_phone': 'aeePhone',
        'contractor_name': 'contractorName',
        'contractor_phone': 'contractorPhone',
    }

    def to_dict(self) -> dict:
        return {wire: getattr(self, attr) for attr, wire in self._WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'Contacts':
        data = data or {}
        return cls(**{attr: _text(data, wire) for attr, wire in cls._WIRE_KEYS.items()})


@dataclass
class HistoryEntry:
    """One user-entered line of a project's audit trail."""
    id: str = field(default_factory=generate_id)
    event: str = ''
    date: Optional[CalendarDate] = None

    def to_dict(self) -> dict:
        return {'id': self.id, 'event': self.event, 'date': _format_date(self.date)}

    @classmethod
    def from_dict(cls, data: dict) -> 'HistoryEntry':
        return cls(
            id=_text(data, 'id') or generate_id(),
            event=_text(data, 'event'),
            date=parse_date(data.get('date')),
        )


@dataclass
class Project:
    """A construction/design project tracked by the dashboard.

    Attributes:
        id: Unique identifier, assigned once at creation.
        project_name: Name of the project (required by the form layer).
        district: One of the fixed districts.
        lac: Legislative assembly constituency within the district.
        as_details: Administrative sanction milestone.
        sr_details: Free-text SR details.
        ar_details: Architectural review milestone.
        contacts: Engineer and contractor contacts.
        design_status: Current design lifecycle state.
        history: Ordered, user-edited audit trail.
        created_at: Timestamp when project was created.
        updated_at: Timestamp when project was last modified.
    """
    id: str
    project_name: str = ''
    district: str = ''
    lac: str = ''
    as_details: ASDetails = field(default_factory=ASDetails)
    sr_details: str = ''
    ar_details: ARDetails = field(default_factory=ARDetails)
    contacts: Contacts = field(default_factory=Contacts)
    design_status: DesignStatus = DesignStatus.TENTATIVE_ONGOING
    history: list[HistoryEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __repr__(self) -> str:
        """Return string representation of the project."""
        return f'<Project {self.id}: {self.project_name}>'

    def to_dict(self) -> dict:
        """Convert project to its JSON wire representation.

        Returns:
            Dictionary with camelCase keys; dates as ISO strings.
        """
        return {
            'id': self.id,
            'projectName': self.project_name,
            'district': self.district,
            'lac': self.lac,
            'asDetails': self.as_details.to_dict(),
            'srDetails': self.sr_details,
            'arDetails': self.ar_details.to_dict(),
            'contacts': self.contacts.to_dict(),
            'designStatus': self.design_status.code,
            'history': [entry.to_dict() for entry in self.history],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Project':
        """Rebuild a project from its wire representation.

        Raises:
            ValueError: On an unknown design status or malformed date.
            KeyError: If the id is missing.
        """
        return cls(
            id=str(data['id']),
            project_name=_text(data, 'projectName'),
            district=_text(data, 'district'),
            lac=_text(data, 'lac'),
            as_details=ASDetails.from_dict(data.get('asDetails')),
            sr_details=_text(data, 'srDetails'),
            ar_details=ARDetails.from_dict(data.get('arDetails')),
            contacts=Contacts.from_dict(data.get('contacts')),
            design_status=DesignStatus.parse(data.get('designStatus')),
            history=[HistoryEntry.from_dict(h) for h in data.get('history') or []],
            created_at=parse_timestamp(data.get('createdAt')),
            updated_at=parse_timestamp(data.get('updatedAt')),
        )
