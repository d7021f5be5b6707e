"""Storage tables backing the persistence adapter.

StorageSlot is the local durable key-value store: one row per named
slot holding a JSON document. RemoteDocument is the remote document
collection, living in the database bound under the 'remote' key.
"""
from datetime import datetime, timezone

from project_tracker import db


def _utcnow():
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class StorageSlot(db.Model):
    """A named slot in the local key-value store.

    Attributes:
        key: Slot name (primary key).
        value: Serialized JSON payload.
        updated_at: When the slot was last written.
    """
    __tablename__ = 'storage_slots'

    key: str = db.Column(db.String(200), primary_key=True)
    value: str = db.Column(db.Text, nullable=True)
    updated_at: datetime = db.Column(
        db.DateTime,
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f'<StorageSlot {self.key}>'


class RemoteDocument(db.Model):
    """A document in a named remote collection.

    Documents are keyed by (collection, doc_id); the body is the JSON
    representation of a project without any storage-specific fields.
    """
    __bind_key__ = 'remote'
    __tablename__ = 'remote_documents'

    collection: str = db.Column(db.String(200), primary_key=True)
    doc_id: str = db.Column(db.String(200), primary_key=True)
    data: str = db.Column(db.Text, nullable=False)

    def __repr__(self) -> str:
        return f'<RemoteDocument {self.collection}/{self.doc_id}>'
