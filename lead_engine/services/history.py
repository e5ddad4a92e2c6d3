"""
Enrichment history log — append-only audit trail of enrichment runs.

Two backends share one interface: InMemoryHistoryLog for local dev and tests,
SqlHistoryLog for a real database. SQL writes are wrapped in try/except so an
enrichment request never blocks on DB errors.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from lead_engine.database import get_session
from lead_engine.models.enrichment_history import EnrichmentHistoryRecord

logger = logging.getLogger('services.history')


@dataclass(frozen=True)
class EnrichmentHistoryEntry:
    """One enrichment run. Never mutated after creation."""
    contact_id: Optional[str]
    data_provider: str
    fields_updated: List[str]
    new_data: Dict[str, Any]
    confidence: float
    processing_time: int                      # milliseconds, measured
    success: bool
    old_data: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    enrichment_type: str = 'social_media'
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contactId': self.contact_id,
            'enrichmentType': self.enrichment_type,
            'dataProvider': self.data_provider,
            'fieldsUpdated': list(self.fields_updated),
            'oldData': self.old_data,
            'newData': self.new_data,
            'confidence': self.confidence,
            'processingTime': self.processing_time,
            'success': self.success,
            'errorMessage': self.error_message,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class EnrichmentHistoryLog(ABC):
    """Append-only store. Entries come back oldest first."""

    @abstractmethod
    def append(self, entry: EnrichmentHistoryEntry) -> None:
        ...

    @abstractmethod
    def for_contact(self, contact_id: str) -> List[EnrichmentHistoryEntry]:
        ...

    def last_successful(self, contact_id: Optional[str]) -> Optional[EnrichmentHistoryEntry]:
        """Most recent successful run for a contact, or None."""
        if contact_id is None:
            return None
        for entry in reversed(self.for_contact(contact_id)):
            if entry.success:
                return entry
        return None


class InMemoryHistoryLog(EnrichmentHistoryLog):
    """Process-local log. Lost on restart."""

    def __init__(self):
        self._entries: Dict[Optional[str], List[EnrichmentHistoryEntry]] = {}
        self._lock = threading.Lock()

    def append(self, entry: EnrichmentHistoryEntry) -> None:
        with self._lock:
            self._entries.setdefault(entry.contact_id, []).append(entry)

    def for_contact(self, contact_id: str) -> List[EnrichmentHistoryEntry]:
        with self._lock:
            return list(self._entries.get(contact_id, []))

    def __len__(self):
        with self._lock:
            return sum(len(v) for v in self._entries.values())


def _to_entry(row: EnrichmentHistoryRecord) -> EnrichmentHistoryEntry:
    created_at = row.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return EnrichmentHistoryEntry(
        contact_id=row.contact_id,
        enrichment_type=row.enrichment_type,
        data_provider=row.data_provider,
        fields_updated=list(row.fields_updated or []),
        old_data=row.old_data,
        new_data=row.new_data or {},
        confidence=row.confidence or 0,
        processing_time=row.processing_time or 0,
        success=bool(row.success),
        error_message=row.error_message,
        created_at=created_at,
    )


class SqlHistoryLog(EnrichmentHistoryLog):
    """enrichment_history table via SQLAlchemy. Rows are inserted, never updated."""

    def append(self, entry: EnrichmentHistoryEntry) -> None:
        session = get_session()
        try:
            session.add(EnrichmentHistoryRecord(
                contact_id=entry.contact_id,
                enrichment_type=entry.enrichment_type,
                data_provider=entry.data_provider,
                fields_updated=list(entry.fields_updated),
                old_data=entry.old_data,
                new_data=entry.new_data,
                confidence=entry.confidence,
                processing_time=entry.processing_time,
                success=entry.success,
                error_message=entry.error_message,
                created_at=entry.created_at,
            ))
            session.commit()
        except Exception:
            session.rollback()
            logger.error("Failed to persist enrichment history for contact %s",
                         entry.contact_id, exc_info=True)
        finally:
            session.close()

    def for_contact(self, contact_id: str) -> List[EnrichmentHistoryEntry]:
        session = get_session()
        try:
            rows = (
                session.query(EnrichmentHistoryRecord)
                .filter_by(contact_id=contact_id)
                .order_by(EnrichmentHistoryRecord.id.asc())
                .all()
            )
            return [_to_entry(row) for row in rows]
        except Exception:
            logger.error("Failed to load enrichment history for contact %s", contact_id, exc_info=True)
            return []
        finally:
            session.close()


HISTORY_BACKENDS = {
    'memory': InMemoryHistoryLog,
    'sql': SqlHistoryLog,
}


def make_history_log(backend: str) -> EnrichmentHistoryLog:
    """Instantiate the configured backend. Unknown names fall back to memory."""
    log_cls = HISTORY_BACKENDS.get(backend)
    if log_cls is None:
        logger.warning("Unknown HISTORY_BACKEND '%s', using in-memory log", backend)
        log_cls = InMemoryHistoryLog
    return log_cls()
