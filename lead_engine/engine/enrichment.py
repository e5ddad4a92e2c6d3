"""
Enrichment engine — classify, synthesize, score, pick contact preferences, log.

enrich_contact() never raises. Any failure in the provider or in scoring is
caught here and turned into a failed result (confidence 0, no fields, data
source 'error') with a matching history entry.
"""
import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from lead_engine.config import DEFAULT_TIMEZONE
from lead_engine.engine.base import Contact, ProfileBundle, ProfileProvider
from lead_engine.engine.classifier import classify
from lead_engine.engine.errors import ProviderError
from lead_engine.engine.scoring import score, recent_activity, last_activity_date
from lead_engine.services.history import (
    EnrichmentHistoryEntry, EnrichmentHistoryLog, InMemoryHistoryLog,
)

logger = logging.getLogger('engine.enrichment')

NOTHING_TO_ENRICH = 'No enrichable fields on contact'
FAILED_DATA_SOURCE = 'error'
HIGH_ENGAGEMENT = 70
AFTERNOON_SENIORITY = ('director', 'senior')


@dataclass(frozen=True)
class EnrichmentResult:
    enrichment_data: Dict[str, Any]
    confidence: int
    fields_enriched: List[str] = field(default_factory=list)
    data_source: str = FAILED_DATA_SOURCE

    @property
    def succeeded(self) -> bool:
        return self.enrichment_data.get('status') == 'completed'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enrichmentData': self.enrichment_data,
            'confidence': self.confidence,
            'fieldsEnriched': list(self.fields_enriched),
            'dataSource': self.data_source,
        }


def fields_enriched(bundle: ProfileBundle) -> List[str]:
    """Groups reported back to the CRM, in a fixed order."""
    fields = []
    if bundle.professional is not None:
        fields.append('linkedin')
    if bundle.social is not None:
        fields.append('social_media')
    if bundle.company is not None:
        fields.append('company_info')
    fields.extend(['engagement_metrics', 'contact_preferences'])
    return fields


def contact_preferences(contact: Contact, linkedin_url: Optional[str],
                        engagement_score: int, seniority: str) -> Dict[str, str]:
    if linkedin_url and engagement_score > HIGH_ENGAGEMENT:
        method = 'linkedin'
    elif contact.phone:
        method = 'phone'
    else:
        method = 'email'

    return {
        'preferredContactMethod': method,
        'bestContactTime': 'afternoon' if seniority in AFTERNOON_SENIORITY else 'morning',
        'timezone': DEFAULT_TIMEZONE,
    }


class EnrichmentEngine:
    """
    Runs one enrichment per call.

    Args:
        provider:    ProfileProvider that builds the profile bundle.
        history_log: Where run entries are appended. Defaults to in-memory.
        rng:         random.Random used for synthesis and scoring. Pass a
                     seeded instance for reproducible output.
    """

    def __init__(self, provider: ProfileProvider,
                 history_log: Optional[EnrichmentHistoryLog] = None,
                 rng: Optional[random.Random] = None):
        self.provider = provider
        self.history_log = history_log if history_log is not None else InMemoryHistoryLog()
        self.rng = rng or random.Random()

    def enrich_contact(self, contact: Contact) -> EnrichmentResult:
        started = time.perf_counter()
        error_message = None

        try:
            result = self._enrich(contact)
        except Exception as e:
            error_message = str(e) or e.__class__.__name__
            logger.error("Enrichment failed for contact %s: %s", contact.id, error_message,
                         exc_info=True, extra={'contact_id': contact.id})
            result = self._failed_result(contact)

        processing_time = int((time.perf_counter() - started) * 1000)
        self._record(contact, result, processing_time, error_message)

        logger.info("Enriched contact %s — status=%s confidence=%s fields=%s (%dms)",
                    contact.id, result.enrichment_data.get('status'), result.confidence,
                    ','.join(result.fields_enriched) or '-', processing_time,
                    extra={'contact_id': contact.id})
        return result

    def _enrich(self, contact: Contact) -> EnrichmentResult:
        classification = classify(contact)
        bundle = self.provider.synthesize(contact, classification.industry, self.rng)
        if bundle is None or bundle.is_empty:
            raise ProviderError(NOTHING_TO_ENRICH)

        now = datetime.now(timezone.utc)
        scores = score(bundle, self.rng, succeeded=True)

        data: Dict[str, Any] = {
            'contactId': contact.id,
            'status': 'completed',
            'dataSource': self.provider.data_source,
            'lastEnriched': now.isoformat(),
        }
        if bundle.professional is not None:
            data.update(bundle.professional.to_dict())
            seniority = bundle.professional.seniority
            linkedin_url = bundle.professional.linkedin_url
        else:
            seniority = classification.seniority
            linkedin_url = None
        if bundle.social is not None:
            data.update(bundle.social.to_dict())
        if bundle.company is not None:
            data.update(bundle.company.to_dict())

        data.update(scores.to_dict())
        data['recentActivity'] = recent_activity(scores.social_media_activity, self.rng, now)
        data['lastActivityDate'] = last_activity_date(self.rng, now).isoformat()
        data.update(contact_preferences(contact, linkedin_url, scores.engagement_score, seniority))

        return EnrichmentResult(
            enrichment_data=data,
            confidence=scores.confidence,
            fields_enriched=fields_enriched(bundle),
            data_source=self.provider.data_source,
        )

    def _failed_result(self, contact: Contact) -> EnrichmentResult:
        return EnrichmentResult(
            enrichment_data={
                'contactId': contact.id,
                'status': 'failed',
                'confidence': 0,
                'dataSource': FAILED_DATA_SOURCE,
                'lastEnriched': datetime.now(timezone.utc).isoformat(),
            },
            confidence=0,
            fields_enriched=[],
            data_source=FAILED_DATA_SOURCE,
        )

    def _record(self, contact: Contact, result: EnrichmentResult,
                processing_time: int, error_message: Optional[str]):
        previous = self.history_log.last_successful(contact.id)
        entry = EnrichmentHistoryEntry(
            contact_id=contact.id,
            data_provider=result.data_source,
            fields_updated=list(result.fields_enriched),
            old_data=previous.new_data if previous else None,
            new_data=result.enrichment_data,
            confidence=result.confidence,
            processing_time=processing_time,
            success=result.succeeded,
            error_message=error_message,
        )
        try:
            self.history_log.append(entry)
        except Exception:
            logger.error("Could not append history entry for contact %s", contact.id, exc_info=True)

    def history(self, contact_id: str) -> List[EnrichmentHistoryEntry]:
        return self.history_log.for_contact(contact_id)
