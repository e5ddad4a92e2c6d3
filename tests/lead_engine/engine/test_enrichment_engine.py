"""Tests for lead_engine.engine.enrichment — the enrichment orchestrator."""
import random

import pytest
from unittest.mock import MagicMock, patch

from lead_engine.engine.base import Contact, ProfileProvider, ProfileBundle
from lead_engine.engine.enrichment import (
    EnrichmentEngine,
    EnrichmentResult,
    contact_preferences,
    fields_enriched,
    NOTHING_TO_ENRICH,
)
from lead_engine.engine.errors import ProviderError
from lead_engine.engine.providers import SyntheticProfileProvider
from lead_engine.services.history import InMemoryHistoryLog


class ExplodingProvider(ProfileProvider):
    name = 'exploding'
    data_source = 'exploding_test'

    def synthesize(self, contact, industry, rng):
        raise ProviderError('upstream timeout')


@pytest.fixture
def history_log():
    return InMemoryHistoryLog()


@pytest.fixture
def engine(history_log):
    return EnrichmentEngine(SyntheticProfileProvider(), history_log, random.Random(99))


class TestEnrichContact:
    """EnrichmentEngine.enrich_contact() on a well-formed contact."""

    def test_completed_result(self, engine, make_contact):
        result = engine.enrich_contact(make_contact())
        assert isinstance(result, EnrichmentResult)
        assert result.succeeded
        assert result.enrichment_data['status'] == 'completed'
        assert result.data_source == 'synthetic_demo'
        assert result.enrichment_data['dataSource'] == 'synthetic_demo'
        assert result.enrichment_data['contactId'] == 'c-001'

    def test_confidence_in_range(self, history_log, make_contact):
        for seed in range(20):
            engine = EnrichmentEngine(SyntheticProfileProvider(), history_log, random.Random(seed))
            result = engine.enrich_contact(make_contact())
            assert 70 <= result.confidence <= 100
            assert result.confidence == result.enrichment_data['confidence']

    def test_scores_bounded(self, engine, make_contact):
        data = engine.enrich_contact(make_contact()).enrichment_data
        assert 0 <= data['engagementScore'] <= 100
        assert 0 <= data['influencerScore'] <= 100
        assert data['socialMediaActivity'] in ('low', 'medium', 'high', 'very_high')

    def test_all_fields_for_full_contact(self, engine, make_contact):
        result = engine.enrich_contact(make_contact())
        assert result.fields_enriched == [
            'linkedin', 'social_media', 'company_info', 'engagement_metrics', 'contact_preferences',
        ]

    def test_partial_enrichment_without_company(self, engine, make_contact):
        result = engine.enrich_contact(make_contact(company=''))
        assert 'company_info' not in result.fields_enriched
        assert 'companyWebsite' not in result.enrichment_data
        assert result.succeeded

    def test_partial_enrichment_company_only(self, engine):
        result = engine.enrich_contact(Contact(id='c-9', company='Acme Plumbing'))
        assert result.fields_enriched == ['company_info', 'engagement_metrics', 'contact_preferences']
        assert 'linkedinUrl' not in result.enrichment_data

    def test_record_has_camel_case_fields(self, engine, make_contact):
        data = engine.enrich_contact(make_contact()).enrichment_data
        for key in ('linkedinUrl', 'jobTitle', 'seniority', 'twitterHandle', 'companySize',
                    'recentActivity', 'lastActivityDate', 'lastEnriched',
                    'preferredContactMethod', 'bestContactTime', 'timezone'):
            assert key in data

    def test_reproducible_with_same_seed(self, make_contact):
        def run():
            engine = EnrichmentEngine(SyntheticProfileProvider(), InMemoryHistoryLog(), random.Random(5))
            data = dict(engine.enrich_contact(make_contact()).enrichment_data)
            data.pop('lastEnriched')
            data.pop('lastActivityDate')
            for item in data['recentActivity']:
                item.pop('date')
            return data
        assert run() == run()


class TestFailures:
    """Failures never raise past the engine."""

    def test_empty_contact_fails(self, engine):
        result = engine.enrich_contact(Contact(id='c-empty'))
        assert not result.succeeded
        assert result.enrichment_data['status'] == 'failed'
        assert result.confidence == 0
        assert result.fields_enriched == []
        assert result.data_source == 'error'

    def test_empty_contact_history_message(self, engine, history_log):
        engine.enrich_contact(Contact(id='c-empty'))
        entry = history_log.for_contact('c-empty')[0]
        assert entry.success is False
        assert entry.error_message == NOTHING_TO_ENRICH

    def test_provider_exception(self, history_log, make_contact):
        engine = EnrichmentEngine(ExplodingProvider(), history_log, random.Random(1))
        result = engine.enrich_contact(make_contact())
        assert result.to_dict() == {
            'enrichmentData': result.enrichment_data,
            'confidence': 0,
            'fieldsEnriched': [],
            'dataSource': 'error',
        }
        entry = history_log.for_contact('c-001')[0]
        assert entry.success is False
        assert entry.error_message == 'upstream timeout'
        assert entry.data_provider == 'error'

    def test_scoring_exception(self, engine, make_contact):
        with patch('lead_engine.engine.enrichment.score', side_effect=RuntimeError('bad config')):
            result = engine.enrich_contact(make_contact())
        assert result.enrichment_data['status'] == 'failed'

    def test_history_failure_does_not_raise(self, make_contact):
        log = MagicMock()
        log.last_successful.return_value = None
        log.append.side_effect = RuntimeError('db down')
        engine = EnrichmentEngine(SyntheticProfileProvider(), log, random.Random(1))
        assert engine.enrich_contact(make_contact()).succeeded


class TestHistory:

    def test_one_entry_per_call(self, engine, history_log, make_contact):
        engine.enrich_contact(make_contact())
        engine.enrich_contact(make_contact())
        assert len(history_log.for_contact('c-001')) == 2

    def test_first_run_has_no_old_data(self, engine, history_log, make_contact):
        result = engine.enrich_contact(make_contact())
        entry = history_log.for_contact('c-001')[0]
        assert entry.old_data is None
        assert entry.new_data == result.enrichment_data
        assert entry.fields_updated == result.fields_enriched
        assert entry.success is True
        assert entry.processing_time >= 0

    def test_old_data_is_previous_successful_run(self, engine, history_log, make_contact):
        first = engine.enrich_contact(make_contact())
        engine.enrich_contact(make_contact(first_name='', last_name='', company=''))   # fails
        engine.enrich_contact(make_contact())
        entries = history_log.for_contact('c-001')
        assert entries[2].old_data == first.enrichment_data

    def test_processing_time_is_measured(self, history_log, make_contact):
        engine = EnrichmentEngine(SyntheticProfileProvider(), history_log, random.Random(1))
        with patch('lead_engine.engine.enrichment.time.perf_counter', side_effect=[10.0, 10.25]):
            engine.enrich_contact(make_contact())
        assert history_log.for_contact('c-001')[0].processing_time == 250

    def test_history_accessor(self, engine, make_contact):
        engine.enrich_contact(make_contact())
        assert len(engine.history('c-001')) == 1


class TestContactPreferences:

    def test_linkedin_when_high_engagement(self):
        prefs = contact_preferences(Contact(phone='1'), 'https://linkedin.com/in/x', 71, 'mid')
        assert prefs['preferredContactMethod'] == 'linkedin'

    def test_phone_when_engagement_not_high(self):
        prefs = contact_preferences(Contact(phone='1'), 'https://linkedin.com/in/x', 70, 'mid')
        assert prefs['preferredContactMethod'] == 'phone'

    def test_email_fallback(self):
        assert contact_preferences(Contact(), None, 90, 'mid')['preferredContactMethod'] == 'email'

    @pytest.mark.parametrize('seniority,expected', [
        ('director', 'afternoon'),
        ('senior', 'afternoon'),
        ('c_level', 'morning'),
        ('vp', 'morning'),
        ('mid', 'morning'),
    ])
    def test_best_time(self, seniority, expected):
        assert contact_preferences(Contact(), None, 0, seniority)['bestContactTime'] == expected

    def test_timezone(self):
        assert contact_preferences(Contact(), None, 0, 'mid')['timezone'] == 'America/New_York'


class TestFieldsEnriched:

    def test_empty_bundle_still_reports_metrics(self):
        assert fields_enriched(ProfileBundle()) == ['engagement_metrics', 'contact_preferences']
