"""Tests for lead_engine.extensions and the app factory wiring."""
import random

import pytest
from unittest.mock import patch

from lead_engine import create_app
from lead_engine.engine.enrichment import EnrichmentEngine
from lead_engine.engine.errors import UnknownProviderError
from lead_engine.engine.providers import SyntheticProfileProvider
from lead_engine.engine.quick_replies import QuickReplyEngine
from lead_engine.extensions import Engines, build_engines
from lead_engine.services.history import InMemoryHistoryLog, SqlHistoryLog


class TestBuildEngines:

    def test_defaults_from_config(self):
        engines = build_engines()
        assert isinstance(engines, Engines)
        assert isinstance(engines.enrichment, EnrichmentEngine)
        assert isinstance(engines.quick_replies, QuickReplyEngine)
        assert isinstance(engines.enrichment.provider, SyntheticProfileProvider)
        assert len(engines.catalog) > 0

    def test_catalog_shared(self, make_catalog):
        cat = make_catalog({'id': 'only'})
        engines = build_engines(catalog=cat)
        assert engines.catalog is cat
        assert engines.quick_replies.catalog is cat

    def test_injected_parts_used(self):
        log = InMemoryHistoryLog()
        rng = random.Random(3)
        engines = build_engines(history_log=log, rng=rng)
        assert engines.enrichment.history_log is log
        assert engines.enrichment.rng is rng

    def test_sql_backend(self):
        with patch('lead_engine.extensions.HISTORY_BACKEND', 'sql'):
            engines = build_engines()
        assert isinstance(engines.enrichment.history_log, SqlHistoryLog)

    def test_unknown_provider(self):
        with patch('lead_engine.extensions.ENRICHMENT_PROVIDER', 'clearbit'):
            with pytest.raises(UnknownProviderError):
                build_engines()

    def test_seed_makes_enrichment_reproducible(self, make_contact):
        with patch('lead_engine.extensions.ENRICHMENT_SEED', 11):
            a = build_engines().enrichment.enrich_contact(make_contact())
            b = build_engines().enrichment.enrich_contact(make_contact())
        assert a.confidence == b.confidence
        assert a.enrichment_data['linkedinUrl'] == b.enrichment_data['linkedinUrl']


class TestCreateApp:

    def test_engines_attached(self, app):
        assert isinstance(app.extensions['lead_engine'], Engines)

    def test_builds_engines_when_not_given(self):
        app = create_app()
        assert isinstance(app.extensions['lead_engine'].quick_replies, QuickReplyEngine)

    def test_sql_backend_creates_tables(self):
        with patch('lead_engine.config.HISTORY_BACKEND', 'sql'), \
                patch('lead_engine.database.init_db') as mock_init:
            create_app(engines=build_engines())
        mock_init.assert_called_once()
