"""Shared test fixtures."""
import random

import pytest
from unittest.mock import patch
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from lead_engine.database import Base
from lead_engine.engine.base import Contact
from lead_engine.engine.catalog import catalog_from_dict, load_catalog


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine('sqlite:///:memory:')
    import lead_engine.models.enrichment_history  # noqa: F401
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route all get_session() calls to the test session.

    We disable close() so that code calling session.close() in its finally
    blocks doesn't invalidate the shared test session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('lead_engine.database.get_session', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def rng():
    """Seeded RNG so synthesized data is reproducible within a test."""
    return random.Random(1234)


@pytest.fixture
def catalog():
    """The bundled template catalog."""
    return load_catalog()


@pytest.fixture
def make_template():
    """Factory fixture — raw catalog entry dict with sensible defaults."""
    def _make(**overrides):
        entry = dict(
            id='t_001',
            category='follow_up',
            trigger=['no_response'],
            subject='Quick question for {company_name}',
            template='Hi {first_name},\n\nChecking in.\n\n{sender_name}',
            context='Test template',
            industry=['all'],
            lead_status=['all'],
            urgency='medium',
            effectiveness=70,
            personalizable=True,
            response_rate=30,
        )
        entry.update(overrides)
        return entry
    return _make


@pytest.fixture
def make_catalog(make_template):
    """Factory fixture — TemplateCatalog from a list of override dicts."""
    def _make(*entries, version='test'):
        return catalog_from_dict({
            'version': version,
            'templates': [make_template(**e) for e in entries],
        })
    return _make


@pytest.fixture
def make_contact():
    """Factory fixture — Contact with a full set of fields, overridable."""
    def _make(**overrides):
        data = dict(
            id='c-001',
            first_name='Sarah',
            last_name='Johnson',
            company='Bright Smiles Dental',
            position='Practice Manager',
            notes='Looking for a dentist marketing partner in Miami',
            lead_status='qualified',
            status='',
            phone='(305) 555-0101',
            email='sarah@brightsmiles.example',
        )
        data.update(overrides)
        return Contact(**data)
    return _make


@pytest.fixture
def app(catalog):
    """Flask test app with in-memory history and a seeded rng."""
    from lead_engine import create_app
    from lead_engine.extensions import build_engines
    from lead_engine.engine.providers import SyntheticProfileProvider
    from lead_engine.services.history import InMemoryHistoryLog

    engines = build_engines(
        catalog=catalog,
        provider=SyntheticProfileProvider(),
        history_log=InMemoryHistoryLog(),
        rng=random.Random(42),
    )
    app = create_app(engines=engines)
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c
