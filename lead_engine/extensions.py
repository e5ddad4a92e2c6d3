"""
Shared engine instances — template catalog, enrichment engine, quick reply engine.

Built once per app in create_app() from config and stored on
app.extensions['lead_engine']. Tests pass their own catalog, provider,
history log or rng to get deterministic instances.
"""
import logging
import random
from dataclasses import dataclass
from typing import Optional

from lead_engine.config import (
    ENRICHMENT_PROVIDER, SYNTHETIC_LATENCY_SECONDS, ENRICHMENT_SEED,
    TEMPLATE_CATALOG_PATH, HISTORY_BACKEND,
)
from lead_engine.engine.base import ProfileProvider
from lead_engine.engine.catalog import TemplateCatalog, load_catalog
from lead_engine.engine.enrichment import EnrichmentEngine
from lead_engine.engine.providers import get_provider, SyntheticProfileProvider
from lead_engine.engine.quick_replies import QuickReplyEngine
from lead_engine.services.history import EnrichmentHistoryLog, make_history_log

logger = logging.getLogger('lead_engine.extensions')


@dataclass
class Engines:
    catalog: TemplateCatalog
    enrichment: EnrichmentEngine
    quick_replies: QuickReplyEngine


def _configured_provider() -> ProfileProvider:
    if ENRICHMENT_PROVIDER == SyntheticProfileProvider.name:
        return get_provider(ENRICHMENT_PROVIDER, latency=SYNTHETIC_LATENCY_SECONDS)
    return get_provider(ENRICHMENT_PROVIDER)


def build_engines(catalog: Optional[TemplateCatalog] = None,
                  provider: Optional[ProfileProvider] = None,
                  history_log: Optional[EnrichmentHistoryLog] = None,
                  rng: Optional[random.Random] = None) -> Engines:
    """Wire the engines. Anything not passed in comes from config."""
    if catalog is None:
        catalog = load_catalog(TEMPLATE_CATALOG_PATH)
    if provider is None:
        provider = _configured_provider()
    if history_log is None:
        history_log = make_history_log(HISTORY_BACKEND)
    if rng is None:
        rng = random.Random(ENRICHMENT_SEED)

    logger.info("Engines ready — catalog=%s (%d templates), provider=%s, history=%s",
                catalog.version, len(catalog), provider.name, history_log.__class__.__name__)
    if provider.data_source == SyntheticProfileProvider.data_source:
        logger.warning("Enrichment provider is synthetic — enrichment data is demo data, not verified")

    return Engines(
        catalog=catalog,
        enrichment=EnrichmentEngine(provider, history_log, rng),
        quick_replies=QuickReplyEngine(catalog),
    )
