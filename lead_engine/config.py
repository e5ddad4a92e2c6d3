"""
Centralized configuration — env vars and domain constants.
"""
import os


def _int_or_none(value):
    if value in (None, ''):
        return None
    try:
        return int(value)
    except ValueError:
        return None


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Database (enrichment history log) ────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')
HISTORY_BACKEND = os.getenv('HISTORY_BACKEND', 'memory')  # memory | sql

# ── Enrichment provider ──────────────────────────────────────────────────────
ENRICHMENT_PROVIDER = os.getenv('ENRICHMENT_PROVIDER', 'synthetic')
SYNTHETIC_LATENCY_SECONDS = float(os.getenv('SYNTHETIC_LATENCY_SECONDS', '0') or 0)
ENRICHMENT_SEED = _int_or_none(os.getenv('ENRICHMENT_SEED'))

# ── Template catalog ─────────────────────────────────────────────────────────
TEMPLATE_CATALOG_PATH = os.getenv('TEMPLATE_CATALOG_PATH')

# ── Sender signature used in personalized templates ──────────────────────────
SENDER_NAME = os.getenv('SENDER_NAME', 'Michael Thompson')
SENDER_COMPANY = os.getenv('SENDER_COMPANY', 'Traffik Boosters')
SENDER_PHONE = os.getenv('SENDER_PHONE', '(877) 840-6250')

# ── Template catalog vocabulary ──────────────────────────────────────────────
TEMPLATE_CATEGORIES = [
    'follow_up',
    'objection_handling',
    'pricing',
    'scheduling',
    'closing',
    'nurturing',
    'introduction',
    'value_proposition',
]

URGENCY_LEVELS = ['low', 'medium', 'high']

# Used when no category is requested
DEFAULT_RANKING_CATEGORIES = ['follow_up', 'objection_handling', 'pricing']

# Used when nothing survives the industry/status filter
FALLBACK_CATEGORIES = ['follow_up', 'objection_handling']

MAX_TEMPLATES = 8
MAX_ALTERNATIVES = 3

# ── Response-rate caps ───────────────────────────────────────────────────────
RESPONSE_RATE_CAP = 85
ENRICHED_RESPONSE_RATE_CAP = 95

# ── Enrichment groups reported back to the CRM ───────────────────────────────
ENRICHMENT_GROUPS = [
    'linkedin',
    'social_media',
    'company_info',
    'engagement_metrics',
    'contact_preferences',
]

ENRICHMENT_STATUSES = ['completed', 'failed']

DEFAULT_TIMEZONE = 'America/New_York'
