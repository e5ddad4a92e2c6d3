"""
Template catalog — static, versioned, read-only outreach templates.

The catalog ships as templates.yaml next to this module. Catalog changes are a
deploy-time edit of that file; nothing mutates a loaded catalog. Loading
validates every entry, including that each {token} in a template is one the
personalizer knows how to fill.
"""
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from lead_engine.config import TEMPLATE_CATEGORIES, URGENCY_LEVELS
from lead_engine.engine.errors import CatalogError, UnknownTemplateError

logger = logging.getLogger('engine.catalog')

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), 'templates.yaml')

PLACEHOLDER_PATTERN = re.compile(r'\{([a-z][a-z0-9_]*)\}')

# Every token a template may use. The personalizer supplies a value for each.
PLACEHOLDERS = frozenset([
    # contact
    'first_name', 'company_name', 'location',
    # sender
    'sender_name', 'sender_company', 'sender_phone',
    # industry knowledge
    'industry', 'pain_point', 'specific_goal', 'specific_result', 'similar_company',
    'similar_result', 'service_keyword', 'industry_example', 'tip_1', 'tip_2', 'tip_3',
    'avg_customer_value', 'additional_customers', 'monthly_increase', 'industry_benchmark',
    # offer
    'relevant_service', 'achieve_goal', 'specific_benefit', 'specific_challenge',
    'specific_solution', 'common_objection', 'consultation_type', 'service_name',
    'price_range', 'roi_timeframe', 'specific_benefits', 'timeframe', 'market_condition',
    'seasonal_advantage', 'competitive_advantage', 'market_timing_benefit', 'quick_win',
    'short_timeframe', 'specific_needs', 'recommended_package', 'package_price',
    'benefit_1', 'benefit_2', 'benefit_3', 'benefit_4', 'unique_value_add',
    'roi_percentage', 'specific_guarantee', 'bonus_item', 'personalized_reason',
    'start_date', 'time_slot_1', 'time_slot_2', 'time_slot_3',
])


def find_placeholders(text: str) -> List[str]:
    return PLACEHOLDER_PATTERN.findall(text or '')


@dataclass(frozen=True)
class TemplateDefinition:
    id: str
    category: str
    trigger: Tuple[str, ...]
    subject: str
    template: str
    context: str
    industry: Tuple[str, ...]
    lead_status: Tuple[str, ...]
    urgency: str
    effectiveness: float
    personalizable: bool
    response_rate: float

    def applies_to_industry(self, industry: str) -> bool:
        return 'all' in self.industry or industry in self.industry

    def names_industry(self, industry: str) -> bool:
        return industry in self.industry

    def applies_to_status(self, status: str) -> bool:
        return 'all' in self.lead_status or status in self.lead_status

    def placeholders(self) -> List[str]:
        return find_placeholders(self.subject) + find_placeholders(self.template)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category,
            'trigger': list(self.trigger),
            'subject': self.subject,
            'template': self.template,
            'context': self.context,
            'industry': list(self.industry),
            'leadStatus': list(self.lead_status),
            'urgency': self.urgency,
            'effectiveness': self.effectiveness,
            'personalizable': self.personalizable,
            'responseRate': self.response_rate,
        }


class TemplateCatalog:
    """Immutable ordered collection of TemplateDefinitions."""

    def __init__(self, templates: Iterable[TemplateDefinition], version: str = 'unversioned'):
        self._templates = tuple(templates)
        self.version = version
        ids = [t.id for t in self._templates]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise CatalogError(f"Duplicate template ids: {', '.join(duplicates)}")
        self._by_id = {t.id: t for t in self._templates}

    def all(self) -> List[TemplateDefinition]:
        return list(self._templates)

    def by_category(self, category: str) -> List[TemplateDefinition]:
        return [t for t in self._templates if t.category == category]

    def by_categories(self, categories: Iterable[str]) -> List[TemplateDefinition]:
        """Concatenate categories in the given order, catalog order within each."""
        result = []
        for category in categories:
            result.extend(self.by_category(category))
        return result

    def get(self, template_id: str) -> TemplateDefinition:
        try:
            return self._by_id[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    def __len__(self):
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates)

    def __contains__(self, template_id):
        return template_id in self._by_id


def _as_tuple(value, field_name, template_id) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not value:
        raise CatalogError(f"Template '{template_id}': '{field_name}' must be a non-empty list")
    return tuple(str(v) for v in value)


def parse_template(entry: Dict[str, Any]) -> TemplateDefinition:
    """Validate one raw catalog entry and build a TemplateDefinition."""
    template_id = entry.get('id')
    if not template_id:
        raise CatalogError(f"Template entry without id: {entry!r}")

    category = entry.get('category')
    if category not in TEMPLATE_CATEGORIES:
        raise CatalogError(f"Template '{template_id}': unknown category '{category}'")

    urgency = entry.get('urgency', 'medium')
    if urgency not in URGENCY_LEVELS:
        raise CatalogError(f"Template '{template_id}': unknown urgency '{urgency}'")

    effectiveness = entry.get('effectiveness', 0)
    response_rate = entry.get('response_rate', 0)
    for name, value in (('effectiveness', effectiveness), ('response_rate', response_rate)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise CatalogError(f"Template '{template_id}': {name} must be numeric")
        if not 0 <= value <= 100:
            raise CatalogError(f"Template '{template_id}': {name} {value} outside 0-100")

    definition = TemplateDefinition(
        id=str(template_id),
        category=category,
        trigger=_as_tuple(entry.get('trigger'), 'trigger', template_id),
        subject=str(entry.get('subject', '')),
        template=str(entry.get('template', '')).rstrip('\n'),
        context=str(entry.get('context', '')),
        industry=_as_tuple(entry.get('industry', ['all']), 'industry', template_id),
        lead_status=_as_tuple(entry.get('lead_status', ['all']), 'lead_status', template_id),
        urgency=urgency,
        effectiveness=effectiveness,
        personalizable=bool(entry.get('personalizable', True)),
        response_rate=response_rate,
    )

    unknown = sorted(set(definition.placeholders()) - PLACEHOLDERS)
    if unknown:
        raise CatalogError(f"Template '{template_id}': unknown placeholders {unknown}")
    return definition


def catalog_from_dict(data: Dict[str, Any]) -> TemplateCatalog:
    if not isinstance(data, dict) or not isinstance(data.get('templates'), list):
        raise CatalogError("Catalog must be a mapping with a 'templates' list")
    templates = [parse_template(entry) for entry in data['templates']]
    return TemplateCatalog(templates, version=str(data.get('version', 'unversioned')))


def load_catalog(path: Optional[str] = None) -> TemplateCatalog:
    """Read and validate a catalog YAML file (defaults to the bundled one)."""
    path = path or DEFAULT_CATALOG_PATH
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not read template catalog {path}: {e}") from e

    catalog = catalog_from_dict(data)
    logger.info("Template catalog loaded (version=%s, templates=%d)", catalog.version, len(catalog))
    return catalog

