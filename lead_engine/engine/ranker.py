"""
Relevance ranker — hard filter, additive context score, stable ordering.

Score = effectiveness
      + 20  conversation stage is one of the template's triggers
      + 15  template names the contact's industry explicitly (not via 'all')
      + 10  context urgency equals template urgency
      + 15  follow_up template and the response history is known to be empty

Ties keep catalog order (sorted() is stable). No randomness here: identical
input always produces the identical ordering.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lead_engine.config import DEFAULT_RANKING_CATEGORIES, FALLBACK_CATEGORIES
from lead_engine.engine.base import Contact
from lead_engine.engine.catalog import TemplateCatalog, TemplateDefinition
from lead_engine.engine.classifier import Classification, classify

logger = logging.getLogger('engine.ranker')

TRIGGER_BONUS = 20
INDUSTRY_BONUS = 15
URGENCY_BONUS = 10
NO_RESPONSE_BONUS = 15


@dataclass(frozen=True)
class OutreachContext:
    """Conversation state supplied by the caller. Every field is optional."""
    conversation_stage: Optional[str] = None
    last_interaction: Optional[str] = None
    response_history: Optional[List[str]] = None    # None = unknown, [] = no responses
    urgency_level: Optional[str] = None
    campaign_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'OutreachContext':
        data = data or {}

        def _get(*keys):
            return next((data[k] for k in keys if data.get(k) is not None), None)

        history = _get('responseHistory', 'response_history')
        if history is not None and not isinstance(history, list):
            history = [history]
        return cls(
            conversation_stage=_get('conversationStage', 'conversation_stage'),
            last_interaction=_get('lastInteraction', 'last_interaction'),
            response_history=history,
            urgency_level=_get('urgencyLevel', 'urgency_level'),
            campaign_type=_get('campaignType', 'campaign_type'),
        )

    def with_urgency(self, urgency: str) -> 'OutreachContext':
        return OutreachContext(
            conversation_stage=self.conversation_stage,
            last_interaction=self.last_interaction,
            response_history=self.response_history,
            urgency_level=urgency,
            campaign_type=self.campaign_type,
        )


@dataclass(frozen=True)
class ScoredTemplate:
    template: TemplateDefinition
    context_score: float
    bonuses: Dict[str, float] = field(default_factory=dict)

    @property
    def id(self):
        return self.template.id

    def to_dict(self) -> Dict[str, Any]:
        data = self.template.to_dict()
        data['contextScore'] = self.context_score
        return data


@dataclass(frozen=True)
class RankingResult:
    ranked: List[ScoredTemplate]
    used_fallback: bool = False


def is_eligible(template: TemplateDefinition, industry: str, status: str) -> bool:
    """Hard filter: both the industry and the lead status must be covered."""
    return template.applies_to_industry(industry) and template.applies_to_status(status)


def score_template(template: TemplateDefinition, context: OutreachContext,
                   industry: str) -> ScoredTemplate:
    bonuses = {}
    if context.conversation_stage and context.conversation_stage in template.trigger:
        bonuses['trigger'] = TRIGGER_BONUS
    if template.names_industry(industry):
        bonuses['industry'] = INDUSTRY_BONUS
    if context.urgency_level and context.urgency_level == template.urgency:
        bonuses['urgency'] = URGENCY_BONUS
    if context.response_history is not None and not context.response_history \
            and template.category == 'follow_up':
        bonuses['no_response'] = NO_RESPONSE_BONUS

    score = template.effectiveness + sum(bonuses.values())
    return ScoredTemplate(template=template, context_score=score, bonuses=bonuses)


def _sort(scored: List[ScoredTemplate]) -> List[ScoredTemplate]:
    return sorted(scored, key=lambda s: s.context_score, reverse=True)


def rank_with_details(contact: Contact, context: Optional[OutreachContext],
                      catalog: TemplateCatalog,
                      classification: Optional[Classification] = None,
                      category: Optional[str] = None) -> RankingResult:
    """Rank and report whether the unfiltered fallback list was used."""
    context = context or OutreachContext()
    classification = classification or classify(contact)
    industry = classification.industry
    status = contact.effective_status

    if category:
        candidates = catalog.by_category(category)
    else:
        candidates = catalog.by_categories(DEFAULT_RANKING_CATEGORIES)

    eligible = [t for t in candidates if is_eligible(t, industry, status)]
    if eligible:
        ranked = _sort([score_template(t, context, industry) for t in eligible])
        return RankingResult(ranked=ranked)

    fallback = catalog.by_categories(FALLBACK_CATEGORIES)
    logger.info("No template matched industry=%s status=%s category=%s — "
                "falling back to %d unfiltered templates",
                industry, status, category or 'any', len(fallback))
    ranked = _sort([score_template(t, context, industry) for t in fallback])
    return RankingResult(ranked=ranked, used_fallback=True)


def rank(contact: Contact, context: Optional[OutreachContext], catalog: TemplateCatalog,
         classification: Optional[Classification] = None,
         category: Optional[str] = None) -> List[ScoredTemplate]:
    """Eligible templates sorted by context score, highest first."""
    return rank_with_details(contact, context, catalog, classification, category).ranked
