"""
Quick reply engine — rank, personalize and annotate outreach templates.

generate_quick_replies() is the outreach path: classify the contact, rank the
catalog against the conversation context, personalize the top templates and
attach tips, industry insights, a send window and an expected response rate.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lead_engine.config import MAX_TEMPLATES, MAX_ALTERNATIVES
from lead_engine.engine.base import Contact
from lead_engine.engine.catalog import TemplateCatalog, TemplateDefinition
from lead_engine.engine.classifier import classify, DEFAULT_INDUSTRY
from lead_engine.engine.industry import industry_profile, has_profile, GENERIC_INSIGHTS, GENERIC_PROFILE
from lead_engine.engine.personalizer import personalize, expected_response_rate
from lead_engine.engine.ranker import OutreachContext, ScoredTemplate, rank_with_details

logger = logging.getLogger('engine.quick_replies')

HIGH_URGENCY_SEND_TIME = 'Send immediately - high urgency requires quick response'
GENERIC_REASON = 'Best match based on current context and lead profile'
URGENCY_LANGUAGE_TIP = 'Use urgency language: "This week only", "Limited time", "Quick response needed"'
NOTES_EXCERPT_LENGTH = 50


@dataclass(frozen=True)
class QuickReplyResult:
    templates: List[ScoredTemplate]
    most_relevant: Optional[ScoredTemplate]
    alternative_options: List[ScoredTemplate]
    context_reason: str
    personalization_tips: List[str]
    best_send_time: str
    expected_response_rate: float
    industry_insights: List[str]
    industry: str = DEFAULT_INDUSTRY
    used_fallback: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'templates': [t.to_dict() for t in self.templates],
            'contextualSuggestions': {
                'mostRelevant': self.most_relevant.to_dict() if self.most_relevant else None,
                'alternativeOptions': [t.to_dict() for t in self.alternative_options],
                'contextReason': self.context_reason,
            },
            'personalizationTips': list(self.personalization_tips),
            'bestSendTime': self.best_send_time,
            'expectedResponseRate': self.expected_response_rate,
            'industryInsights': list(self.industry_insights),
        }


def engagement_from(enrichment: Optional[Dict[str, Any]]) -> Optional[float]:
    """Engagement score from an enrichment record or a full enrichment result."""
    if not enrichment:
        return None
    data = enrichment.get('enrichmentData', enrichment)
    value = data.get('engagementScore', data.get('engagement_score'))
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def urgency_from_engagement(engagement: float) -> str:
    if engagement >= 80:
        return 'high'
    if engagement >= 50:
        return 'medium'
    return 'low'


def context_reason(contact: Contact, industry: str, context: OutreachContext,
                   template: Optional[TemplateDefinition]) -> str:
    if template is None:
        return GENERIC_REASON

    reasons = []
    if template.category == 'follow_up' and not context.response_history:
        reasons.append('No previous responses detected')
    if industry != DEFAULT_INDUSTRY:
        reasons.append(f'{industry} industry-specific template')
    if contact.effective_status == 'qualified':
        reasons.append('Lead is qualified and ready for next steps')
    if context.urgency_level == 'high':
        reasons.append('High urgency situation requires immediate attention')
    if template.effectiveness > 80:
        reasons.append(f'High effectiveness rate ({template.effectiveness}%)')

    if not reasons:
        return GENERIC_REASON
    return 'Recommended because: ' + ', '.join(reasons)


def personalization_tips(contact: Contact, industry: str, context: OutreachContext) -> List[str]:
    tips = []
    if contact.first_name:
        tips.append(f'Use "{contact.first_name}" frequently to build personal rapport')
    business = contact.company or (f"{contact.first_name}'s business" if contact.first_name else 'their business')
    tips.append(f'Reference "{business}" to show you understand their context')

    if has_profile(industry):
        profile = industry_profile(industry)
        tips.append(f'Mention {industry}-specific challenges like "{profile.pain_points[0]}"')
        tips.append(f'Highlight relevant results: "{profile.results[0]}"')

    if contact.notes:
        tips.append(f'Reference their specific situation mentioned in notes: '
                    f'"{contact.notes[:NOTES_EXCERPT_LENGTH]}..."')

    if context.urgency_level == 'high':
        tips.append(URGENCY_LANGUAGE_TIP)
    return tips


def industry_insights(industry: str) -> List[str]:
    if not has_profile(industry):
        return list(GENERIC_INSIGHTS)
    profile = industry_profile(industry)
    return [
        f"{industry} businesses typically struggle with: {', '.join(profile.pain_points)}",
        f"Most effective solutions include: {', '.join(profile.solutions)}",
        f"Expected results: {', '.join(profile.results)}",
        'Industry-specific urgency: Peak demand periods require advance planning',
    ]


def best_send_time(industry: str, context: OutreachContext) -> str:
    if context.urgency_level == 'high':
        return HIGH_URGENCY_SEND_TIME
    if has_profile(industry):
        return industry_profile(industry).send_window
    return GENERIC_PROFILE.send_window


class QuickReplyEngine:
    """Outreach recommendations over an injected, read-only template catalog."""

    def __init__(self, catalog: TemplateCatalog):
        self.catalog = catalog

    def generate_quick_replies(self, contact: Contact,
                               context: Optional[OutreachContext] = None,
                               category: Optional[str] = None,
                               enrichment: Optional[Dict[str, Any]] = None) -> QuickReplyResult:
        context = context or OutreachContext()
        engagement = engagement_from(enrichment)
        if engagement is not None and not context.urgency_level:
            context = context.with_urgency(urgency_from_engagement(engagement))

        classification = classify(contact)
        industry = classification.industry
        ranking = rank_with_details(contact, context, self.catalog, classification, category)

        top = [
            ScoredTemplate(
                template=personalize(scored.template, contact, industry),
                context_score=scored.context_score,
                bonuses=scored.bonuses,
            )
            for scored in ranking.ranked[:MAX_TEMPLATES]
        ]
        most_relevant = top[0] if top else None
        lead_template = most_relevant.template if most_relevant else None

        if lead_template is not None:
            response_rate = expected_response_rate(lead_template, contact, enriched=bool(enrichment))
        else:
            response_rate = 0

        logger.info("Quick replies for contact %s — industry=%s status=%s category=%s "
                    "candidates=%d top=%s fallback=%s",
                    contact.id, industry, contact.effective_status, category or 'any',
                    len(ranking.ranked), most_relevant.id if most_relevant else None,
                    ranking.used_fallback,
                    extra={'contact_id': contact.id,
                           'template_id': most_relevant.id if most_relevant else None})

        return QuickReplyResult(
            templates=top,
            most_relevant=most_relevant,
            alternative_options=top[1:1 + MAX_ALTERNATIVES],
            context_reason=context_reason(contact, industry, context, lead_template),
            personalization_tips=personalization_tips(contact, industry, context),
            best_send_time=best_send_time(industry, context),
            expected_response_rate=response_rate,
            industry_insights=industry_insights(industry),
            industry=industry,
            used_fallback=ranking.used_fallback,
            meta={'classification': classification.to_dict(), 'catalogVersion': self.catalog.version},
        )

    def personalize_template(self, template_id: str, contact: Contact,
                             custom_data: Optional[Dict[str, str]] = None) -> TemplateDefinition:
        """Fill one catalog template for a contact. Raises UnknownTemplateError
        for a bad id and UnresolvedPlaceholderError if any token survives."""
        template = self.catalog.get(template_id)
        industry = classify(contact).industry
        return personalize(template, contact, industry, custom_data)
