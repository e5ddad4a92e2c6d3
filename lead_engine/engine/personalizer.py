"""
Template personalization + expected response rate.

Substitution is a single regex pass over {token} patterns driven by a
token → value map. Values are never re-scanned, so a value that itself
contains braces cannot trigger a second substitution, and contact data with
braces in it passes through as literal text. A template token with no value
is an error: nothing ships with a raw placeholder in it.
"""
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from lead_engine.config import (
    SENDER_NAME, SENDER_COMPANY, SENDER_PHONE,
    RESPONSE_RATE_CAP, ENRICHED_RESPONSE_RATE_CAP,
)
from lead_engine.engine.base import Contact
from lead_engine.engine.catalog import TemplateDefinition, PLACEHOLDER_PATTERN
from lead_engine.engine.classifier import extract_location
from lead_engine.engine.errors import UnresolvedPlaceholderError
from lead_engine.engine.industry import industry_profile

logger = logging.getLogger('engine.personalizer')


# Offer-level defaults that don't depend on the contact
OFFER_DEFAULTS = {
    'relevant_service': 'digital marketing solution',
    'achieve_goal': 'reach your growth targets',
    'specific_benefit': 'a free growth audit',
    'specific_challenge': 'getting a steady flow of new customers',
    'specific_solution': 'fill your calendar with qualified leads',
    'common_objection': 'long-term contracts',
    'consultation_type': 'marketing strategy session',
    'service_name': 'Growth Marketing Program',
    'price_range': '$1,995-$5,995/month',
    'roi_timeframe': '90 days',
    'specific_benefits': 'more calls and higher-value jobs',
    'timeframe': '90 days',
    'market_condition': 'slower periods',
    'seasonal_advantage': 'Ad costs are lower when competitors pull back',
    'competitive_advantage': 'You build visibility before competitors wake up',
    'market_timing_benefit': 'Your pipeline is full when demand returns',
    'quick_win': 'measurable lead growth',
    'short_timeframe': '30 days',
    'specific_needs': 'growing your customer base',
    'recommended_package': 'Growth Package',
    'package_price': '$3,495/month',
    'benefit_1': 'Local SEO optimization',
    'benefit_2': 'Paid advertising management',
    'benefit_3': 'Monthly performance reporting',
    'benefit_4': 'Dedicated account manager',
    'unique_value_add': 'Priority onboarding within 24 hours',
    'roi_percentage': '300',
    'industry_benchmark': '150-200% ROI',
    'specific_guarantee': 'Results guaranteed or you don\'t pay',
    'bonus_item': 'free website audit',
    'personalized_reason': 'we want your first month to be a clear win',
    'start_date': 'next Monday',
    'time_slot_1': 'Tuesday at 10:00 AM',
    'time_slot_2': 'Wednesday at 2:00 PM',
    'time_slot_3': 'Thursday at 11:00 AM',
}


def build_replacements(contact: Contact, industry: str,
                       custom_data: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Token → value map for one contact. custom_data wins over everything."""
    profile = industry_profile(industry)
    industry_label = industry.lower()

    values = dict(OFFER_DEFAULTS)
    values.update({
        'first_name': contact.first_name or 'there',
        'company_name': contact.company or 'your business',
        'location': extract_location(contact) or 'your area',
        'sender_name': SENDER_NAME,
        'sender_company': SENDER_COMPANY,
        'sender_phone': SENDER_PHONE,
        'industry': industry_label,
        'pain_point': profile.pain_points[0],
        'specific_goal': profile.solutions[0],
        'specific_result': profile.results[0],
        'similar_company': f'another {industry_label} business',
        'similar_result': profile.results[1],
        'service_keyword': profile.service_keyword,
        'industry_example': profile.example,
        'tip_1': profile.tips[0],
        'tip_2': profile.tips[1],
        'tip_3': profile.tips[2],
        'avg_customer_value': profile.avg_customer_value,
        'additional_customers': profile.additional_customers,
        'monthly_increase': profile.monthly_increase,
    })
    for key, value in (custom_data or {}).items():
        if value is not None:
            values[str(key)] = str(value)
    return values


def substitute(text: str, replacements: Dict[str, str],
               unresolved: Optional[List[str]] = None) -> str:
    """
    Replace every {token} that has a value; leave unknown tokens untouched.

    Tokens with no value are appended to `unresolved` when a list is given.
    Only the source text is scanned, never the inserted values.
    """
    def _sub(match):
        token = match.group(1)
        if token in replacements:
            return replacements[token]
        if unresolved is not None:
            unresolved.append(token)
        return match.group(0)
    return PLACEHOLDER_PATTERN.sub(_sub, text)


def personalize(template: TemplateDefinition, contact: Contact, industry: str,
                custom_data: Optional[Dict[str, str]] = None) -> TemplateDefinition:
    """Return a copy of the template with subject and body filled in for the contact."""
    replacements = build_replacements(contact, industry, custom_data)
    leftover: List[str] = []
    subject = substitute(template.subject, replacements, leftover)
    body = substitute(template.template, replacements, leftover)

    if leftover:
        logger.error("Template %s: unresolved placeholders %s", template.id, sorted(set(leftover)))
        raise UnresolvedPlaceholderError(template.id, leftover)

    return replace(template, subject=subject, template=body)


# ── Expected response rate ──────────────────────────────────────────────────

RESPONSE_RATE_BONUSES = {
    'phone': 5,
    'email': 3,
    'company': 4,
    'qualified': 12,
}


def expected_response_rate(template: TemplateDefinition, contact: Contact,
                           enriched: bool = False) -> float:
    """
    Historical baseline plus lead-quality bonuses, capped.

    Standard: baseline is the template's response_rate, cap 85.
    Enriched: baseline is the template's effectiveness, cap 95 (used when an
    enrichment record backs the contact data).
    """
    rate = template.effectiveness if enriched else template.response_rate
    cap = ENRICHED_RESPONSE_RATE_CAP if enriched else RESPONSE_RATE_CAP

    if contact.phone:
        rate += RESPONSE_RATE_BONUSES['phone']
    if contact.email:
        rate += RESPONSE_RATE_BONUSES['email']
    if contact.company:
        rate += RESPONSE_RATE_BONUSES['company']
    if contact.effective_status == 'qualified':
        rate += RESPONSE_RATE_BONUSES['qualified']

    return max(0, min(cap, rate))
