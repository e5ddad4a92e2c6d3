"""Tests for lead_engine.engine.quick_replies — the outreach orchestrator."""
import pytest
from unittest.mock import patch

from lead_engine.engine.base import Contact
from lead_engine.engine.catalog import find_placeholders
from lead_engine.engine.errors import UnknownTemplateError, UnresolvedPlaceholderError
from lead_engine.engine.industry import GENERIC_INSIGHTS, GENERIC_PROFILE, INDUSTRY_PROFILES
from lead_engine.engine.quick_replies import (
    QuickReplyEngine,
    engagement_from,
    urgency_from_engagement,
    context_reason,
    personalization_tips,
    industry_insights,
    best_send_time,
    GENERIC_REASON,
    HIGH_URGENCY_SEND_TIME,
    URGENCY_LANGUAGE_TIP,
)
from lead_engine.engine.ranker import OutreachContext


@pytest.fixture
def engine(catalog):
    return QuickReplyEngine(catalog)


class TestGenerateQuickReplies:

    def test_most_relevant_is_first_template(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact())
        assert result.most_relevant is result.templates[0]

    def test_alternatives_are_next_three(self, make_catalog, make_contact):
        cat = make_catalog(*[{'id': f't{i}', 'effectiveness': 90 - i} for i in range(10)])
        result = QuickReplyEngine(cat).generate_quick_replies(make_contact())
        assert [t.id for t in result.templates] == [f't{i}' for i in range(8)]
        assert [t.id for t in result.alternative_options] == ['t1', 't2', 't3']

    def test_templates_are_personalized(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact())
        for scored in result.templates:
            assert find_placeholders(scored.template.template) == []
            assert 'Sarah' in scored.template.template

    def test_braces_in_company_name(self, engine):
        contact = Contact(first_name='Dana', company='acme {north} plumbing', lead_status='new')
        result = engine.generate_quick_replies(contact)
        assert result.templates
        assert any('acme {north} plumbing' in t.template.subject + t.template.template
                   for t in result.templates)

    def test_scores_descending(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact(), OutreachContext(urgency_level='high'))
        scores = [t.context_score for t in result.templates]
        assert scores == sorted(scores, reverse=True)

    def test_category(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact(), category='pricing')
        assert result.most_relevant.id == 'pr_001'

    def test_expected_response_rate_standard(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact(), category='pricing')
        # pr_001 response_rate 52 + phone 5 + email 3 + company 4 + qualified 12 = 76
        assert result.expected_response_rate == 76

    def test_expected_response_rate_enriched(self, engine, make_contact):
        result = engine.generate_quick_replies(
            make_contact(), category='pricing', enrichment={'engagementScore': 40},
        )
        # effectiveness 88 + 24 in bonuses, capped at 95
        assert result.expected_response_rate == 95

    def test_empty_contact_gets_fallback(self, engine):
        result = engine.generate_quick_replies(Contact(status='lost'))
        assert result.used_fallback
        assert result.templates
        assert result.templates[0].template.template.startswith('Hi there,')

    def test_empty_catalog(self, make_catalog, make_contact):
        cat = make_catalog({'id': 'only_closing', 'category': 'closing'})
        result = QuickReplyEngine(cat).generate_quick_replies(make_contact())
        assert result.templates == []
        assert result.most_relevant is None
        assert result.expected_response_rate == 0
        assert result.context_reason == GENERIC_REASON
        assert result.to_dict()['contextualSuggestions']['mostRelevant'] is None

    def test_to_dict_shape(self, engine, make_contact):
        data = engine.generate_quick_replies(make_contact()).to_dict()
        assert set(data) == {
            'templates', 'contextualSuggestions', 'personalizationTips',
            'bestSendTime', 'expectedResponseRate', 'industryInsights',
        }
        assert set(data['contextualSuggestions']) == {'mostRelevant', 'alternativeOptions', 'contextReason'}
        assert 'contextScore' in data['templates'][0]


class TestEnrichmentUrgency:

    @pytest.mark.parametrize('engagement,urgency', [
        (95, 'high'), (80, 'high'), (79, 'medium'), (50, 'medium'), (49, 'low'), (0, 'low'),
    ])
    def test_thresholds(self, engagement, urgency):
        assert urgency_from_engagement(engagement) == urgency

    def test_engagement_from_record_or_result(self):
        assert engagement_from({'engagementScore': 72}) == 72
        assert engagement_from({'enrichmentData': {'engagementScore': 61}}) == 61
        assert engagement_from({}) is None
        assert engagement_from(None) is None
        assert engagement_from({'engagementScore': 'n/a'}) is None

    def test_high_engagement_drives_urgency(self, engine, make_contact):
        result = engine.generate_quick_replies(make_contact(), enrichment={'engagementScore': 90})
        assert result.best_send_time == HIGH_URGENCY_SEND_TIME

    def test_explicit_urgency_wins(self, engine, make_contact):
        result = engine.generate_quick_replies(
            make_contact(), OutreachContext(urgency_level='low'), enrichment={'engagementScore': 90},
        )
        assert result.best_send_time == INDUSTRY_PROFILES['Healthcare'].send_window


class TestContextReason:

    def test_reasons_joined(self, catalog):
        contact = Contact(company='Bright Smiles Dental', status='qualified')
        reason = context_reason(contact, 'Healthcare', OutreachContext(urgency_level='high'), catalog.get('pr_001'))
        assert reason == ('Recommended because: Healthcare industry-specific template, '
                          'Lead is qualified and ready for next steps, '
                          'High urgency situation requires immediate attention, '
                          'High effectiveness rate (88%)')

    def test_no_responses_for_follow_up(self, catalog):
        reason = context_reason(Contact(), 'General Business', OutreachContext(), catalog.get('fu_001'))
        assert 'No previous responses detected' in reason

    def test_generic_when_nothing_applies(self, make_template):
        from lead_engine.engine.catalog import parse_template
        t = parse_template(make_template(category='pricing', effectiveness=60))
        assert context_reason(Contact(), 'General Business', OutreachContext(), t) == GENERIC_REASON


class TestTips:

    def test_full_contact(self, make_contact):
        tips = personalization_tips(make_contact(), 'Healthcare', OutreachContext())
        assert tips[0] == 'Use "Sarah" frequently to build personal rapport'
        assert tips[1] == 'Reference "Bright Smiles Dental" to show you understand their context'
        assert any('patient acquisition' in t for t in tips)
        assert any(t.startswith('Reference their specific situation') for t in tips)

    def test_notes_truncated(self, make_contact):
        contact = make_contact(notes='x' * 120)
        tip = personalization_tips(contact, 'General Business', OutreachContext())[-1]
        assert tip == 'Reference their specific situation mentioned in notes: "' + 'x' * 50 + '..."'

    def test_urgency_language(self):
        tips = personalization_tips(Contact(), 'General Business', OutreachContext(urgency_level='high'))
        assert tips[-1] == URGENCY_LANGUAGE_TIP

    def test_no_industry_tips_for_general_business(self):
        tips = personalization_tips(Contact(first_name='Al'), 'General Business', OutreachContext())
        assert tips == [
            'Use "Al" frequently to build personal rapport',
            'Reference "Al\'s business" to show you understand their context',
        ]


class TestInsightsAndSendTime:

    def test_generic_insights(self):
        assert industry_insights('General Business') == GENERIC_INSIGHTS

    def test_industry_insights(self):
        insights = industry_insights('HVAC')
        assert insights[0].startswith('HVAC businesses typically struggle with: seasonal demand')
        assert len(insights) == 4

    def test_send_time_by_industry(self):
        assert best_send_time('Restaurant', OutreachContext()) == INDUSTRY_PROFILES['Restaurant'].send_window

    def test_send_time_general(self):
        assert best_send_time('General Business', OutreachContext()) == GENERIC_PROFILE.send_window

    def test_send_time_high_urgency(self):
        assert best_send_time('HVAC', OutreachContext(urgency_level='high')) == HIGH_URGENCY_SEND_TIME


class TestPersonalizeTemplate:

    def test_fills_template(self, engine, make_contact):
        result = engine.personalize_template('fu_001', make_contact(), {})
        assert result.id == 'fu_001'
        assert result.template.startswith('Hi Sarah,')

    def test_custom_data(self, engine, make_contact):
        result = engine.personalize_template('fu_001', make_contact(), {'first_name': 'Dr. Johnson'})
        assert result.template.startswith('Hi Dr. Johnson,')

    def test_unknown_template(self, engine, make_contact):
        with pytest.raises(UnknownTemplateError):
            engine.personalize_template('zz_999', make_contact())

    def test_braces_in_custom_data_kept(self, engine, make_contact):
        result = engine.personalize_template('fu_001', make_contact(), {'first_name': '{leftover}'})
        assert result.template.startswith('Hi {leftover},')

    def test_unresolved(self, engine, make_contact):
        with patch('lead_engine.engine.quick_replies.personalize',
                   side_effect=UnresolvedPlaceholderError('fu_001', ['mystery'])):
            with pytest.raises(UnresolvedPlaceholderError):
                engine.personalize_template('fu_001', make_contact())
