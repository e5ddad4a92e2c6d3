"""
Quick reply routes — ranked outreach templates and single-template personalization.
"""
import logging
from flask import Blueprint, request, jsonify, current_app

from lead_engine.config import TEMPLATE_CATEGORIES
from lead_engine.engine.base import Contact
from lead_engine.engine.errors import UnknownTemplateError, UnresolvedPlaceholderError
from lead_engine.engine.ranker import OutreachContext

logger = logging.getLogger('routes.quick_replies')

bp = Blueprint('quick_replies', __name__)


def _engine():
    return current_app.extensions['lead_engine'].quick_replies


@bp.route('/api/quick-replies', methods=['POST'])
def generate_quick_replies():
    """Top templates for a contact in the given conversation context."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('contact'), dict):
        return jsonify({'error': 'contact must be an object'}), 400

    context = data.get('context')
    if context is not None and not isinstance(context, dict):
        return jsonify({'error': 'context must be an object'}), 400

    category = data.get('category') or None
    if category is not None and category not in TEMPLATE_CATEGORIES:
        return jsonify({'error': f'Unknown category: {category}'}), 400

    enrichment = data.get('enrichment')
    if enrichment is not None and not isinstance(enrichment, dict):
        return jsonify({'error': 'enrichment must be an object'}), 400

    try:
        result = _engine().generate_quick_replies(
            Contact.from_dict(data['contact']),
            context=OutreachContext.from_dict(context),
            category=category,
            enrichment=enrichment,
        )
        return jsonify(result.to_dict())
    except UnresolvedPlaceholderError as e:
        return jsonify({'error': str(e), 'tokens': e.tokens}), 422
    except Exception as e:
        logger.error("Quick reply generation failed: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


@bp.route('/api/quick-replies/personalize', methods=['POST'])
def personalize_template():
    """Personalize one catalog template (the "use this template" action)."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'JSON object body required'}), 400

    template_id = data.get('templateId') or data.get('template_id')
    if not template_id:
        return jsonify({'error': 'templateId is required'}), 400

    contact = data.get('contact') or {}
    custom_data = data.get('customData') or data.get('custom_data') or {}
    if not isinstance(contact, dict) or not isinstance(custom_data, dict):
        return jsonify({'error': 'contact and customData must be objects'}), 400

    try:
        template = _engine().personalize_template(template_id, Contact.from_dict(contact), custom_data)
        return jsonify(template.to_dict())
    except UnknownTemplateError as e:
        return jsonify({'error': str(e)}), 404
    except UnresolvedPlaceholderError as e:
        return jsonify({'error': str(e), 'tokens': e.tokens}), 422
