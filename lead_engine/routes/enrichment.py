"""
Enrichment routes — run an enrichment, read a contact's enrichment history.
"""
import logging
from flask import Blueprint, request, jsonify, current_app

from lead_engine.engine.base import Contact

logger = logging.getLogger('routes.enrichment')

bp = Blueprint('enrichment', __name__)


def _engine():
    return current_app.extensions['lead_engine'].enrichment


@bp.route('/api/enrichment', methods=['POST'])
def enrich_contact():
    """Enrich one contact. Always 200; failures come back as status='failed'."""
    data = request.get_json(silent=True) or {}
    payload = data.get('contact', data) if isinstance(data, dict) else {}
    if not isinstance(payload, dict):
        payload = {}

    result = _engine().enrich_contact(Contact.from_dict(payload))
    return jsonify(result.to_dict()), 200


@bp.route('/api/enrichment/history/<contact_id>')
def enrichment_history(contact_id):
    """All enrichment runs for a contact, oldest first."""
    entries = _engine().history(contact_id)
    return jsonify([entry.to_dict() for entry in entries])
