"""
Catalog routes — template listing, health check.
"""
from flask import Blueprint, request, jsonify, current_app

from lead_engine.config import TEMPLATE_CATEGORIES

bp = Blueprint('catalog', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({'status': 'ok'}), 200


@bp.route('/api/templates')
def list_templates():
    """Catalog listing, optionally narrowed to one category."""
    catalog = current_app.extensions['lead_engine'].catalog
    category = request.args.get('category')

    if category:
        if category not in TEMPLATE_CATEGORIES:
            return jsonify({'error': f'Unknown category: {category}'}), 400
        templates = catalog.by_category(category)
    else:
        templates = catalog.all()

    return jsonify({
        'version': catalog.version,
        'count': len(templates),
        'templates': [t.to_dict() for t in templates],
    })
