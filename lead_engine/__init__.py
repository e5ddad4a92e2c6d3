"""
Flask application factory.

Creates and configures the Flask app, wires the engines, registers all blueprints.
"""
from flask import Flask


def create_app(engines=None):
    """
    Create and configure the Flask application.

    Args:
        engines: Optional pre-built Engines (tests pass one with a fixture
                 catalog and a seeded rng). Built from config when omitted.
    """
    from lead_engine.logging_config import configure_logging
    from lead_engine.config import HISTORY_BACKEND

    app = Flask(__name__)

    configure_logging(app)

    if HISTORY_BACKEND == 'sql':
        from lead_engine.database import init_db
        init_db()

    if engines is None:
        from lead_engine.extensions import build_engines
        engines = build_engines()
    app.extensions['lead_engine'] = engines

    # Register blueprints
    from lead_engine.routes.catalog import bp as catalog_bp
    from lead_engine.routes.enrichment import bp as enrichment_bp
    from lead_engine.routes.quick_replies import bp as quick_replies_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(enrichment_bp)
    app.register_blueprint(quick_replies_bp)

    return app
