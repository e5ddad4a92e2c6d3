"""
Logging setup for the lead engine.

Called once from create_app(). Output is text (default) or single-line JSON
via LOG_FORMAT; LOG_LEVEL sets the root level. The engine's own loggers
(engine.*, routes.*, services.*, lead_engine.*) can be turned up or down on
their own with ENGINE_LOG_LEVEL, e.g. DEBUG ranking traces while libraries
stay at INFO.

Enrichment and quick-reply log calls pass contact_id / template_id through
`extra=`; the JSON formatter lifts them into top-level fields so a log
aggregator can follow one contact across runs.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone


# Record attributes lifted into JSON output when a log call sets them
CONTEXT_FIELDS = ('contact_id', 'template_id')

# Top-level logger names used across the package
ENGINE_LOGGERS = ('engine', 'routes', 'services', 'lead_engine')

# Loggers that are noisy at INFO
_NOISY_LOGGERS = [
    'urllib3',
    'werkzeug',
    'sqlalchemy.engine',
]


class JSONFormatter(logging.Formatter):
    """Single-line JSON log formatter for production log aggregators."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _level_from(name, default=logging.INFO):
    level = getattr(logging, (name or '').upper(), None)
    return level if isinstance(level, int) else default


def configure_logging(app=None):
    """
    Set up the root handler and the engine logger levels from env vars.

    Environment variables:
        LOG_LEVEL        — root log level name (default: INFO)
        LOG_FORMAT       — "text" (default) or "json"
        ENGINE_LOG_LEVEL — level for the engine's own loggers (default: LOG_LEVEL)
    """
    level = _level_from(os.getenv('LOG_LEVEL', 'INFO'))
    engine_level = _level_from(os.getenv('ENGINE_LOG_LEVEL'), default=level)
    log_format = os.getenv('LOG_FORMAT', 'text').lower()

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any existing handlers to avoid duplicates on re-init
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(min(level, engine_level))

    if log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s %(name)s — %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    root.addHandler(handler)

    for name in ENGINE_LOGGERS:
        logging.getLogger(name).setLevel(engine_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.setLevel(level)
