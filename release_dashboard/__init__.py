"""Release Dashboard - Backend Package.

Provides the Flask application factory and the release ingestion modules.
"""

from flask import Flask

from release_dashboard.config import set_config
from release_dashboard.database import reset_release_table
from release_dashboard import extensions
from release_dashboard.routes import register_blueprints


def create_app(config=None):
    """Create and configure the Flask application.

    Args:
        config: optional config dict replacing the one loaded from config.json.
    """
    if config is not None:
        set_config(config)
        reset_release_table()
        extensions.cache.clear()
    app = Flask(__name__)
    register_blueprints(app)
    return app
