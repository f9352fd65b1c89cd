"""Route blueprints registration."""

from flask import jsonify

from release_dashboard.extensions import logger


def error_response(message, status, log_message=None):
    """Log the detailed error and return a generic JSON error body."""
    logger.error(log_message or message)
    return jsonify({"error": message}), status


def register_blueprints(app):
    """Register all route blueprints with the Flask app."""
    from release_dashboard.routes.dashboard_routes import dashboard_bp
    from release_dashboard.routes.cache_routes import cache_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(cache_bp)
