"""Cache management routes."""

from flask import Blueprint, jsonify

from release_dashboard.extensions import cache

cache_bp = Blueprint("cache", __name__)


@cache_bp.route("/api/clear-cache", methods=["POST"])
def clear_cache():
    """Clear the in-memory stats cache."""
    cache.clear()
    return jsonify({"message": "Cache cleared"})
