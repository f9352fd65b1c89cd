"""Dashboard routes: release stats and repository list."""

from flask import Blueprint, jsonify, request

from release_dashboard.cache.memory_cache import cached
from release_dashboard.config import get_config
from release_dashboard.database import get_release_table
from release_dashboard.errors import MalformedReleaseTable
from release_dashboard.routes import error_response
from release_dashboard.services.stats_service import get_dashboard_stats

dashboard_bp = Blueprint("dashboard", __name__)


def _parse_bool_arg(value, default):
    if value is None or value == "":
        return default
    value = value.lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ValueError(f"invalid boolean {value!r}")


def _table_version():
    table = get_release_table()
    return (str(table.raw_path), table.get_last_modified())


@cached(version=_table_version)
def _load_stats(workday_only, repo):
    return get_dashboard_stats(
        get_release_table(),
        workday_only=workday_only,
        repo=repo,
        timestamp_field=get_config().get("timestamp_field", "published_at"),
    )


@dashboard_bp.route("/api/dashboard/stats")
def get_stats():
    """Get release statistics from the persisted release table.

    Query params:
        workday_only: true/false, overrides the configured default
        repo: owner/name, restricts every aggregate to one repository
    """
    try:
        workday_only = _parse_bool_arg(
            request.args.get("workday_only"), get_config().get("workday_only", True)
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    repo = request.args.get("repo") or None

    try:
        return jsonify(_load_stats(workday_only, repo))
    except MalformedReleaseTable as e:
        return error_response("Internal server error", 500, f"Failed to load release table: {e}")


@dashboard_bp.route("/api/dashboard/repos")
def get_repos():
    """List the configured repositories."""
    return jsonify({"repos": list(get_config().get("repos", []))})


@dashboard_bp.route("/api/dashboard/period-stats")
def get_period_stats():
    """Get the per-repository Yearly/Weekly/Daily counts written by the last ingestion.

    Query params:
        repo: owner/name, restricts rows to one repository
        type: Yearly, Weekly or Daily
    """
    repo = request.args.get("repo") or None
    kind = request.args.get("type") or None
    try:
        rows = get_release_table().load_period_stats()
    except MalformedReleaseTable as e:
        return error_response("Internal server error", 500, f"Failed to load period stats table: {e}")

    rows = [r for r in rows if (repo is None or r["repo"] == repo) and (kind is None or r["type"] == kind)]
    return jsonify({"stats": rows})
