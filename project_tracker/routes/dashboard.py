"""Dashboard routes for the Projects Tracker.

Provides the design status chart data and the district/LAC reference
lookups used by forms and filters.
"""
from flask import Blueprint, jsonify

from project_tracker.models import ALL_DESIGN_STATUSES, DISTRICTS, LACS_BY_DISTRICT
from project_tracker.services import query_service
from project_tracker.services.project_service import get_repository

dashboard_bp = Blueprint('dashboard', __name__)


def _get_dashboard_data() -> dict:
    """Fetch and structure dashboard data.

    Returns:
        Dictionary with one chart entry per design status and the total.
    """
    projects = get_repository().all()
    counts = query_service.status_counts(projects)
    return {
        'statusCounts': [c.to_dict() for c in counts],
        'total': len(projects),
    }


@dashboard_bp.route('/')
@dashboard_bp.route('/api/dashboard')
def dashboard_api():
    """API endpoint for dashboard data (JSON).

    Returns:
        JSON object with per-status counts (label, colour) and total.
    """
    return jsonify(_get_dashboard_data())


@dashboard_bp.route('/api/districts')
def districts_api():
    """Reference data for district/LAC pickers and status pickers.

    Returns:
        JSON object with ordered districts, LACs per district and the
        design statuses.
    """
    return jsonify({
        'districts': list(DISTRICTS),
        'lacsByDistrict': {d: list(LACS_BY_DISTRICT[d]) for d in DISTRICTS},
        'designStatuses': [
            {'code': s.code, 'label': s.label, 'ordinal': s.ordinal, 'color': s.color}
            for s in ALL_DESIGN_STATUSES
        ],
    })
