"""Project routes for the Projects Tracker API.

This module provides RESTful API endpoints for project CRUD operations
and the filtered/sorted/grouped list view.
Routes call the service layer; they handle HTTP concerns only.
"""
from flask import Blueprint, jsonify, request

from project_tracker.services import project_service, query_service
from project_tracker.services.project_service import get_repository

projects_bp = Blueprint('projects', __name__)


def _parse_bool(value, default: bool = False) -> bool:
    """Parse a boolean query parameter or JSON value.

    Args:
        value: String (or bool) value to parse.
        default: Default value if value is missing.

    Returns:
        Boolean value.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in ('true', '1', 'yes')


# ============================================================================
# Project CRUD Routes
# ============================================================================

@projects_bp.route('/projects', methods=['GET'])
def get_projects():
    """Get all projects with optional filtering, sorting and grouping.

    Query Parameters:
        designStatus: Exact design status (code, label or name)
        district: Exact district
        lac: Exact LAC
        asDateFrom / asDateTo: Inclusive AS date range (YYYY-MM-DD)
        arAreaMin / arAreaMax: Inclusive numeric range on total area
        sortBy: projectName, district, lac, designStatus, asDate,
                arDate or updatedAt (default: projectName)
        sortOrder: 'asc' or 'desc' (default: asc)
        groupBy: none, designStatus, district or lac (default: none)

    Returns:
        JSON with the matching projects, their groups and counts.
    """
    try:
        filters = query_service.FilterConfig.from_mapping(request.args)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    group_by = request.args.get('groupBy') or 'none'
    if group_by not in query_service.GROUP_BY_OPTIONS:
        return jsonify({'error': f"Invalid groupBy: {group_by}"}), 400

    repository = get_repository()
    groups = query_service.query_projects(
        repository.all(),
        filters,
        sort_by=request.args.get('sortBy') or query_service.DEFAULT_SORT_KEY,
        sort_order=request.args.get('sortOrder') or 'asc',
        group_by=group_by,
    )
    projects = [p for members in groups.values() for p in members]

    return jsonify({
        'data': [p.to_dict() for p in projects],
        'count': len(projects),
        'total': len(repository),
        'groups': [
            {'name': name, 'count': len(members), 'ids': [p.id for p in members]}
            for name, members in groups.items()
        ],
    })


@projects_bp.route('/projects/<id>', methods=['GET'])
def get_project(id: str):
    """Get a single project by ID.

    Args:
        id: Project ID.

    Returns:
        JSON object with project data, or 404 if not found.
    """
    project = get_repository().get(id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify({'data': project.to_dict()})


@projects_bp.route('/projects', methods=['POST'])
def create_project():
    """Create a new project.

    Request Body (JSON):
        Required: projectName, district, lac
        Optional: asDetails, srDetails, arDetails, contacts,
                  designStatus (defaults to 01 Tentative Design Ongoing),
                  history

    Returns:
        201 with created project data, or 400 on validation error.
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    try:
        fields = project_service.parse_project_fields(data)
        project_service.validate_project_input(fields)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    project = get_repository().add(fields)
    return jsonify({'data': project.to_dict()}), 201


@projects_bp.route('/projects/<id>', methods=['PUT'])
def update_project(id: str):
    """Update an existing project.

    Changing the district clears the LAC unless the LAC belongs to the
    new district.

    Args:
        id: Project ID.

    Request Body (JSON):
        Any project fields to update.

    Returns:
        200 with updated project data, 404 if not found, or 400 on error.
    """
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    repository = get_repository()
    project = repository.get(id)
    if not project:
        return jsonify({'error': 'Project not found'}), 404

    try:
        fields = project_service.parse_project_fields(data)
        fields = project_service.prepare_update(project, fields)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    project = repository.update(id, fields)
    return jsonify({'data': project.to_dict()})


@projects_bp.route('/projects/<id>', methods=['DELETE'])
def delete_project(id: str):
    """Delete a project permanently.

    Requires explicit confirmation via ?confirm=true (or a JSON body
    with "confirm": true) before anything is removed.

    Args:
        id: Project ID.

    Returns:
        200 with success message, 400 if unconfirmed, or 404 if not found.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    confirmed = _parse_bool(request.args.get('confirm', body.get('confirm')))
    if not confirmed:
        return jsonify({'error': 'Deletion must be confirmed'}), 400

    success = get_repository().delete(id)
    if not success:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify({'message': 'Project deleted successfully'})


# ============================================================================
# History Route
# ============================================================================

@projects_bp.route('/projects/<id>/history', methods=['PUT'])
def replace_history(id: str):
    """Replace a project's history.

    Rows with a blank event and no date are dropped before saving.

    Args:
        id: Project ID.

    Request Body (JSON):
        history: List of {id, event, date} entries.

    Returns:
        200 with updated project data, 404 if not found, or 400 on error.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('history'), list):
        return jsonify({'error': 'Request body must be JSON with a history list'}), 400

    try:
        history = project_service.clean_history(data['history'])
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    project = get_repository().update_history(id, history)
    if not project:
        return jsonify({'error': 'Project not found'}), 404
    return jsonify({'data': project.to_dict()})
