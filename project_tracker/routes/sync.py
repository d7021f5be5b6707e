"""Cloud sync routes for the Projects Tracker.

Push uploads the local collection (replacing the remote one); pull
replaces the local collection with the remote one. Both need explicit
confirmation and report their outcome as a short-lived status message.
"""
from flask import Blueprint, current_app, jsonify, request

from project_tracker.services.cloud_service import (
    CloudSyncError,
    SyncInProgressError,
    get_cloud_sync,
)
from project_tracker.services.project_service import get_repository

sync_bp = Blueprint('sync', __name__, url_prefix='/sync')


def _message(kind: str, text: str) -> dict:
    """Build a dismissible status message."""
    return {
        'type': kind,
        'text': text,
        'expires_in': current_app.config.get('SYNC_MESSAGE_TIMEOUT', 5),
    }


def _confirmed() -> bool:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    value = data.get('confirm', request.args.get('confirm'))
    if isinstance(value, bool):
        return value
    return str(value).lower() in ('true', '1', 'yes')


@sync_bp.route('/status')
def sync_status():
    """Report whether a push or pull is in flight."""
    return jsonify({'busy': get_cloud_sync().busy})


@sync_bp.route('/push', methods=['POST'])
def push():
    """Upload every local project, replacing the remote collection.

    Request Body (JSON):
        confirm: Must be true.

    Returns:
        200 with a success message, 400 if unconfirmed, 409 if a sync is
        already running, or 502 if the remote store failed.
    """
    if not _confirmed():
        return jsonify({'error': 'Upload must be confirmed'}), 400

    try:
        text = get_cloud_sync().push(get_repository())
    except SyncInProgressError as e:
        return jsonify({'error': str(e)}), 409
    except CloudSyncError as e:
        return jsonify(_message('error', str(e))), 502
    return jsonify(_message('success', text))


@sync_bp.route('/pull', methods=['POST'])
def pull():
    """Replace the local collection with the remote one.

    Request Body (JSON):
        confirm: Must be true.

    Returns:
        200 with a success message, 400 if unconfirmed, 409 if a sync is
        already running, or 502 if the remote store failed (local data
        is left unchanged).
    """
    if not _confirmed():
        return jsonify({'error': 'Download must be confirmed'}), 400

    try:
        count = get_cloud_sync().pull(get_repository())
    except SyncInProgressError as e:
        return jsonify({'error': str(e)}), 409
    except CloudSyncError as e:
        return jsonify(_message('error', str(e))), 502
    return jsonify(_message(
        'success',
        f'Successfully downloaded {count} project(s) from cloud',
    ))
