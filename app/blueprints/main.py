"""Main blueprint with health check endpoints."""
from flask import Blueprint, current_app, jsonify

from app.services.storage_service import get_storage

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """
    Health check endpoint that validates the storage layer.

    Returns:
        200: Healthy (storage hydrated)
        500: Unhealthy (storage not initialized)
    """
    storage = get_storage()
    if not storage.is_initialized:
        return jsonify({
            'status': 'unhealthy',
            'storage': 'not_initialized',
        }), 500

    return jsonify({
        'status': 'healthy',
        'storage': current_app.config.get('STORAGE_BACKEND', 'sql'),
        'keys': len(storage.get_all_keys()),
    }), 200
