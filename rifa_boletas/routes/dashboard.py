# ==============================================================================
# RUTAS DEL PANEL - /api/dashboard
# ==============================================================================

from flask import Blueprint, request

from rifa_boletas.routes.helpers import get_container

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('', methods=['GET'])
def dashboard():
    return {'success': True, 'data': get_container().stats_service.get_dashboard()}


@dashboard_bp.route('/config', methods=['GET'])
def get_config():
    return {'success': True, 'data': get_container().config_service.get_config()}


@dashboard_bp.route('/config', methods=['PUT'])
def update_config():
    config = get_container().config_service.update_config(request.get_json(silent=True))
    return {'success': True, 'data': config}


@dashboard_bp.route('/test-email', methods=['POST'])
def test_email():
    """Prueba la conexión SMTP con la configuración guardada."""
    return get_container().email_service.test_connection()
