"""Health check blueprint."""

from flask import Blueprint

from rifa_boletas.models import utc_now_iso

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    return {'status': 'ok', 'timestamp': utc_now_iso()}
