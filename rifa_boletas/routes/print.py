# ==============================================================================
# RUTAS DE IMPRESIÓN - /api/print
# ==============================================================================
# Datos para imprimir una boleta: QR (data URL) + código de barras.
# ==============================================================================

from flask import Blueprint

from rifa_boletas.routes.helpers import get_container, public_base_url
from rifa_boletas.services.qr_service import qr_data_url, ticket_url

print_bp = Blueprint('print', __name__)


@print_bp.route('/<number>', methods=['GET'])
def print_ticket(number):
    container = get_container()
    ticket = container.sales_service.get_ticket_with_owner(number)
    owner = ticket.pop('owner')
    url = ticket_url(public_base_url(), ticket['number'])

    return {
        'success': True,
        'data': {
            'ticket': ticket,
            'owner': owner,
            'config': container.config_service.get_public_config(),
            'qrUrl': url,
            'qrDataUrl': qr_data_url(url),
            'barcode': ticket['barcode'],
        },
    }
