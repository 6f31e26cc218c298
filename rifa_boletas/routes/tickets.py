# ==============================================================================
# RUTAS DE BOLETAS - /api/tickets
# ==============================================================================

from flask import Blueprint, request

from rifa_boletas.routes.helpers import get_container, json_body, paginate, public_base_url

tickets_bp = Blueprint('tickets', __name__)


@tickets_bp.route('', methods=['GET'])
def list_tickets():
    """?status=&search=&ownerId=&page=&limit="""
    tickets = get_container().sales_service.list_tickets(
        status=request.args.get('status') or None,
        owner_id=request.args.get('ownerId') or None,
        search=request.args.get('search') or None,
    )
    return paginate(tickets)


@tickets_bp.route('/stats', methods=['GET'])
def ticket_stats():
    return {'success': True, 'data': get_container().sales_service.count_by_status()}


@tickets_bp.route('/<number>', methods=['GET'])
def get_ticket(number):
    return {'success': True, 'data': get_container().sales_service.get_ticket_with_owner(number)}


@tickets_bp.route('/<number>/sell', methods=['PUT'])
def sell_ticket(number):
    data = json_body()
    result = get_container().sales_service.sell(number, data.get('ownerId'), public_base_url())
    return {
        'success': True,
        'data': {**result['ticket'], 'owner': result['owner']},
        'notification': result['notification'],
    }


@tickets_bp.route('/<number>/reserve', methods=['PUT'])
def reserve_ticket(number):
    data = json_body()
    ticket = get_container().sales_service.reserve(number, data.get('ownerId'))
    return {'success': True, 'data': ticket}


@tickets_bp.route('/<number>/release', methods=['PUT'])
def release_ticket(number):
    return {'success': True, 'data': get_container().sales_service.release(number)}


@tickets_bp.route('/sell-batch', methods=['POST'])
def sell_batch():
    """Body: {numbers: [...], ownerId}"""
    data = json_body()
    result = get_container().sales_service.sell_batch(
        data.get('numbers'),
        data.get('ownerId'),
        public_base_url()
    )
    return {
        'success': True,
        'data': {'vendidas': result['vendidas'], 'errores': result['errores']},
        'notification': result['notification'],
    }
