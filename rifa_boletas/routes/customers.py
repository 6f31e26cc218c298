# ==============================================================================
# RUTAS DE CLIENTES - /api/customers
# ==============================================================================

from flask import Blueprint, request

from rifa_boletas.routes.helpers import get_container, json_body, paginate

customers_bp = Blueprint('customers', __name__)


@customers_bp.route('', methods=['GET'])
def list_customers():
    """?search=&page=&limit="""
    customers = get_container().customer_service.list_with_ticket_counts(request.args.get('search'))
    return paginate(customers)


@customers_bp.route('/<customer_id>', methods=['GET'])
def get_customer(customer_id):
    return {'success': True, 'data': get_container().customer_service.get_with_tickets(customer_id)}


@customers_bp.route('', methods=['POST'])
def create_customer():
    customer = get_container().customer_service.register(json_body())
    return {'success': True, 'data': customer}, 201


@customers_bp.route('/<customer_id>', methods=['PUT'])
def update_customer(customer_id):
    customer = get_container().customer_service.update(customer_id, json_body())
    return {'success': True, 'data': customer}


@customers_bp.route('/<customer_id>', methods=['DELETE'])
def delete_customer(customer_id):
    released = get_container().customer_service.delete(customer_id)
    return {
        'success': True,
        'message': 'Cliente eliminado y boletas liberadas',
        'releasedTickets': released,
    }
