# ==============================================================================
# SERVICIO DE CLIENTES
# ==============================================================================
# Registro, edición, consulta y eliminación de compradores.
#
# REGLAS:
# - La cédula (nationalId) es única: registrar una repetida devuelve el
#   cliente existente junto con el error.
# - La cédula NO se edita; solo nombre, teléfono, email y dirección.
# - Eliminar un cliente libera primero todas sus boletas.
# ==============================================================================

import threading
from typing import Any, Dict, List, Optional

from rifa_boletas.errors import DuplicateKeyError, NotFoundError, ValidationError
from rifa_boletas.models import Customer
from rifa_boletas.repositories.interfaces import ICustomerRepository, ITicketRepository
from rifa_boletas.services.sales_service import MSG_CUSTOMER_NOT_FOUND, SalesService


class CustomerService:
    """
    Servicio para gestión de clientes.

    Depende de SalesService para liberar las boletas de un cliente eliminado,
    así la liberación pasa por los mismos locks que una venta.
    """

    # Campos que se pueden editar después del registro
    EDITABLE_FIELDS = ('fullName', 'phone', 'email', 'address')

    def __init__(
        self,
        customer_repo: ICustomerRepository,
        ticket_repo: ITicketRepository,
        sales_service: SalesService
    ):
        self.customer_repo = customer_repo
        self.ticket_repo = ticket_repo
        self.sales_service = sales_service
        self._register_lock = threading.Lock()

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def list_with_ticket_counts(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Clientes (filtrados por `search`) con totalTickets y ticketNumbers.
        """
        if search:
            customers = self.customer_repo.search(search)
        else:
            customers = self.customer_repo.get_all()

        numbers_by_owner: Dict[str, List[str]] = {}
        for ticket in self.ticket_repo.get_all():
            owner_id = ticket.get('ownerId')
            if owner_id:
                numbers_by_owner.setdefault(owner_id, []).append(ticket['number'])

        result = []
        for customer in customers:
            numbers = numbers_by_owner.get(customer['id'], [])
            result.append({**customer, 'totalTickets': len(numbers), 'ticketNumbers': numbers})
        return result

    def get_with_tickets(self, customer_id: str) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: El cliente no existe
        """
        customer = self.customer_repo.find_by_id(customer_id)
        if not customer:
            raise NotFoundError(MSG_CUSTOMER_NOT_FOUND)
        tickets = self.ticket_repo.filter_by_owner(customer_id)
        return {**customer, 'tickets': tickets, 'totalTickets': len(tickets)}

    # =========================================================================
    # MUTACIONES
    # =========================================================================

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registra un cliente nuevo.

        Args:
            data: {fullName, nationalId, phone?, email?, address?}

        Raises:
            ValidationError: Falta nombre o cédula
            DuplicateKeyError: La cédula ya existe (data = cliente existente)
        """
        full_name = _clean(data.get('fullName'))
        national_id = _clean(data.get('nationalId'))
        if not full_name or not national_id:
            raise ValidationError('Nombre completo y cédula son requeridos')

        with self._register_lock:
            existing = self.customer_repo.find_by_national_id(national_id)
            if existing:
                raise DuplicateKeyError('Ya existe un cliente con esa cédula', data=existing)

            customer = Customer(
                full_name=full_name,
                national_id=national_id,
                phone=_clean(data.get('phone')),
                email=_clean(data.get('email')),
                address=_clean(data.get('address')),
            )
            created = self.customer_repo.create(customer.to_dict())

        print(f"[RIFA] Cliente registrado: {created['fullName']} ({created['nationalId']})")
        return created

    def update(self, customer_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Edita solo los campos enviados entre EDITABLE_FIELDS.

        Raises:
            ValidationError: fullName enviado vacío
            NotFoundError: El cliente no existe
        """
        updates = {}
        for key in self.EDITABLE_FIELDS:
            if key in data:
                updates[key] = _clean(data[key])

        if 'fullName' in updates and not updates['fullName']:
            raise ValidationError('El nombre completo no puede estar vacío')

        updated = self.customer_repo.update(customer_id, updates)
        if not updated:
            raise NotFoundError(MSG_CUSTOMER_NOT_FOUND)
        return updated

    def delete(self, customer_id: str) -> int:
        """
        Libera las boletas del cliente y lo elimina.

        Returns:
            Cantidad de boletas liberadas

        Raises:
            NotFoundError: El cliente no existe
        """
        with self.sales_service.customer_lock(customer_id):
            if not self.customer_repo.find_by_id(customer_id):
                raise NotFoundError(MSG_CUSTOMER_NOT_FOUND)

            released = self.sales_service.release_owner_tickets(customer_id)
            self.customer_repo.delete(customer_id)

        print(f"[RIFA] Cliente {customer_id} eliminado, {len(released)} boleta(s) liberada(s)")
        return len(released)


def _clean(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()
