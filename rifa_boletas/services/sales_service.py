# ==============================================================================
# SERVICIO DE VENTAS - Máquina de estados de las boletas
# ==============================================================================
# Centraliza TODOS los cambios de estado de una boleta:
#
#   available ──reservar──> reserved ──vender──> sold
#   available ─────────────vender──────────────> sold
#   reserved | sold ──liberar──> available
#
# Reglas:
# - Una boleta vendida no se puede reservar ni volver a vender.
# - Liberar es incondicional (limpia dueño y fecha de venta).
# - La notificación por correo se ejecuta DESPUÉS de guardar la venta y su
#   resultado viaja como dato auxiliar; nunca revierte la venta.
#
# CONCURRENCIA:
# Un lock por número de boleta protege cada verificar-y-escribir, y un lock
# por cliente protege las operaciones que asignan boletas a ese cliente y su
# eliminación. Orden de adquisición: cliente → boleta.
# ==============================================================================

import threading
from contextlib import contextmanager, nullcontext
from typing import Any, Dict, Iterator, List, Optional

from rifa_boletas.errors import InvalidTransitionError, NotFoundError, ValidationError
from rifa_boletas.models import TicketStatus, utc_now_iso
from rifa_boletas.performance_logger import profile_function
from rifa_boletas.repositories.interfaces import ICustomerRepository, ITicketRepository


NOT_SENT = {'success': False, 'message': 'No enviado'}

MSG_TICKET_NOT_FOUND = 'Boleta no encontrada'
MSG_CUSTOMER_NOT_FOUND = 'Cliente no encontrado'
MSG_ALREADY_SOLD = 'La boleta ya fue vendida'
MSG_BATCH_ALREADY_SOLD = 'Ya vendida'
MSG_INVALID_NUMBER = 'Número inválido'
MSG_INVALID_OWNER = 'ownerId debe ser un texto'


class KeyedLocks:
    """
    Un RLock por clave, creado bajo demanda.

    Cada entrada lleva un contador de hilos que la usan (dueño o en espera);
    al llegar a cero se elimina, así el mapa solo contiene claves en uso.
    """

    def __init__(self):
        self._locks: Dict[str, List[Any]] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.RLock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


class SalesService:
    """
    Servicio para el ciclo de vida de las boletas.

    Responsabilidades:
    - Reservar, vender, vender en lote y liberar boletas
    - Verificar existencia de boleta y cliente antes de cada cambio
    - Disparar la notificación post-venta (hook `notifier`)
    - Consultas de boletas con su dueño embebido
    """

    def __init__(
        self,
        ticket_repo: ITicketRepository,
        customer_repo: ICustomerRepository,
        notifier=None
    ):
        """
        Args:
            ticket_repo: Repositorio de boletas
            customer_repo: Repositorio de clientes
            notifier: Objeto con notify_sale(tickets, customer, base_url) -> dict.
                      None desactiva las notificaciones.
        """
        self.ticket_repo = ticket_repo
        self.customer_repo = customer_repo
        self.notifier = notifier
        self._locks = KeyedLocks()

    # =========================================================================
    # LOCKS
    # =========================================================================

    def ticket_lock(self, number: str):
        return self._locks.hold(f'boleta:{number}')

    def customer_lock(self, customer_id: Optional[str]):
        if not customer_id:
            return nullcontext()
        return self._locks.hold(f'cliente:{customer_id}')

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_ticket(self, number: str) -> Dict[str, Any]:
        ticket = self.ticket_repo.find_by_number(number)
        if not ticket:
            raise NotFoundError(MSG_TICKET_NOT_FOUND)
        return ticket

    def get_ticket_with_owner(self, number: str) -> Dict[str, Any]:
        """Boleta con el cliente dueño embebido en 'owner' (o None)."""
        ticket = self.get_ticket(number)
        owner = None
        if ticket.get('ownerId'):
            owner = self.customer_repo.find_by_id(ticket['ownerId'])
        return {**ticket, 'owner': owner}

    def list_tickets(
        self,
        status: Optional[str] = None,
        owner_id: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        if status and status not in TicketStatus.values():
            raise ValidationError(f'Estado inválido: {status}')
        return self.ticket_repo.search(status=status, owner_id=owner_id, text=search)

    def count_by_status(self) -> Dict[str, int]:
        return self.ticket_repo.count_by_status()

    # =========================================================================
    # TRANSICIONES
    # =========================================================================

    @profile_function(name='Reservar boleta')
    def reserve(self, number: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Aparta una boleta. Reservar una ya reservada sobrescribe el dueño.

        Raises:
            ValidationError: ownerId no es texto
            NotFoundError: La boleta no existe
            InvalidTransitionError: La boleta ya fue vendida
        """
        _check_owner_id(owner_id)
        with self.customer_lock(owner_id), self.ticket_lock(number):
            ticket = self.get_ticket(number)
            if ticket.get('status') == TicketStatus.SOLD.value:
                raise InvalidTransitionError(MSG_ALREADY_SOLD)

            return self.ticket_repo.update_by_number(number, {
                'status': TicketStatus.RESERVED.value,
                'ownerId': owner_id or None,
            })

    @profile_function(name='Vender boleta')
    def sell(self, number: str, owner_id: str, base_url: str = '') -> Dict[str, Any]:
        """
        Vende una boleta a un cliente. Única operación que representa una
        compra completada.

        Returns:
            {'ticket': boleta actualizada, 'owner': cliente, 'notification': resultado}

        Raises:
            ValidationError: ownerId no es texto
            NotFoundError: La boleta o el cliente no existen
            InvalidTransitionError: La boleta ya fue vendida
        """
        _check_owner_id(owner_id)
        with self.customer_lock(owner_id), self.ticket_lock(number):
            ticket = self.get_ticket(number)
            if ticket.get('status') == TicketStatus.SOLD.value:
                raise InvalidTransitionError(MSG_ALREADY_SOLD)

            customer = self.customer_repo.find_by_id(owner_id) if owner_id else None
            if not customer:
                raise NotFoundError(MSG_CUSTOMER_NOT_FOUND)

            updated = self.ticket_repo.update_by_number(number, self._sold_fields(owner_id))

        # Post-commit: la venta ya está guardada
        notification = self._notify([updated], customer, base_url)
        return {'ticket': updated, 'owner': customer, 'notification': notification}

    @profile_function(name='Vender lote de boletas')
    def sell_batch(self, numbers: Any, owner_id: str, base_url: str = '') -> Dict[str, Any]:
        """
        Vende varias boletas al mismo cliente.

        Cada número se procesa por separado: los que no existen o ya están
        vendidos van a 'errores' y el resto del lote continúa. Una venta
        parcial es un resultado normal.

        Returns:
            {'vendidas': [...], 'errores': [{'number', 'error'}], 'notification': {...}}

        Raises:
            ValidationError: `numbers` vacío o no es lista
                             u `ownerId` no es texto
            NotFoundError: El cliente no existe
        """
        if not isinstance(numbers, list) or not numbers:
            raise ValidationError('Debe enviar un array de números de boletas')
        _check_owner_id(owner_id)

        sold: List[Dict[str, Any]] = []
        errors: List[Dict[str, str]] = []

        with self.customer_lock(owner_id):
            customer = self.customer_repo.find_by_id(owner_id) if owner_id else None
            if not customer:
                raise NotFoundError(MSG_CUSTOMER_NOT_FOUND)

            for number in numbers:
                if not isinstance(number, str) or not number:
                    errors.append({'number': str(number), 'error': MSG_INVALID_NUMBER})
                    continue
                with self.ticket_lock(number):
                    ticket = self.ticket_repo.find_by_number(number)
                    if not ticket:
                        errors.append({'number': number, 'error': MSG_TICKET_NOT_FOUND})
                        continue
                    if ticket.get('status') == TicketStatus.SOLD.value:
                        errors.append({'number': number, 'error': MSG_BATCH_ALREADY_SOLD})
                        continue
                    sold.append(self.ticket_repo.update_by_number(number, self._sold_fields(owner_id)))

        notification = self._notify(sold, customer, base_url)
        return {'vendidas': sold, 'errores': errors, 'notification': notification}

    @profile_function(name='Liberar boleta')
    def release(self, number: str) -> Dict[str, Any]:
        """
        Devuelve la boleta a 'available' sin importar su estado previo.

        Raises:
            NotFoundError: La boleta no existe
        """
        with self.ticket_lock(number):
            self.get_ticket(number)
            return self.ticket_repo.update_by_number(number, self._available_fields())

    def release_owner_tickets(self, owner_id: str) -> List[Dict[str, Any]]:
        """
        Libera todas las boletas de un cliente (usado al eliminarlo).

        Returns:
            Boletas liberadas
        """
        released = []
        with self.customer_lock(owner_id):
            for ticket in self.ticket_repo.filter_by_owner(owner_id):
                number = ticket['number']
                with self.ticket_lock(number):
                    current = self.ticket_repo.find_by_number(number)
                    if not current or current.get('ownerId') != owner_id:
                        continue
                    released.append(self.ticket_repo.update_by_number(number, self._available_fields()))
        return released

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _sold_fields(owner_id: str) -> Dict[str, Any]:
        return {
            'status': TicketStatus.SOLD.value,
            'ownerId': owner_id,
            'saleTimestamp': utc_now_iso(),
        }

    @staticmethod
    def _available_fields() -> Dict[str, Any]:
        return {
            'status': TicketStatus.AVAILABLE.value,
            'ownerId': None,
            'saleTimestamp': None,
        }

    def _notify(self, tickets: List[Dict[str, Any]], customer: Dict[str, Any], base_url: str) -> Dict[str, Any]:
        """
        Ejecuta el hook post-venta. Nunca lanza: la venta ya está guardada.
        """
        if self.notifier is None or not tickets or not customer.get('email'):
            return dict(NOT_SENT)
        try:
            return self.notifier.notify_sale(tickets, customer, base_url)
        except Exception as e:
            print(f"[EMAIL] ❌ Error notificando venta a {customer.get('email')}: {e}")
            return {'success': False, 'message': f'Error enviando correo: {e}'}


def _check_owner_id(owner_id: Any) -> None:
    """ownerId llega del body JSON: solo se acepta texto o null."""
    if owner_id is not None and not isinstance(owner_id, str):
        raise ValidationError(MSG_INVALID_OWNER)
