# ==============================================================================
# REPOSITORIO DE BOLETAS
# ==============================================================================
# Encapsula todo el acceso a tickets.json
# Las boletas se almacenan como lista: [{boleta1}, {boleta2}, ...]
# ==============================================================================

from typing import Any, Dict, List, Optional

from rifa_boletas.models import TicketStatus
from rifa_boletas.repositories.base import ListRepository


class TicketRepository(ListRepository):
    """
    Repositorio de boletas.

    Formato de datos en tickets.json:
    [
        {
            "id": "7c1d...",
            "number": "0007",
            "barcode": "RIFA-0007",
            "status": "available",
            "ownerId": null,
            "saleTimestamp": null,
            "notes": "",
            "createdAt": "2026-01-01T10:00:00+00:00",
            "updatedAt": "2026-01-01T10:00:00+00:00"
        }
    ]

    Este repositorio NO valida transiciones de estado; eso es trabajo de
    SalesService.
    """

    collection = 'tickets'

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def find_by_number(self, number: str) -> Optional[Dict[str, Any]]:
        return self.find_by('number', number)

    def find_by_id(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        return self.find_by('id', ticket_id)

    def filter_by_status(self, status: str) -> List[Dict[str, Any]]:
        return self.find_all_by('status', _status_value(status))

    def filter_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        return self.find_all_by('ownerId', owner_id)

    def search(
        self,
        status: Optional[str] = None,
        owner_id: Optional[str] = None,
        text: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Filtros combinables para el listado de boletas.

        Args:
            status: Estado exacto
            owner_id: ID del cliente dueño
            text: Subcadena del número de boleta
        """
        status = _status_value(status) if status else None
        result = []
        for ticket in self.store.load(self.collection):
            if status and ticket.get('status') != status:
                continue
            if owner_id and ticket.get('ownerId') != owner_id:
                continue
            if text and text not in ticket.get('number', ''):
                continue
            result.append(dict(ticket))
        return result

    def count_by_status(self) -> Dict[str, int]:
        """
        Conteo rápido por estado.

        Returns:
            {total, sold, available, reserved}
        """
        tickets = self.store.load(self.collection)
        return {
            'total': len(tickets),
            'sold': sum(1 for t in tickets if t.get('status') == TicketStatus.SOLD.value),
            'available': sum(1 for t in tickets if t.get('status') == TicketStatus.AVAILABLE.value),
            'reserved': sum(1 for t in tickets if t.get('status') == TicketStatus.RESERVED.value),
        }

    # =========================================================================
    # MUTACIONES
    # =========================================================================

    def update_by_number(self, number: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Aplica `updates` a la boleta con ese número.

        `number`, `id` y `barcode` no se pueden cambiar por esta vía.

        Returns:
            Boleta actualizada o None si no existe
        """
        updates = {k: v for k, v in updates.items() if k not in ('number', 'id', 'barcode')}
        if 'status' in updates:
            updates['status'] = _status_value(updates['status'])
        return self.update_first('number', number, updates)

    def is_empty(self) -> bool:
        return not self.store.load(self.collection)


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, TicketStatus) else str(status)
