# ==============================================================================
# SERVICIO DE APROVISIONAMIENTO - Generación inicial de boletas
# ==============================================================================
# Crea el talonario completo (0000..9999 por defecto) en estado available.
# Se ejecuta una sola vez antes de abrir la venta:
#
#   flask --app wsgi generar-boletas --total 10000
# ==============================================================================

from typing import Any, Dict, List

from rifa_boletas.errors import ValidationError
from rifa_boletas.models import MIN_NUMBER_WIDTH, Ticket, format_ticket_number, utc_now_iso
from rifa_boletas.repositories.interfaces import ITicketRepository


class ProvisioningService:
    """Genera el conjunto inicial de boletas."""

    PROGRESS_EVERY = 1000

    def __init__(self, ticket_repo: ITicketRepository):
        self.ticket_repo = ticket_repo

    @staticmethod
    def number_width(total: int) -> int:
        """Ancho de número: al menos 4 dígitos, más si total lo requiere."""
        return max(MIN_NUMBER_WIDTH, len(str(max(total - 1, 0))))

    def generate_tickets(self, total: int, force: bool = False) -> Dict[str, Any]:
        """
        Crea `total` boletas numeradas 0..total-1.

        Args:
            total: Cantidad de boletas
            force: Reemplaza las boletas existentes (¡borra ventas!)

        Returns:
            {'total': int, 'first': str, 'last': str}

        Raises:
            ValidationError: total inválido o ya existen boletas sin force
        """
        if isinstance(total, bool) or not isinstance(total, int) or total <= 0:
            raise ValidationError('El total de boletas debe ser un entero positivo')

        if not force and not self.ticket_repo.is_empty():
            raise ValidationError('Ya existen boletas. Use force para regenerarlas')

        width = self.number_width(total)
        print(f"[BOLETAS] 🎫 Generando {total} boletas ({format_ticket_number(0, width)}-"
              f"{format_ticket_number(total - 1, width)})...")

        now = utc_now_iso()
        tickets: List[Dict[str, Any]] = []
        for i in range(total):
            ticket = Ticket(number=format_ticket_number(i, width), created_at=now, updated_at=now)
            tickets.append(ticket.to_dict())
            if i > 0 and i % self.PROGRESS_EVERY == 0:
                print(f"[BOLETAS]   ✅ {i} boletas generadas...")

        self.ticket_repo.save_all(tickets)
        print(f"[BOLETAS] 🎉 ¡{total} boletas generadas exitosamente!")

        return {'total': total, 'first': tickets[0]['number'], 'last': tickets[-1]['number']}
