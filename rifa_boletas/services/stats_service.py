# ==============================================================================
# SERVICIO DE ESTADÍSTICAS - Panel principal
# ==============================================================================
# Calcula las métricas del dashboard a partir de boletas y clientes.
#
# REGLA PRINCIPAL: solo las boletas "sold" cuentan como venta.
# - reserved ❌ (apartada, no pagada)
# - available ❌
#
# El recaudo estimado usa el precio VIGENTE de la configuración, no el
# precio al momento de cada venta.
# ==============================================================================

from collections import Counter
from typing import Any, Dict, List, Optional

from rifa_boletas.models import TicketStatus
from rifa_boletas.performance_logger import profile_function
from rifa_boletas.repositories.interfaces import (
    IConfigRepository,
    ICustomerRepository,
    ITicketRepository,
)


class StatsService:
    """
    Servicio para el cálculo de métricas de la rifa.

    Responsabilidades:
    - Conteo por estado y porcentaje vendido
    - Top de compradores
    - Ventas por fecha
    - Recaudo estimado
    """

    TOP_BUYERS_LIMIT = 10
    UNKNOWN_CUSTOMER = 'Desconocido'

    def __init__(
        self,
        ticket_repo: ITicketRepository,
        customer_repo: ICustomerRepository,
        config_repo: IConfigRepository
    ):
        self.ticket_repo = ticket_repo
        self.customer_repo = customer_repo
        self.config_repo = config_repo

    @profile_function(name='Calcular métricas del panel')
    def get_dashboard(self) -> Dict[str, Any]:
        """
        Returns:
            {totalTickets, sold, available, reserved, percentSold,
             totalCustomers, topBuyers, salesByDate, estimatedRevenue,
             ticketPrice}
        """
        tickets = self.ticket_repo.get_all()
        customers = self.customer_repo.get_all()
        price = self.config_repo.get_ticket_price()

        total = len(tickets)
        sold_tickets = [t for t in tickets if t.get('status') == TicketStatus.SOLD.value]
        sold = len(sold_tickets)
        reserved = sum(1 for t in tickets if t.get('status') == TicketStatus.RESERVED.value)
        available = sum(1 for t in tickets if t.get('status') == TicketStatus.AVAILABLE.value)

        return {
            'totalTickets': total,
            'sold': sold,
            'available': available,
            'reserved': reserved,
            'percentSold': self._percent(sold, total),
            'totalCustomers': len(customers),
            'topBuyers': self._top_buyers(tickets, customers),
            'salesByDate': self._sales_by_date(sold_tickets),
            'estimatedRevenue': sold * price,
            'ticketPrice': price,
        }

    @staticmethod
    def _percent(part: int, total: int) -> float:
        if total == 0:
            return 0
        return round(part / total * 100, 2)

    def _top_buyers(
        self,
        tickets: List[Dict[str, Any]],
        customers: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """
        Clientes con más boletas a su nombre (vendidas o reservadas).
        En empate se conserva el orden en que aparece su primera boleta
        (Counter.most_common es estable).
        """
        counts = Counter(t['ownerId'] for t in tickets if t.get('ownerId'))
        by_id = {c['id']: c for c in customers}

        result = []
        for customer_id, count in counts.most_common(self.TOP_BUYERS_LIMIT):
            customer: Optional[Dict[str, Any]] = by_id.get(customer_id)
            result.append({
                'customerId': customer_id,
                'fullName': customer['fullName'] if customer else self.UNKNOWN_CUSTOMER,
                'nationalId': customer['nationalId'] if customer else '',
                'count': count,
            })
        return result

    @staticmethod
    def _sales_by_date(sold_tickets: List[Dict[str, Any]]) -> Dict[str, int]:
        """Histograma {YYYY-MM-DD: ventas} según saleTimestamp."""
        histogram: Dict[str, int] = {}
        for ticket in sold_tickets:
            timestamp = ticket.get('saleTimestamp')
            if not timestamp:
                continue
            day = timestamp.split('T')[0]
            histogram[day] = histogram.get(day, 0) + 1
        return histogram
