# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses:
#   - Ticket (boleta) con su estado TicketStatus
#   - Customer (cliente)
#   - RaffleConfig (configuración de la rifa, con merge explícito de defaults)
# ==============================================================================

from .entities import (
    Ticket,
    TicketStatus,
    Customer,
    RaffleConfig,
    BARCODE_PREFIX,
    MIN_NUMBER_WIDTH,
    barcode_for,
    format_ticket_number,
    new_id,
    utc_now_iso,
)

__all__ = [
    'Ticket',
    'TicketStatus',
    'Customer',
    'RaffleConfig',
    'BARCODE_PREFIX',
    'MIN_NUMBER_WIDTH',
    'barcode_for',
    'format_ticket_number',
    'new_id',
    'utc_now_iso',
]
