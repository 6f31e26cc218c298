# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (actualmente JSON).
# Cuando se migre a una base de datos, solo hay que modificar esta capa.
#
# ESTRUCTURA:
# ├── interfaces.py           → Protocolos (contratos)
# ├── base.py                 → CollectionStore + ListRepository
# ├── ticket_repository.py    → Acceso a tickets.json
# ├── customer_repository.py  → Acceso a customers.json
# └── config_repository.py    → Acceso a config.json
# ==============================================================================

from rifa_boletas.repositories.interfaces import (
    ITicketRepository,
    ICustomerRepository,
    IConfigRepository,
)

from rifa_boletas.repositories.base import CollectionStore, ListRepository
from rifa_boletas.repositories.ticket_repository import TicketRepository
from rifa_boletas.repositories.customer_repository import CustomerRepository
from rifa_boletas.repositories.config_repository import ConfigRepository

__all__ = [
    # Interfaces
    'ITicketRepository',
    'ICustomerRepository',
    'IConfigRepository',

    # Base
    'CollectionStore',
    'ListRepository',

    # Implementaciones JSON
    'TicketRepository',
    'CustomerRepository',
    'ConfigRepository',
]
