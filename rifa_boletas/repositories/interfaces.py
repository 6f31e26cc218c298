# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que deben cumplir los repositorios. Los servicios dependen de
# estas interfaces, no de las clases JSON concretas:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Cambiar JSON -> PostgreSQL/MongoDB solo requiere nuevas clases
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from rifa_boletas.models import RaffleConfig


@runtime_checkable
class ITicketRepository(Protocol):
    """Boletas: consultas lineales y actualización por número."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def save_all(self, records: List[Dict[str, Any]]) -> None:
        ...

    def find_by_number(self, number: str) -> Optional[Dict[str, Any]]:
        ...

    def find_by_id(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        ...

    def filter_by_status(self, status: str) -> List[Dict[str, Any]]:
        ...

    def filter_by_owner(self, owner_id: str) -> List[Dict[str, Any]]:
        ...

    def search(self, status: Optional[str] = None, owner_id: Optional[str] = None,
               text: Optional[str] = None) -> List[Dict[str, Any]]:
        ...

    def update_by_number(self, number: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...

    def is_empty(self) -> bool:
        ...


@runtime_checkable
class ICustomerRepository(Protocol):
    """Clientes: CRUD y búsqueda libre."""

    def get_all(self) -> List[Dict[str, Any]]:
        ...

    def find_by_id(self, customer_id: str) -> Optional[Dict[str, Any]]:
        ...

    def find_by_national_id(self, national_id: str) -> Optional[Dict[str, Any]]:
        ...

    def create(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def update(self, customer_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    def delete(self, customer_id: str) -> bool:
        ...

    def search(self, query: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IConfigRepository(Protocol):
    """Configuración única de la rifa."""

    def get(self) -> RaffleConfig:
        ...

    def update(self, updates: Dict[str, Any]) -> RaffleConfig:
        ...

    def get_ticket_price(self) -> int:
        ...
