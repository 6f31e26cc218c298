# ==============================================================================
# REPOSITORIO DE CLIENTES
# ==============================================================================
# Encapsula todo el acceso a customers.json
# ==============================================================================

from typing import Any, Dict, List, Optional

from rifa_boletas.models import utc_now_iso
from rifa_boletas.repositories.base import ListRepository


class CustomerRepository(ListRepository):
    """
    Repositorio de clientes.

    Formato de datos en customers.json:
    [
        {
            "id": "uuid",
            "fullName": "Ana Gómez",
            "nationalId": "1037654321",
            "phone": "3001234567",
            "email": "ana@example.com",
            "address": "Cra 10 # 20-30",
            "createdAt": "...",
            "updatedAt": "..."
        }
    ]

    La unicidad de la cédula la garantiza CustomerService, no este repositorio.
    """

    collection = 'customers'

    def find_by_id(self, customer_id: str) -> Optional[Dict[str, Any]]:
        return self.find_by('id', customer_id)

    def find_by_national_id(self, national_id: str) -> Optional[Dict[str, Any]]:
        return self.find_by('nationalId', national_id)

    def create(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        """
        Agrega un cliente sellando createdAt/updatedAt.

        Args:
            customer: Datos del cliente (debe incluir 'id')

        Returns:
            Cliente guardado
        """
        now = utc_now_iso()
        record = {**customer, 'createdAt': now, 'updatedAt': now}
        return self.append(record)

    def update(self, customer_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Retorna el cliente actualizado o None si no existe."""
        updates = {k: v for k, v in updates.items() if k not in ('id', 'createdAt')}
        return self.update_first('id', customer_id, updates)

    def delete(self, customer_id: str) -> bool:
        return self.remove_first('id', customer_id)

    def search(self, query: str) -> List[Dict[str, Any]]:
        """
        Búsqueda libre por nombre, cédula, teléfono o email.
        Nombre y email sin distinguir mayúsculas.
        """
        q = (query or '').lower()
        result = []
        for c in self.store.load(self.collection):
            if (
                q in (c.get('fullName') or '').lower()
                or q in (c.get('nationalId') or '')
                or q in (c.get('phone') or '')
                or q in (c.get('email') or '').lower()
            ):
                result.append(dict(c))
        return result
