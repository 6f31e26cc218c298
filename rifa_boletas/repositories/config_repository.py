# ==============================================================================
# REPOSITORIO DE CONFIGURACIÓN DE LA RIFA
# ==============================================================================
# Encapsula todo el acceso a config.json (documento único).
# Cada lectura fusiona los valores por defecto con lo guardado.
# ==============================================================================

from typing import Any, Dict

from rifa_boletas.errors import StorageError, ValidationError
from rifa_boletas.models import RaffleConfig
from rifa_boletas.repositories.base import CollectionStore


class ConfigRepository:
    """
    Repositorio para la configuración de la rifa.

    Formato de datos en config.json:
    {
        "nombreRifa": "Rifas El Gran Camión",
        "precioBoleta": 120000,
        "smtpHost": "smtp.gmail.com",
        ...
    }
    """

    document = 'config'

    def __init__(self, store: CollectionStore):
        self.store = store

    def get(self) -> RaffleConfig:
        """
        Configuración vigente: defaults + config.json.

        Raises:
            StorageError: Si config.json tiene valores no convertibles
        """
        saved = self.store.load_document(self.document, lambda: RaffleConfig().to_dict())
        try:
            return RaffleConfig.from_dict(saved)
        except ValueError as e:
            raise StorageError(f'config.json inválido: {e}')

    def update(self, updates: Dict[str, Any]) -> RaffleConfig:
        """
        Fusiona solo los campos enviados y guarda.

        Args:
            updates: Claves persistidas (nombreRifa, precioBoleta, ...)

        Raises:
            ValidationError: Si un campo numérico no es válido
        """
        with self.store.lock:
            current = self.get()
            try:
                merged = current.merge(updates)
            except ValueError as e:
                raise ValidationError(str(e))
            self.store.save_document(self.document, merged.to_dict())
        return merged

    def get_ticket_price(self) -> int:
        return self.get().precio_boleta or 0
