# ==============================================================================
# SERVICIO DE CONFIGURACIÓN DE LA RIFA
# ==============================================================================
# Lectura y actualización parcial de config.json desde el panel.
# ==============================================================================

from typing import Any, Dict

from rifa_boletas.errors import ValidationError
from rifa_boletas.repositories.interfaces import IConfigRepository


class ConfigService:

    def __init__(self, config_repo: IConfigRepository):
        self.config_repo = config_repo

    def get_config(self) -> Dict[str, Any]:
        return self.config_repo.get().to_dict()

    def update_config(self, data: Any) -> Dict[str, Any]:
        """
        Fusiona solo las claves enviadas con la configuración vigente.

        Raises:
            ValidationError: Cuerpo no es un objeto o un campo numérico es inválido
        """
        if not isinstance(data, dict):
            raise ValidationError('La configuración debe ser un objeto JSON')

        updated = self.config_repo.update(data)
        print(f"[RIFA] Configuración actualizada: {', '.join(sorted(data)) or '(sin cambios)'}")
        return updated.to_dict()

    def get_public_config(self) -> Dict[str, Any]:
        """Datos de la rifa sin credenciales SMTP (impresión)."""
        return self.config_repo.get().public_dict()
