# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Cada excepción sabe qué código HTTP le corresponde. Las rutas no deciden
# códigos: el manejador registrado en main.py traduce la excepción a JSON.
#
#   NotFoundError           -> 404  (boleta, cliente o cédula inexistente)
#   InvalidTransitionError  -> 400  (ej: vender una boleta ya vendida)
#   DuplicateKeyError       -> 400  (cédula repetida)
#   ValidationError         -> 400  (campos obligatorios, parámetros inválidos)
#   StorageError            -> 500  (lectura/escritura/parseo de JSON)
# ==============================================================================

from typing import Any, Dict


class RifaError(Exception):
    """Excepción base de la aplicación."""

    status_code = 500

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta de error."""
        body: Dict[str, Any] = {'success': False, 'error': self.message}
        if self.data is not None:
            body['data'] = self.data
        return body


class NotFoundError(RifaError):
    status_code = 404


class InvalidTransitionError(RifaError):
    """Cambio de estado no permitido para una boleta."""
    status_code = 400


class DuplicateKeyError(RifaError):
    """
    Colisión de clave de negocio.

    `data` lleva el registro existente para que el cliente HTTP pueda
    mostrarlo en lugar de crear un duplicado.
    """
    status_code = 400


class ValidationError(RifaError):
    status_code = 400


class StorageError(RifaError):
    status_code = 500
