# ==============================================================================
# SERVICIO DE NOTIFICACIONES - Hook post-venta
# ==============================================================================
# Ejecuta el envío de correo en un pool de hilos y espera como máximo
# RIFA_NOTIFY_TIMEOUT segundos. Si se vence el plazo, el correo sigue su
# curso en segundo plano y la venta responde de inmediato con
# {'success': False, 'message': ...}.
#
# notify_sale() NUNCA lanza: la venta ya quedó guardada cuando se llama.
# ==============================================================================

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Dict, List

from rifa_boletas.services.email_service import EmailService


class NotificationService:
    """Notificador de ventas usado por SalesService."""

    MAX_WORKERS = 4

    def __init__(self, email_service: EmailService, timeout: float = 20.0):
        self.email_service = email_service
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=self.MAX_WORKERS, thread_name_prefix='rifa-email')

    def notify_sale(
        self,
        tickets: List[Dict[str, Any]],
        customer: Dict[str, Any],
        base_url: str
    ) -> Dict[str, Any]:
        """
        Envía la confirmación de compra.

        Returns:
            {'success': bool, 'message': str, 'messageId'?: str}
        """
        try:
            future = self._executor.submit(self.email_service.send_tickets, tickets, customer, base_url)
        except RuntimeError as e:
            # Pool cerrado (apagado de la app)
            return {'success': False, 'message': f'Notificaciones no disponibles: {e}'}

        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout:
            print(f"[EMAIL] ⚠️ Timeout de {self.timeout:.0f}s enviando a {customer.get('email')}")
            return {
                'success': False,
                'message': f'Tiempo de espera agotado ({self.timeout:.0f}s) enviando el correo',
            }
        except Exception as e:
            print(f"[EMAIL] ❌ Error inesperado enviando a {customer.get('email')}: {e}")
            return {'success': False, 'message': f'Error enviando correo: {e}'}

    def close(self) -> None:
        """Detiene el pool sin esperar correos pendientes."""
        self._executor.shutdown(wait=False)
