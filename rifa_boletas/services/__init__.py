# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Los servicios dependen de las interfaces de repositorios, no del JSON.
# Las rutas solo orquestan request → servicio → respuesta.
#
# ESTRUCTURA:
# ├── sales_service.py         → Reservar / vender / liberar (máquina de estados)
# ├── customer_service.py      → Registro y eliminación de clientes
# ├── stats_service.py         → Métricas del panel
# ├── config_service.py        → Configuración de la rifa
# ├── email_service.py         → Correo de confirmación (SMTP + Jinja2)
# ├── notification_service.py  → Hook post-venta con timeout
# ├── qr_service.py            → Códigos QR
# └── provisioning_service.py  → Generación inicial de boletas
# ==============================================================================

from rifa_boletas.services.sales_service import SalesService
from rifa_boletas.services.customer_service import CustomerService
from rifa_boletas.services.stats_service import StatsService
from rifa_boletas.services.config_service import ConfigService
from rifa_boletas.services.email_service import EmailService
from rifa_boletas.services.notification_service import NotificationService
from rifa_boletas.services.provisioning_service import ProvisioningService

__all__ = [
    'SalesService',
    'CustomerService',
    'StatsService',
    'ConfigService',
    'EmailService',
    'NotificationService',
    'ProvisioningService',
]
