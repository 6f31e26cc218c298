# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se construyen el store, los repositorios y los servicios.
# Facilita:
#   - Inyección de dependencias
#   - Testing (cada test crea su contenedor sobre una carpeta temporal)
#   - Migración (cambiar repos JSON por otra persistencia sin tocar servicios)
#
# El contenedor es DUEÑO del CollectionStore: lo abre al construirse y lo
# cierra en close(). No hay estado global de módulo; create_app() guarda el
# contenedor en app.extensions['rifa'].
# ==============================================================================

from typing import Optional

from rifa_boletas.config import Settings

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (JSON)
# ═══════════════════════════════════════════════════════════════════════════════
from rifa_boletas.repositories import (
    CollectionStore,
    ConfigRepository,
    CustomerRepository,
    TicketRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from rifa_boletas.services import (
    ConfigService,
    CustomerService,
    EmailService,
    NotificationService,
    ProvisioningService,
    SalesService,
    StatsService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer(Settings.from_env())
        sales = container.sales_service
        ...
        container.close()
    """

    def __init__(self, settings: Settings):
        """
        Args:
            settings: Configuración del proceso (carpetas, timeouts)
        """
        self.settings = settings
        self.store = CollectionStore(settings.data_dir)
        self.store.open()

        # Repositorios (lazy loading)
        self._ticket_repo: Optional[TicketRepository] = None
        self._customer_repo: Optional[CustomerRepository] = None
        self._config_repo: Optional[ConfigRepository] = None

        # Servicios (lazy loading)
        self._email_service: Optional[EmailService] = None
        self._notification_service: Optional[NotificationService] = None
        self._sales_service: Optional[SalesService] = None
        self._customer_service: Optional[CustomerService] = None
        self._stats_service: Optional[StatsService] = None
        self._config_service: Optional[ConfigService] = None
        self._provisioning_service: Optional[ProvisioningService] = None

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def ticket_repo(self) -> TicketRepository:
        if self._ticket_repo is None:
            self._ticket_repo = TicketRepository(self.store)
        return self._ticket_repo

    @property
    def customer_repo(self) -> CustomerRepository:
        if self._customer_repo is None:
            self._customer_repo = CustomerRepository(self.store)
        return self._customer_repo

    @property
    def config_repo(self) -> ConfigRepository:
        if self._config_repo is None:
            self._config_repo = ConfigRepository(self.store)
        return self._config_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def email_service(self) -> EmailService:
        if self._email_service is None:
            self._email_service = EmailService(self.config_repo, smtp_timeout=self.settings.smtp_timeout)
        return self._email_service

    @property
    def notification_service(self) -> NotificationService:
        """Notificador post-venta (correo con timeout)."""
        if self._notification_service is None:
            self._notification_service = NotificationService(
                self.email_service,
                timeout=self.settings.notify_timeout
            )
        return self._notification_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(
                self.ticket_repo,
                self.customer_repo,
                notifier=self.notification_service
            )
        return self._sales_service

    @property
    def customer_service(self) -> CustomerService:
        if self._customer_service is None:
            self._customer_service = CustomerService(
                self.customer_repo,
                self.ticket_repo,
                self.sales_service
            )
        return self._customer_service

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(
                self.ticket_repo,
                self.customer_repo,
                self.config_repo
            )
        return self._stats_service

    @property
    def config_service(self) -> ConfigService:
        if self._config_service is None:
            self._config_service = ConfigService(self.config_repo)
        return self._config_service

    @property
    def provisioning_service(self) -> ProvisioningService:
        if self._provisioning_service is None:
            self._provisioning_service = ProvisioningService(self.ticket_repo)
        return self._provisioning_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def close(self) -> None:
        """Detiene el pool de correos y cierra el store."""
        if self._notification_service is not None:
            self._notification_service.close()
        self.store.close()
