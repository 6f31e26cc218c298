# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================
# Lee variables de entorno (y un archivo .env si existe) con valores por
# defecto sensatos para desarrollo local.
#
# Esto es la configuración del PROCESO (rutas, timeouts, puerto).
# La configuración de la RIFA (nombre, precio, SMTP) vive en config.json y
# se administra desde /api/dashboard/config.
# ==============================================================================

import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "si", "sí"}


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """
    Parámetros del proceso.

    Attributes:
        data_dir: Carpeta donde se guardan tickets.json, customers.json y config.json
        logs_dir: Carpeta de logs de rendimiento
        public_url: URL pública usada en los QR (vacío = host de la petición)
        notify_timeout: Segundos máximos que una venta espera al correo
        smtp_timeout: Timeout de socket para la conexión SMTP
        enable_profiling: Activa los logs de rendimiento
        debug: Modo debug de Flask
        port: Puerto del servidor de desarrollo
    """
    data_dir: str
    logs_dir: str
    public_url: str = ''
    notify_timeout: float = 20.0
    smtp_timeout: float = 15.0
    enable_profiling: bool = True
    debug: bool = False
    port: int = 3000

    @classmethod
    def from_env(cls) -> 'Settings':
        cwd = os.getcwd()
        return cls(
            data_dir=os.getenv('RIFA_DATA_DIR', os.path.join(cwd, 'data')),
            logs_dir=os.getenv('RIFA_LOGS_DIR', os.path.join(cwd, 'logs')),
            public_url=os.getenv('RIFA_PUBLIC_URL', '').rstrip('/'),
            notify_timeout=_get_float('RIFA_NOTIFY_TIMEOUT', 20.0),
            smtp_timeout=_get_float('RIFA_SMTP_TIMEOUT', 15.0),
            enable_profiling=_get_bool('RIFA_ENABLE_PROFILING', True),
            debug=_get_bool('RIFA_DEBUG', False),
            port=_get_int('PORT', 3000),
        )

    def to_flask_config(self) -> Dict[str, Any]:
        """Claves en mayúsculas para app.config (RIFA_DATA_DIR, ...)."""
        return {f'RIFA_{key.upper()}': value for key, value in asdict(self).items()}

    @classmethod
    def from_flask_config(cls, config: Mapping[str, Any]) -> 'Settings':
        """Inverso de to_flask_config (respeta overrides aplicados a app.config)."""
        return cls(**{f.name: config[f'RIFA_{f.name.upper()}'] for f in fields(cls)})
