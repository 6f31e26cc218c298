# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de la rifa.
# Diseñadas para ser independientes del mecanismo de persistencia:
# los repositorios guardan diccionarios (to_dict) y las entidades se
# reconstruyen con from_dict.
# ==============================================================================

import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utc_now_iso() -> str:
    """Marca de tiempo ISO-8601 en UTC (formato usado en todos los JSON)."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class TicketStatus(str, Enum):
    """Estados posibles de una boleta."""
    AVAILABLE = "available"   # Disponible para la venta
    RESERVED = "reserved"     # Apartada (con o sin cliente)
    SOLD = "sold"             # Vendida, con cliente y fecha de venta

    @classmethod
    def values(cls):
        return [s.value for s in cls]


BARCODE_PREFIX = 'RIFA-'

# Ancho mínimo del número de boleta: 10.000 boletas -> "0000".."9999"
MIN_NUMBER_WIDTH = 4


def format_ticket_number(index: int, width: int = MIN_NUMBER_WIDTH) -> str:
    return str(index).zfill(width)


def barcode_for(number: str) -> str:
    """El código de barras se deriva 1:1 del número."""
    return f'{BARCODE_PREFIX}{number}'


# ==============================================================================
# BOLETAS
# ==============================================================================

@dataclass
class Ticket:
    """
    Una boleta numerada de la rifa.

    Invariantes:
        - status == sold      -> owner_id y sale_timestamp presentes
        - status == available -> owner_id y sale_timestamp en None
        - number es único e inmutable
    """
    number: str
    id: str = field(default_factory=new_id)
    status: TicketStatus = TicketStatus.AVAILABLE
    owner_id: Optional[str] = None
    sale_timestamp: Optional[str] = None
    notes: str = ''
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    @property
    def barcode(self) -> str:
        return barcode_for(self.number)

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'number': self.number,
            'barcode': self.barcode,
            'status': self.status.value if isinstance(self.status, Enum) else self.status,
            'ownerId': self.owner_id,
            'saleTimestamp': self.sale_timestamp,
            'notes': self.notes,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Ticket':
        """Crea instancia desde diccionario."""
        return cls(
            number=data['number'],
            id=data.get('id') or new_id(),
            status=TicketStatus(data.get('status', TicketStatus.AVAILABLE.value)),
            owner_id=data.get('ownerId'),
            sale_timestamp=data.get('saleTimestamp'),
            notes=data.get('notes') or '',
            created_at=data.get('createdAt') or utc_now_iso(),
            updated_at=data.get('updatedAt') or utc_now_iso(),
        )


# ==============================================================================
# CLIENTES
# ==============================================================================

@dataclass
class Customer:
    """
    Comprador registrado, identificado por su cédula (national_id).

    Attributes:
        full_name: Nombre completo
        national_id: Cédula, clave de negocio única
        phone, email, address: Datos de contacto (opcionales)
    """
    full_name: str
    national_id: str
    phone: str = ''
    email: str = ''
    address: str = ''
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fullName': self.full_name,
            'nationalId': self.national_id,
            'phone': self.phone,
            'email': self.email,
            'address': self.address,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            full_name=data.get('fullName', ''),
            national_id=data.get('nationalId', ''),
            phone=data.get('phone') or '',
            email=data.get('email') or '',
            address=data.get('address') or '',
            id=data.get('id') or new_id(),
            created_at=data.get('createdAt') or utc_now_iso(),
            updated_at=data.get('updatedAt') or utc_now_iso(),
        )


# ==============================================================================
# CONFIGURACIÓN DE LA RIFA
# ==============================================================================

# Nombre del campo en Python -> clave persistida en config.json
_CONFIG_KEYS = {
    'nombre_rifa': 'nombreRifa',
    'descripcion': 'descripcion',
    'precio_boleta': 'precioBoleta',
    'total_boletas': 'totalBoletas',
    'fecha_sorteo': 'fechaSorteo',
    'premio': 'premio',
    'organizador': 'organizador',
    'telefono': 'telefono',
    'logo': 'logo',
    'smtp_host': 'smtpHost',
    'smtp_port': 'smtpPort',
    'smtp_user': 'smtpUser',
    'smtp_pass': 'smtpPass',
}

# Campos numéricos: se convierten a int al fusionar
_CONFIG_INT_FIELDS = frozenset(['precio_boleta', 'total_boletas', 'smtp_port'])


@dataclass
class RaffleConfig:
    """
    Parámetros de la rifa y credenciales SMTP.

    Siempre se construye como: valores por defecto + lo guardado en disco,
    así los campos nuevos existen aunque config.json sea de una versión vieja.
    Las claves desconocidas que haya en disco se conservan en `extra`.
    """
    nombre_rifa: str = 'Rifas El Gran Camión'
    descripcion: str = 'KIA Picanto 0KM 2026 - Juega el 20 de junio con la Lotería de Boyacá'
    precio_boleta: int = 120000
    total_boletas: int = 10000
    fecha_sorteo: str = '2026-06-20'
    premio: str = 'KIA Picanto 0KM 2026'
    organizador: str = 'Inversiones Castaño S.A.S'
    telefono: str = '3217706789'
    logo: str = '/img/kia.jpg'
    smtp_host: str = ''
    smtp_port: int = 587
    smtp_user: str = ''
    smtp_pass: str = ''
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        for attr, key in _CONFIG_KEYS.items():
            data[key] = getattr(self, attr)
        return data

    def merge(self, overrides: Dict[str, Any]) -> 'RaffleConfig':
        """
        Retorna una nueva configuración con `overrides` aplicados encima.

        Solo cambian las claves presentes en `overrides`. Los campos numéricos
        se convierten a int.

        Raises:
            ValueError: Si un campo numérico no es convertible
        """
        by_key = {key: attr for attr, key in _CONFIG_KEYS.items()}
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values['extra'] = dict(self.extra)

        for key, value in (overrides or {}).items():
            attr = by_key.get(key)
            if attr is None:
                values['extra'][key] = value
                continue
            if attr in _CONFIG_INT_FIELDS:
                value = _to_int(key, value)
            values[attr] = value

        return RaffleConfig(**values)

    @classmethod
    def from_dict(cls, saved: Dict[str, Any]) -> 'RaffleConfig':
        """Defaults fusionados con la configuración guardada."""
        return cls().merge(saved)

    def public_dict(self) -> Dict[str, Any]:
        """Subconjunto sin datos SMTP (para impresión de boletas)."""
        return {
            'nombreRifa': self.nombre_rifa,
            'descripcion': self.descripcion,
            'premio': self.premio,
            'fechaSorteo': self.fecha_sorteo,
            'organizador': self.organizador,
            'precioBoleta': self.precio_boleta,
        }


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f'{key} debe ser numérico')
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f'{key} debe ser numérico')
    if not number.is_integer():
        raise ValueError(f'{key} debe ser un número entero')
    return int(number)
