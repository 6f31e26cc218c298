# ==============================================================================
# HELPERS COMPARTIDOS POR LAS RUTAS
# ==============================================================================

import math
from typing import Any, Dict, List

from flask import current_app, request

from rifa_boletas.app_container import AppContainer
from rifa_boletas.errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50


def get_container() -> AppContainer:
    """Contenedor de la app en curso (creado en create_app)."""
    return current_app.extensions['rifa']


def json_body() -> Dict[str, Any]:
    """Cuerpo JSON de la petición o {} si no hay."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def public_base_url() -> str:
    """
    URL base para los QR: RIFA_PUBLIC_URL si está definida, si no el host
    de la petición.
    """
    configured = current_app.config.get('RIFA_PUBLIC_URL')
    if configured:
        return configured.rstrip('/')
    return request.host_url.rstrip('/')


def _positive_int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"El parámetro '{name}' debe ser un entero positivo")
    if value <= 0:
        raise ValidationError(f"El parámetro '{name}' debe ser un entero positivo")
    return value


def paginate(items: List[Any]) -> Dict[str, Any]:
    """
    Aplica ?page=&limit= a una lista.

    Returns:
        {'success': True, 'data': [...], 'pagination': {page, limit, total, totalPages}}

    Raises:
        ValidationError: page/limit no enteros o no positivos
    """
    page = _positive_int_arg('page', DEFAULT_PAGE)
    limit = _positive_int_arg('limit', DEFAULT_LIMIT)

    total = len(items)
    start = (page - 1) * limit
    return {
        'success': True,
        'data': items[start:start + limit],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit),
        },
    }
