# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y operaciones de venta sin afectar al usuario.
# Guarda logs legibles en la carpeta de logs (RIFA_LOGS_DIR):
#   - performance.log     → cada petición
#   - slow_routes.log     → peticiones lentas
#   - slow_functions.log  → operaciones lentas (vender, liberar, ...)
#
# ACTIVAR/DESACTIVAR: RIFA_ENABLE_PROFILING
# ==============================================================================

import os
import threading
import time
from collections import defaultdict
from datetime import datetime
from functools import wraps
from typing import Any, Dict, Optional

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    'GET /api/tickets': 'Listar boletas',
    'GET /api/tickets/stats': 'Ver estadísticas de boletas',
    'GET /api/tickets/<number>': 'Ver boleta',
    'PUT /api/tickets/<number>/sell': 'Vender boleta',
    'PUT /api/tickets/<number>/reserve': 'Reservar boleta',
    'PUT /api/tickets/<number>/release': 'Liberar boleta',
    'POST /api/tickets/sell-batch': 'Vender lote de boletas',

    'GET /api/customers': 'Listar clientes',
    'GET /api/customers/<customer_id>': 'Ver cliente',
    'POST /api/customers': 'Registrar cliente',
    'PUT /api/customers/<customer_id>': 'Editar cliente',
    'DELETE /api/customers/<customer_id>': 'Eliminar cliente',

    'GET /api/dashboard': 'Ver panel principal',
    'GET /api/dashboard/config': 'Ver configuración',
    'PUT /api/dashboard/config': 'Guardar configuración',
    'POST /api/dashboard/test-email': 'Probar SMTP',

    'GET /api/print/<number>': 'Imprimir boleta',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADO DEL MÓDULO
# ═══════════════════════════════════════════════════════════════════════════

_settings = {'enabled': True, 'logs_dir': None}

# Estructura: {nombre_funcion: {calls, total_time, max_time}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


def configure(logs_dir: Optional[str], enabled: bool = True) -> None:
    """Define carpeta de logs y si el profiling está activo."""
    _settings['enabled'] = enabled
    _settings['logs_dir'] = logs_dir
    if enabled and logs_dir:
        os.makedirs(logs_dir, exist_ok=True)


def is_enabled() -> bool:
    return bool(_settings['enabled'])


def _get_timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename: str, content: str) -> None:
    """Agrega contenido a un archivo de log (thread-safe)."""
    logs_dir = _settings['logs_dir']
    if not logs_dir:
        return
    try:
        with _write_lock:
            with open(os.path.join(logs_dir, filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError:
        # Carpeta de logs no escribible: se omite la entrada
        pass


def _get_route_name(method: str, path: str, rule: Optional[str] = None) -> str:
    key = f"{method} {path}"
    if key in ROUTE_NAMES:
        return ROUTE_NAMES[key]
    if rule:
        rule_key = f"{method} {rule}"
        if rule_key in ROUTE_NAMES:
            return ROUTE_NAMES[rule_key]
    return key


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method: str, path: str, rule: Optional[str], time_ms: float, status: int) -> None:
    if not is_enabled():
        return

    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {_get_route_name(method, path, rule)}
Ruta: {method} {path}
Estado HTTP: {status}
Tiempo: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method: str, path: str, rule: Optional[str], time_ms: float, level: str = 'WARNING') -> None:
    if not is_enabled():
        return

    emoji = '⚠️' if level == 'WARNING' else '🔴'
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL

    log_entry = f"""
{emoji} [{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {_get_route_name(method, path, rule)}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(SLOW_ROUTES_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ HOOKS PARA FLASK (before/after request)
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app) -> None:
    """
    Configura el módulo desde app.config y registra los hooks de Flask.

    Uso:
        from rifa_boletas.performance_logger import init_profiling
        init_profiling(app)
    """
    configure(app.config.get('RIFA_LOGS_DIR'), app.config.get('RIFA_ENABLE_PROFILING', True))
    if not is_enabled():
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path

        log_route_performance(request.method, request.path, rule, elapsed, response.status_code)

        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(request.method, request.path, rule, elapsed, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(request.method, request.path, rule, elapsed, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name: Optional[str] = None):
    """
    Decorador para medir rendimiento de operaciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Vender boleta")
        def sell():
            ...

    Registra llamadas, tiempo promedio y máximo. Las llamadas lentas se
    escriben de inmediato en slow_functions.log.
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not is_enabled():
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms
                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name: str, time_ms: float) -> None:
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    emoji = '🔴' if time_ms >= THRESHOLD_CRITICAL else '⚠️'

    log_entry = f"""
{emoji} [{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 4️⃣ REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats() -> Dict[str, Dict[str, Any]]:
    """
    Returns:
        {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats() -> None:
    """Reinicia todas las estadísticas (útil para testing)."""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'configure',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
