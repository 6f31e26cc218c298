# ==============================================================================
# APLICACIÓN FLASK - Sistema de Gestión de Boletas
# ==============================================================================
# create_app() arma la aplicación:
#   1. Settings (variables de entorno / .env) → app.config
#   2. Profiling de rutas (performance_logger)
#   3. Contenedor de dependencias en app.extensions['rifa']
#   4. Blueprints de la API bajo /api
#   5. Manejadores de error → {success: false, error}
#   6. Comando CLI: flask generar-boletas
# ==============================================================================

import atexit
from typing import Any, Dict, Optional

import click
from flask import Flask
from werkzeug.exceptions import HTTPException

from rifa_boletas.app_container import AppContainer
from rifa_boletas.config import Settings
from rifa_boletas.errors import RifaError, ValidationError
from rifa_boletas.performance_logger import init_profiling
from rifa_boletas.routes import register_routes


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Crea y configura la aplicación.

    Args:
        overrides: Claves de app.config a sobrescribir (RIFA_DATA_DIR, ...).
                   Usado por los tests para apuntar a una carpeta temporal.
    """
    app = Flask(__name__)
    app.config.update(Settings.from_env().to_flask_config())
    if overrides:
        app.config.update(overrides)
    app.config['DEBUG'] = app.config['RIFA_DEBUG']

    settings = Settings.from_flask_config(app.config)

    # Mide rendimiento de rutas. Logs en RIFA_LOGS_DIR
    init_profiling(app)

    container = AppContainer(settings)
    app.extensions['rifa'] = container
    # Con TESTING, quien crea la app cierra el contenedor
    if not app.config.get('TESTING'):
        atexit.register(container.close)

    register_routes(app)
    _register_error_handlers(app)
    _register_cli(app)

    return app


# ═══════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════

def _register_error_handlers(app: Flask) -> None:

    @app.errorhandler(RifaError)
    def handle_rifa_error(error: RifaError):
        return error.to_dict(), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return {'success': False, 'error': error.description or error.name}, error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        app.logger.exception('Error no controlado: %s', error)
        return {'success': False, 'error': str(error) or 'Error interno del servidor'}, 500


# ═══════════════════════════════════════════════════════════════════════════
# COMANDOS CLI
# ═══════════════════════════════════════════════════════════════════════════

def _register_cli(app: Flask) -> None:

    @app.cli.command('generar-boletas')
    @click.option('--total', type=int, default=None,
                  help='Cantidad de boletas (por defecto totalBoletas de la configuración).')
    @click.option('--force', is_flag=True, help='Regenera aunque ya existan boletas (borra ventas).')
    def generate_tickets_command(total, force):
        """Genera el talonario inicial de boletas."""
        container: AppContainer = app.extensions['rifa']
        if total is None:
            total = container.config_repo.get().total_boletas
        try:
            result = container.provisioning_service.generate_tickets(total, force=force)
        except ValidationError as e:
            raise click.ClickException(e.message)
        click.echo(f"📁 {result['total']} boletas ({result['first']}-{result['last']}) "
                   f"en {container.store.path_for('tickets')}")


def print_banner(port: int) -> None:
    print('')
    print('🎫 ═══════════════════════════════════════════════')
    print('🎫  Sistema de Gestión de Boletas - Rifa')
    print('🎫 ═══════════════════════════════════════════════')
    print(f'🌐  Servidor:      http://localhost:{port}')
    print(f'🔌  API:           http://localhost:{port}/api')
    print('🎫 ═══════════════════════════════════════════════')
    print('')


if __name__ == '__main__':
    application = create_app()
    port = application.config['RIFA_PORT']
    print_banner(port)
    application.run(host='0.0.0.0', port=port, debug=application.config['RIFA_DEBUG'], threaded=True)
