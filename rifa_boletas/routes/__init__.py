# ==============================================================================
# RUTAS HTTP - API JSON bajo /api
# ==============================================================================
# Cada módulo es un Blueprint. Las rutas solo orquestan:
#   request → servicio → dict JSON
# Los errores de dominio (RifaError) los traduce el manejador de main.py.
# ==============================================================================

from flask import Flask

from rifa_boletas.routes.tickets import tickets_bp
from rifa_boletas.routes.customers import customers_bp
from rifa_boletas.routes.dashboard import dashboard_bp
from rifa_boletas.routes.print import print_bp
from rifa_boletas.routes.health import health_bp


def register_routes(app: Flask) -> None:
    app.register_blueprint(tickets_bp, url_prefix='/api/tickets')
    app.register_blueprint(customers_bp, url_prefix='/api/customers')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(print_bp, url_prefix='/api/print')
    app.register_blueprint(health_bp, url_prefix='/api')
