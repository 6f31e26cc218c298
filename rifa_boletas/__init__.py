# ==============================================================================
# RIFA BOLETAS - Sistema de gestión de boletas para rifas
# ==============================================================================
# Paquete principal. Uso típico:
#   from rifa_boletas.main import create_app
#   app = create_app()
# ==============================================================================

__version__ = "1.0.0"
