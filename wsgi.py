# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --worker-class gthread --threads 8 --bind 0.0.0.0:$PORT
#
# Un solo proceso (workers=1): el almacén JSON y los locks viven en memoria
# del proceso. Para concurrencia, subir --threads.
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── rifa_boletas/    <- Paquete Python
#       ├── main.py
#       ├── services/
#       ├── repositories/
#       └── routes/
# ==============================================================================

from rifa_boletas.main import create_app, print_banner

app = create_app()

# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================
# Generar boletas:
#   flask --app wsgi generar-boletas
#
# Para desarrollo local:
#   python wsgi.py
# ==============================================================================

if __name__ == '__main__':
    port = app.config['RIFA_PORT']
    print_banner(port)
    app.run(host='0.0.0.0', port=port, debug=app.config['RIFA_DEBUG'], threaded=True)
