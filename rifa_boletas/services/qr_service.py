# ==============================================================================
# SERVICIO DE CÓDIGOS QR
# ==============================================================================
# Cada boleta tiene un QR que apunta a <base>/boleta/<número>.
# Se usa en el correo de compra (imagen embebida) y en la impresión
# (data URL para el navegador).
# ==============================================================================

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M


def ticket_url(base_url: str, number: str) -> str:
    """URL pública de una boleta."""
    return f"{(base_url or '').rstrip('/')}/boleta/{number}"


def qr_png_bytes(data: str, box_size: int = 8, border: int = 1) -> bytes:
    """
    Genera un PNG con el QR de `data`.

    Args:
        data: Texto a codificar (normalmente la URL de la boleta)
        box_size: Píxeles por módulo
        border: Módulos de margen
    """
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color='black', back_color='white')

    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()


def qr_data_url(data: str, box_size: int = 8) -> str:
    """QR como data URL (data:image/png;base64,...)."""
    encoded = base64.b64encode(qr_png_bytes(data, box_size=box_size)).decode('ascii')
    return f'data:image/png;base64,{encoded}'
