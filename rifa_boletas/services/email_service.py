# ==============================================================================
# SERVICIO DE CORREO - Confirmación de compra
# ==============================================================================
# Envía al cliente sus boletas compradas, con un QR por boleta embebido como
# imagen inline (cid:), usando la configuración SMTP guardada en config.json.
#
# - Puerto 465 → SMTP sobre SSL
# - Otro puerto → SMTP + STARTTLS (si el servidor lo anuncia)
#
# Este servicio NO lanza por errores de envío: siempre retorna
# {'success': bool, 'message': str, 'messageId'?: str}.
# ==============================================================================

import smtplib
import ssl
from datetime import date, datetime
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from rifa_boletas.models import RaffleConfig, barcode_for
from rifa_boletas.repositories.interfaces import IConfigRepository
from rifa_boletas.services.qr_service import qr_png_bytes, ticket_url


MESES = [
    'enero', 'febrero', 'marzo', 'abril', 'mayo', 'junio',
    'julio', 'agosto', 'septiembre', 'octubre', 'noviembre', 'diciembre',
]

MSG_NO_EMAIL = 'El cliente no tiene email registrado'
MSG_SMTP_NOT_CONFIGURED = 'SMTP no configurado. Configure el correo en Configuración.'


# ═══════════════════════════════════════════════════════════════════════════
# FORMATOS (es-CO)
# ═══════════════════════════════════════════════════════════════════════════

def format_cop(value: Optional[int]) -> str:
    """120000 -> '$ 120.000'"""
    if not value:
        return ''
    return '$ ' + f'{int(value):,}'.replace(',', '.')


def format_long_date(value: Any) -> str:
    """'2026-06-20' -> '20 de junio de 2026'. Vacío -> 'Por definir'."""
    if not value:
        return 'Por definir'
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return f'{value.day} de {MESES[value.month - 1]} de {value.year}'


def format_long_datetime(value: datetime) -> str:
    return f'{format_long_date(value)}, {value:%H:%M}'


def _build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader('rifa_boletas', 'templates'),
        autoescape=select_autoescape(['html']),
    )
    env.filters['cop'] = format_cop
    env.filters['fecha_larga'] = format_long_date
    return env


class EmailService:
    """
    Servicio de envío de boletas por correo.

    La configuración SMTP se lee en cada envío, así un cambio hecho desde
    el panel aplica sin reiniciar.
    """

    SINGLE_TEMPLATE = 'email/boleta.html'
    BATCH_TEMPLATE = 'email/lote.html'

    def __init__(self, config_repo: IConfigRepository, smtp_timeout: float = 15.0):
        self.config_repo = config_repo
        self.smtp_timeout = smtp_timeout
        self._env = _build_environment()

    # =========================================================================
    # ENVÍO
    # =========================================================================

    def send_tickets(
        self,
        tickets: List[Dict[str, Any]],
        customer: Dict[str, Any],
        base_url: str
    ) -> Dict[str, Any]:
        """
        Envía un correo con una o varias boletas al cliente.

        Returns:
            {'success': bool, 'message': str, 'messageId'?: str}
        """
        if not customer.get('email'):
            return {'success': False, 'message': MSG_NO_EMAIL}

        config = self.config_repo.get()
        if not config.smtp_configured:
            return {'success': False, 'message': MSG_SMTP_NOT_CONFIGURED}

        try:
            message = self.build_message(tickets, customer, base_url, config)
            with self._connect(config) as server:
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            print(f"[EMAIL] ❌ Error enviando email a {customer['email']}: {e}")
            return {'success': False, 'message': f'Error enviando correo: {e}'}

        numbers = ', '.join(f"#{t['number']}" for t in tickets)
        message_id = message['Message-ID']
        print(f"[EMAIL] 📧 Enviado a {customer['email']} - Boleta(s) {numbers} - MessageId: {message_id}")
        return {
            'success': True,
            'message': f"Correo enviado exitosamente a {customer['email']}",
            'messageId': message_id,
        }

    def test_connection(self) -> Dict[str, Any]:
        """Verifica conexión y login SMTP sin enviar nada."""
        config = self.config_repo.get()
        if not config.smtp_configured:
            return {'success': False, 'message': 'SMTP no configurado'}
        try:
            with self._connect(config) as server:
                server.noop()
        except (smtplib.SMTPException, OSError) as e:
            return {'success': False, 'message': f'Error de conexión: {e}'}
        return {'success': True, 'message': 'Conexión SMTP exitosa ✅'}

    # =========================================================================
    # CONSTRUCCIÓN DEL MENSAJE
    # =========================================================================

    def build_message(
        self,
        tickets: List[Dict[str, Any]],
        customer: Dict[str, Any],
        base_url: str,
        config: RaffleConfig
    ) -> MIMEMultipart:
        """
        Arma el correo multipart/related: HTML + un PNG inline por boleta.
        """
        raffle_name = config.nombre_rifa or 'Rifa'
        items = []
        for ticket in tickets:
            url = ticket_url(base_url, ticket['number'])
            items.append({
                'number': ticket['number'],
                'barcode': ticket.get('barcode') or barcode_for(ticket['number']),
                'url': url,
                'cid': f"qr-{ticket['number']}",
                'png': qr_png_bytes(url),
            })

        context = {
            'config': config,
            'customer': customer,
            'tickets': items,
            'precio': format_cop(config.precio_boleta),
            'total': format_cop((config.precio_boleta or 0) * len(items)),
            'fecha_compra': format_long_datetime(datetime.now()),
        }

        if len(items) == 1:
            html = self._env.get_template(self.SINGLE_TEMPLATE).render(ticket=items[0], **context)
            subject = f"🎫 ¡Tu Boleta #{items[0]['number']} - {raffle_name}!"
        else:
            html = self._env.get_template(self.BATCH_TEMPLATE).render(**context)
            numbers = ', '.join(f"#{item['number']}" for item in items)
            subject = f'🎫 Tus {len(items)} Boleta(s) {numbers} - {raffle_name}'

        message = MIMEMultipart('related')
        message['Subject'] = subject
        message['From'] = formataddr((raffle_name, config.smtp_user))
        message['To'] = customer['email']
        message['Message-ID'] = make_msgid(domain=_domain_of(config.smtp_user))

        alternative = MIMEMultipart('alternative')
        alternative.attach(MIMEText(self._plain_text(items, customer, raffle_name), 'plain', 'utf-8'))
        alternative.attach(MIMEText(html, 'html', 'utf-8'))
        message.attach(alternative)

        for item in items:
            image = MIMEImage(item['png'], 'png')
            image.add_header('Content-ID', f"<{item['cid']}>")
            image.add_header('Content-Disposition', 'inline', filename=f"boleta-{item['number']}.png")
            message.attach(image)

        return message

    @staticmethod
    def _plain_text(items: List[Dict[str, Any]], customer: Dict[str, Any], raffle_name: str) -> str:
        lines = [f"Hola {customer.get('fullName', '')},", '', f'Tus boletas de {raffle_name}:']
        for item in items:
            lines.append(f"  #{item['number']} ({item['barcode']}) {item['url']}")
        lines += ['', 'Conserve este correo como comprobante de su compra.']
        return '\n'.join(lines)

    def _connect(self, config: RaffleConfig) -> smtplib.SMTP:
        """Abre la conexión SMTP autenticada."""
        port = config.smtp_port or 587
        context = ssl.create_default_context()

        if port == 465:
            server = smtplib.SMTP_SSL(config.smtp_host, port, timeout=self.smtp_timeout, context=context)
        else:
            server = smtplib.SMTP(config.smtp_host, port, timeout=self.smtp_timeout)

        # Cualquier fallo del saludo o del login cierra el socket
        try:
            if port != 465:
                server.ehlo()
                if server.has_extn('starttls'):
                    server.starttls(context=context)
                    server.ehlo()
            server.login(config.smtp_user, config.smtp_pass)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server


def _domain_of(address: str) -> Optional[str]:
    if address and '@' in address:
        return address.rsplit('@', 1)[1]
    return None
