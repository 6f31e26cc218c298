# -*- coding: utf-8 -*-
"""
Test del correo de compra y del notificador con timeout
"""
import smtplib
import threading

import pytest

from rifa_boletas.services.email_service import (
    EmailService,
    format_cop,
    format_long_date,
)
from rifa_boletas.services.notification_service import NotificationService


class FakeSMTP:
    """Reemplazo de smtplib.SMTP que registra lo enviado."""

    instances = []

    def __init__(self, host, port, timeout=None, **kwargs):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        self.closed = False
        FakeSMTP.instances.append(self)

    def ehlo(self):
        return (250, b'ok')

    def has_extn(self, name):
        return name == 'starttls'

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.sent.append(message)

    def noop(self):
        return (250, b'ok')

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class RejectingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b'bad credentials')


class BrokenTLSSMTP(FakeSMTP):
    def starttls(self, context=None):
        raise smtplib.SMTPNotSupportedError('STARTTLS rechazado')


SMTP_CONFIG = {
    'smtpHost': 'smtp.example.com',
    'smtpPort': 587,
    'smtpUser': 'rifa@example.com',
    'smtpPass': 'secreto',
}


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, 'SMTP', FakeSMTP)
    monkeypatch.setattr(smtplib, 'SMTP_SSL', FakeSMTP)
    return FakeSMTP


@pytest.fixture
def smtp_configured(container):
    container.config_service.update_config(SMTP_CONFIG)


def _html_part(message):
    alternative = message.get_payload()[0]
    return alternative.get_payload()[1].get_payload(decode=True).decode('utf-8')


# =========================================================================
# FORMATOS
# =========================================================================

def test_format_cop():
    assert format_cop(120000) == '$ 120.000'
    assert format_cop(1500000) == '$ 1.500.000'
    assert format_cop(0) == ''


def test_format_long_date():
    assert format_long_date('2026-06-20') == '20 de junio de 2026'
    assert format_long_date('') == 'Por definir'
    assert format_long_date('pronto') == 'pronto'


# =========================================================================
# EMAIL SERVICE
# =========================================================================

def test_send_without_customer_email(container, tickets, other_customer):
    result = container.email_service.send_tickets(tickets[:1], other_customer, 'http://rifa.test')
    assert result == {'success': False, 'message': 'El cliente no tiene email registrado'}


def test_send_without_smtp_config(container, tickets, customer, fake_smtp):
    result = container.email_service.send_tickets(tickets[:1], customer, 'http://rifa.test')
    assert result['success'] is False
    assert 'SMTP no configurado' in result['message']
    assert fake_smtp.instances == []


def test_send_single_ticket(container, tickets, customer, fake_smtp, smtp_configured):
    result = container.email_service.send_tickets(tickets[1:2], customer, 'http://rifa.test')

    assert result['success'] is True
    assert result['messageId']

    server = fake_smtp.instances[0]
    assert (server.host, server.port) == ('smtp.example.com', 587)
    assert server.started_tls is True
    assert server.logged_in == ('rifa@example.com', 'secreto')

    message = server.sent[0]
    assert message['To'] == 'ana@example.com'
    assert '#0001' in message['Subject']
    assert message.get_content_type() == 'multipart/related'

    image = message.get_payload()[1]
    assert image.get_content_type() == 'image/png'
    assert image['Content-ID'] == '<qr-0001>'

    html = _html_part(message)
    assert 'cid:qr-0001' in html
    assert 'http://rifa.test/boleta/0001' in html
    assert 'RIFA-0001' in html
    assert '$ 120.000' in html
    assert '20 de junio de 2026' in html


def test_send_batch_uses_one_message(container, tickets, customer, fake_smtp, smtp_configured):
    result = container.email_service.send_tickets(tickets[2:5], customer, 'http://rifa.test')
    assert result['success'] is True

    message = fake_smtp.instances[0].sent[0]
    assert 'Tus 3 Boleta(s) #0002, #0003, #0004' in message['Subject']
    assert len(message.get_payload()) == 4

    html = _html_part(message)
    assert 'Total: $ 360.000' in html
    for number in ('0002', '0003', '0004'):
        assert f'cid:qr-{number}' in html


def test_port_465_uses_ssl(container, tickets, customer, fake_smtp):
    container.config_service.update_config({**SMTP_CONFIG, 'smtpPort': 465})
    container.email_service.send_tickets(tickets[:1], customer, 'http://rifa.test')
    server = fake_smtp.instances[0]
    assert server.port == 465
    assert server.started_tls is False


def test_smtp_errors_become_results(container, tickets, customer, monkeypatch, smtp_configured):
    monkeypatch.setattr(smtplib, 'SMTP', RejectingSMTP)
    result = container.email_service.send_tickets(tickets[:1], customer, 'http://rifa.test')
    assert result['success'] is False
    assert result['message'].startswith('Error enviando correo')


def test_failed_handshake_closes_socket(container, tickets, customer, monkeypatch, smtp_configured):
    FakeSMTP.instances = []
    for smtp_class in (RejectingSMTP, BrokenTLSSMTP):
        monkeypatch.setattr(smtplib, 'SMTP', smtp_class)
        result = container.email_service.send_tickets(tickets[:1], customer, 'http://rifa.test')
        assert result['success'] is False

    assert len(FakeSMTP.instances) == 2
    assert all(server.closed for server in FakeSMTP.instances)
    assert FakeSMTP.instances[1].logged_in is None


def test_connection_check(container, fake_smtp, monkeypatch):
    assert container.email_service.test_connection() == {'success': False, 'message': 'SMTP no configurado'}

    container.config_service.update_config(SMTP_CONFIG)
    assert container.email_service.test_connection()['success'] is True

    monkeypatch.setattr(smtplib, 'SMTP', RejectingSMTP)
    result = container.email_service.test_connection()
    assert result['success'] is False
    assert result['message'].startswith('Error de conexión')


# =========================================================================
# NOTIFICADOR
# =========================================================================

class SlowEmailService:
    def __init__(self):
        self.release = threading.Event()

    def send_tickets(self, tickets, customer, base_url):
        self.release.wait(5)
        return {'success': True, 'message': 'tarde'}


class ExplodingEmailService:
    def send_tickets(self, tickets, customer, base_url):
        raise ValueError('plantilla rota')


def test_notifier_times_out():
    email = SlowEmailService()
    notifier = NotificationService(email, timeout=0.1)
    try:
        result = notifier.notify_sale([{'number': '0001'}], {'email': 'a@b.c'}, '')
        assert result['success'] is False
        assert 'Tiempo de espera agotado' in result['message']
    finally:
        email.release.set()
        notifier.close()


def test_notifier_never_raises():
    notifier = NotificationService(ExplodingEmailService(), timeout=1)
    try:
        result = notifier.notify_sale([{'number': '0001'}], {'email': 'a@b.c'}, '')
        assert result == {'success': False, 'message': 'Error enviando correo: plantilla rota'}
    finally:
        notifier.close()


def test_sale_reports_email_result(container, tickets, customer, fake_smtp, smtp_configured):
    result = container.sales_service.sell('0006', customer['id'], 'http://rifa.test')
    assert result['notification']['success'] is True
    assert fake_smtp.instances[0].sent[0]['To'] == 'ana@example.com'


def test_email_service_reads_config_on_each_send(container, tickets, customer, fake_smtp):
    service = EmailService(container.config_repo)
    assert service.send_tickets(tickets[:1], customer, '')['success'] is False
    container.config_service.update_config(SMTP_CONFIG)
    assert service.send_tickets(tickets[:1], customer, '')['success'] is True
