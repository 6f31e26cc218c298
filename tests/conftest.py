import pytest

from rifa_boletas.main import create_app
from rifa_boletas.performance_logger import reset_stats


class RecordingNotifier:
    """Notificador falso: guarda cada llamada y responde `result`."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result or {'success': True, 'message': 'Correo enviado'}

    def notify_sale(self, tickets, customer, base_url):
        self.calls.append({'tickets': tickets, 'customer': customer, 'base_url': base_url})
        return dict(self.result)


@pytest.fixture
def app(tmp_path):
    reset_stats()
    app = create_app({
        'TESTING': True,
        'RIFA_DATA_DIR': str(tmp_path / 'data'),
        'RIFA_LOGS_DIR': str(tmp_path / 'logs'),
        'RIFA_PUBLIC_URL': 'http://rifa.test',
        'RIFA_ENABLE_PROFILING': True,
        'RIFA_NOTIFY_TIMEOUT': 2.0,
    })
    yield app
    app.extensions['rifa'].close()


@pytest.fixture
def container(app):
    return app.extensions['rifa']


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def notifier(container):
    fake = RecordingNotifier()
    container.sales_service.notifier = fake
    return fake


@pytest.fixture
def tickets(container):
    """20 boletas disponibles: 0000..0019"""
    container.provisioning_service.generate_tickets(20)
    return container.ticket_repo.get_all()


@pytest.fixture
def customer(container):
    return container.customer_service.register({
        'fullName': 'Ana Gómez',
        'nationalId': '1037654321',
        'phone': '3001234567',
        'email': 'ana@example.com',
        'address': 'Cra 10 # 20-30',
    })


@pytest.fixture
def other_customer(container):
    return container.customer_service.register({
        'fullName': 'Luis Pérez',
        'nationalId': '71234567',
    })
