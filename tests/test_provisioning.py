import pytest

from rifa_boletas.errors import ValidationError
from rifa_boletas.services.provisioning_service import ProvisioningService


@pytest.mark.parametrize('total,width', [(1, 4), (10, 4), (10000, 4), (10001, 5), (100000, 5), (100001, 6)])
def test_number_width(total, width):
    assert ProvisioningService.number_width(total) == width


def test_generate_tickets(container):
    result = container.provisioning_service.generate_tickets(25)
    assert result == {'total': 25, 'first': '0000', 'last': '0024'}

    tickets = container.ticket_repo.get_all()
    assert len(tickets) == 25
    assert len({t['id'] for t in tickets}) == 25
    for t in tickets:
        assert t['status'] == 'available'
        assert t['barcode'] == f"RIFA-{t['number']}"
        assert t['ownerId'] is None
        assert t['saleTimestamp'] is None


def test_refuses_when_tickets_exist(container, tickets):
    with pytest.raises(ValidationError):
        container.provisioning_service.generate_tickets(5)
    assert len(container.ticket_repo.get_all()) == 20


def test_force_regenerates(container, tickets, customer, notifier):
    container.sales_service.sell('0001', customer['id'])
    container.provisioning_service.generate_tickets(5, force=True)

    tickets = container.ticket_repo.get_all()
    assert [t['number'] for t in tickets] == ['0000', '0001', '0002', '0003', '0004']
    assert all(t['status'] == 'available' for t in tickets)


@pytest.mark.parametrize('total', [0, -3, '10', True])
def test_invalid_total(container, total):
    with pytest.raises(ValidationError):
        container.provisioning_service.generate_tickets(total)


def test_cli_command(app, container):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['generar-boletas', '--total', '12'])
    assert result.exit_code == 0, result.output
    assert len(container.ticket_repo.get_all()) == 12

    again = runner.invoke(args=['generar-boletas', '--total', '12'])
    assert again.exit_code != 0
    assert 'Ya existen boletas' in again.output

    forced = runner.invoke(args=['generar-boletas', '--total', '3', '--force'])
    assert forced.exit_code == 0
    assert len(container.ticket_repo.get_all()) == 3
