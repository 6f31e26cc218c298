import pytest

from rifa_boletas.errors import DuplicateKeyError, NotFoundError, ValidationError


def test_register_fills_optional_fields(container):
    created = container.customer_service.register({'fullName': '  Marta Ruiz ', 'nationalId': '1001'})
    assert created['fullName'] == 'Marta Ruiz'
    assert created['phone'] == ''
    assert created['email'] == ''
    assert created['address'] == ''
    assert created['id']
    assert created['createdAt'] == created['updatedAt']


@pytest.mark.parametrize('data', [
    {'fullName': 'Sin cédula'},
    {'nationalId': '123'},
    {'fullName': '   ', 'nationalId': '123'},
])
def test_register_requires_name_and_national_id(container, data):
    with pytest.raises(ValidationError):
        container.customer_service.register(data)


def test_duplicate_national_id_returns_existing(container, customer):
    with pytest.raises(DuplicateKeyError) as exc:
        container.customer_service.register({'fullName': 'Otra Ana', 'nationalId': customer['nationalId']})

    assert exc.value.status_code == 400
    assert exc.value.data['id'] == customer['id']
    assert len(container.customer_repo.get_all()) == 1


def test_update_only_changes_editable_fields(container, customer):
    updated = container.customer_service.update(customer['id'], {
        'phone': '3110000000',
        'nationalId': '999',
        'id': 'otro',
    })
    assert updated['phone'] == '3110000000'
    assert updated['nationalId'] == customer['nationalId']
    assert updated['id'] == customer['id']
    assert updated['fullName'] == customer['fullName']
    assert updated['email'] == customer['email']


def test_update_rejects_blank_name(container, customer):
    with pytest.raises(ValidationError):
        container.customer_service.update(customer['id'], {'fullName': ''})


def test_update_unknown_customer(container):
    with pytest.raises(NotFoundError):
        container.customer_service.update('no-existe', {'phone': '1'})


def test_delete_releases_owned_tickets(container, tickets, customer, other_customer, notifier):
    sales = container.sales_service
    sales.sell('0001', customer['id'])
    sales.sell_batch(['0002', '0003'], customer['id'])
    sales.reserve('0004', customer['id'])
    sales.sell('0005', other_customer['id'])

    released = container.customer_service.delete(customer['id'])

    assert released == 4
    assert container.customer_repo.find_by_id(customer['id']) is None
    for number in ('0001', '0002', '0003', '0004'):
        ticket = container.ticket_repo.find_by_number(number)
        assert ticket['status'] == 'available'
        assert ticket['ownerId'] is None
        assert ticket['saleTimestamp'] is None
    assert container.ticket_repo.find_by_number('0005')['ownerId'] == other_customer['id']


def test_delete_unknown_customer(container):
    with pytest.raises(NotFoundError):
        container.customer_service.delete('no-existe')


def test_get_with_tickets(container, tickets, customer, notifier):
    container.sales_service.sell_batch(['0010', '0011'], customer['id'])
    data = container.customer_service.get_with_tickets(customer['id'])
    assert data['totalTickets'] == 2
    assert [t['number'] for t in data['tickets']] == ['0010', '0011']


def test_list_with_ticket_counts_and_search(container, tickets, customer, other_customer, notifier):
    container.sales_service.sell('0003', other_customer['id'])

    listed = {c['id']: c for c in container.customer_service.list_with_ticket_counts()}
    assert listed[customer['id']]['totalTickets'] == 0
    assert listed[other_customer['id']]['ticketNumbers'] == ['0003']

    assert [c['id'] for c in container.customer_service.list_with_ticket_counts('ANA')] == [customer['id']]
    assert [c['id'] for c in container.customer_service.list_with_ticket_counts('7123')] == [other_customer['id']]
    assert [c['id'] for c in container.customer_service.list_with_ticket_counts('EXAMPLE.COM')] == [customer['id']]
