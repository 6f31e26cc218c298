from rifa_boletas.models import utc_now_iso


def test_empty_dashboard(container):
    data = container.stats_service.get_dashboard()
    assert data['totalTickets'] == 0
    assert data['percentSold'] == 0
    assert data['topBuyers'] == []
    assert data['salesByDate'] == {}
    assert data['estimatedRevenue'] == 0
    assert data['ticketPrice'] == 120000


def test_dashboard_after_sales(container, tickets, customer, other_customer, notifier):
    sales = container.sales_service
    sales.sell_batch(['0000', '0001', '0002'], customer['id'])
    sales.sell('0003', other_customer['id'])
    sales.reserve('0004', other_customer['id'])
    sales.reserve('0005', other_customer['id'])
    sales.reserve('0006', 'cliente-borrado')

    data = container.stats_service.get_dashboard()

    assert data['totalTickets'] == 20
    assert data['sold'] == 4
    assert data['reserved'] == 3
    assert data['available'] == 13
    assert data['percentSold'] == 20.0
    assert data['totalCustomers'] == 2
    assert data['estimatedRevenue'] == 4 * 120000
    assert data['salesByDate'] == {utc_now_iso()[:10]: 4}

    top = data['topBuyers']
    assert [(b['fullName'], b['count']) for b in top] == [
        ('Ana Gómez', 3),
        ('Luis Pérez', 3),
        ('Desconocido', 1),
    ]
    assert top[2]['nationalId'] == ''


def test_percent_is_rounded(container, customer, notifier):
    container.provisioning_service.generate_tickets(3)
    container.sales_service.sell('0000', customer['id'])
    assert container.stats_service.get_dashboard()['percentSold'] == 33.33


def test_revenue_uses_current_price(container, tickets, customer, notifier):
    container.sales_service.sell('0001', customer['id'])
    container.config_service.update_config({'precioBoleta': 5000})
    data = container.stats_service.get_dashboard()
    assert data['ticketPrice'] == 5000
    assert data['estimatedRevenue'] == 5000
