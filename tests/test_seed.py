from click.testing import CliRunner

from cafe_service.cli import cli
from cafe_service.seed import MENU, SAMPLE_ORDERS, seed
from cafe_service.service.commands import execute


async def test_seed_loads_menu_and_orders(db):
    counts = await seed(db)
    assert counts == {"products": len(MENU), "orders": len(SAMPLE_ORDERS)}

    products = await execute(db, "list_active_products")
    assert len(products) == len(MENU)

    orders = await execute(db, "list_orders")
    assert len(orders) == len(SAMPLE_ORDERS)
    for order in orders:
        assert order.total_amount == sum(i.price * i.quantity for i in order.order_items)


async def test_seed_replaces_existing_data(db):
    await seed(db)
    await seed(db)
    assert len(await execute(db, "list_orders")) == len(SAMPLE_ORDERS)


def test_cli_lists_commands():
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("init-db", "seed", "serve"):
        assert command in result.output
