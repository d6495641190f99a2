"""Command table for every catalog, order and reporting operation.

Transports (HTTP routers, the CLI) look operations up by name and run them
through :func:`execute`, which owns the transaction boundary: write commands
are committed as one unit on success and rolled back on any error.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.core.exceptions import StorageError
from cafe_service.core.metrics import COMMANDS_TOTAL
from cafe_service.crud import products
from cafe_service.env import SERVICE_NAME
from cafe_service.service import dashboard, orders


@dataclass(frozen=True)
class Command:
    name: str
    handler: Callable[..., Awaitable[Any]]
    writes: bool


COMMANDS: dict[str, Command] = {
    command.name: command
    for command in (
        # catalog
        Command("list_active_products", products.list_active_products, writes=False),
        Command("get_product", products.get_product, writes=False),
        Command("create_product", products.create_product, writes=True),
        Command("update_product", products.update_product, writes=True),
        Command("deactivate_product", products.deactivate_product, writes=True),
        Command("delete_product_hard", products.delete_product_hard, writes=True),
        # orders
        Command("list_orders", orders.list_orders, writes=False),
        Command("get_order", orders.get_order, writes=False),
        Command("create_order", orders.create_order, writes=True),
        Command("update_order", orders.update_order, writes=True),
        Command("replace_order_items", orders.replace_order_items, writes=True),
        Command("add_item", orders.add_item, writes=True),
        Command("update_item", orders.update_item, writes=True),
        Command("remove_item", orders.remove_item, writes=True),
        Command("delete_order", orders.delete_order, writes=True),
        # reporting
        Command("dashboard_stats", dashboard.dashboard_stats, writes=False),
        Command("top_products", dashboard.top_products, writes=False),
        Command("daily_revenue", dashboard.daily_revenue, writes=False),
        Command("revenue_for_period", dashboard.revenue_for_period, writes=False),
    )
}


def _track(name: str, status: str) -> None:
    COMMANDS_TOTAL.labels(
        service=SERVICE_NAME,
        command=name,
        status=status,
    ).inc()


async def execute(db: AsyncSession, command_name: str, /, **params: Any) -> Any:
    try:
        command = COMMANDS[command_name]
    except KeyError:
        raise LookupError(f"Unknown command '{command_name}'") from None

    logger.debug(
        "Executing command '{command}' params={params}",
        command=command_name,
        params=sorted(params),
    )

    if not command.writes:
        try:
            result = await command.handler(db, **params)
        except SQLAlchemyError as exc:
            _track(command_name, "storage_error")
            raise StorageError(f"Database error in '{command_name}'") from exc
        _track(command_name, "success")
        return result

    try:
        result = await command.handler(db, **params)
        await db.commit()
    except Exception as exc:
        await db.rollback()
        logger.warning(
            "Command '{command}' rolled back: {error_type}: {error}",
            command=command_name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        _track(command_name, "rolled_back")
        if isinstance(exc, SQLAlchemyError):
            raise StorageError(f"Database error in '{command_name}'") from exc
        raise

    _track(command_name, "success")
    return result
