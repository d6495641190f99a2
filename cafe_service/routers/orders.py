from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.db_depends import get_db
from cafe_service.schemas.base import IdPath, MessageOut
from cafe_service.schemas.order import OrderCreate, OrderRead, OrderUpdate
from cafe_service.service.commands import execute

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=list[OrderRead])
async def list_orders(db: AsyncSession = Depends(get_db)):
    logger.info("Request to GET all orders")
    return await execute(db, "list_orders")


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(order_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Get order request received. order_id='{order_id}'",
        order_id=order_id,
    )
    return await execute(db, "get_order", order_id=order_id)


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(payload: OrderCreate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Create order request received for customer='{customer}' with {items_count} items",
        customer=payload.customer_name,
        items_count=len(payload.order_items),
    )
    order = await execute(
        db,
        "create_order",
        customer_name=payload.customer_name,
        items=payload.order_items,
    )
    logger.info(
        "Order created. order_id='{order_id}', total={total}",
        order_id=order.id,
        total=str(order.total_amount),
    )
    return order


@router.put("/{order_id}", response_model=OrderRead)
async def update_order(order_id: IdPath, payload: OrderUpdate, db: AsyncSession = Depends(get_db)):
    fields = payload.model_dump(exclude_unset=True)
    logger.info(
        "Update order request received. order_id='{order_id}', fields={fields}",
        order_id=order_id,
        fields=sorted(fields),
    )
    return await execute(
        db,
        "update_order",
        order_id=order_id,
        customer_name=payload.customer_name,
        is_paid=payload.is_paid,
        items=payload.order_items,
    )


@router.delete("/{order_id}", response_model=MessageOut)
async def delete_order(order_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Delete order request received. order_id='{order_id}'",
        order_id=order_id,
    )
    return await execute(db, "delete_order", order_id=order_id)
