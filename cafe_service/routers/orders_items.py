from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.db_depends import get_db
from cafe_service.schemas.base import IdPath, MessageOut
from cafe_service.schemas.order_item import OrderItemIn, OrderItemRead
from cafe_service.service.commands import execute

router = APIRouter(prefix="/api/orders/{order_id}/items", tags=["Order items"])


@router.post("", response_model=OrderItemRead, status_code=status.HTTP_201_CREATED)
async def add_order_item(order_id: IdPath, data: OrderItemIn, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Add order item request received. order_id='{order_id}', product_id='{product_id}'",
        order_id=order_id,
        product_id=data.product_id,
    )
    item = await execute(
        db,
        "add_item",
        order_id=order_id,
        product_id=data.product_id,
        quantity=data.quantity,
        price=data.price,
    )
    logger.info(
        "Order item added. order_id='{order_id}', item_id='{item_id}'",
        order_id=order_id,
        item_id=item.id,
    )
    return item


@router.put("/{item_id}", response_model=OrderItemRead)
async def update_order_item(
    order_id: IdPath,
    item_id: IdPath,
    data: OrderItemIn,
    db: AsyncSession = Depends(get_db),
):
    logger.info(
        "Update order item request received. order_id='{order_id}', item_id='{item_id}'",
        order_id=order_id,
        item_id=item_id,
    )
    return await execute(
        db,
        "update_item",
        order_id=order_id,
        item_id=item_id,
        product_id=data.product_id,
        quantity=data.quantity,
        price=data.price,
    )


@router.delete("/{item_id}", response_model=MessageOut)
async def delete_order_item(order_id: IdPath, item_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Delete order item request received. order_id='{order_id}', item_id='{item_id}'",
        order_id=order_id,
        item_id=item_id,
    )
    return await execute(db, "remove_item", order_id=order_id, item_id=item_id)
