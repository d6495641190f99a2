from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_service.db_depends import get_db
from cafe_service.schemas.base import IdPath, MessageOut
from cafe_service.schemas.product import ProductCreate, ProductRead, ProductUpdate
from cafe_service.service.commands import execute

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
async def list_products(db: AsyncSession = Depends(get_db)):
    logger.info("Request to GET active products")
    response = await execute(db, "list_active_products")
    logger.info(
        "Successfully retrieved products list, count={count}",
        count=len(response),
    )
    return response


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to GET product with id={id}",
        id=product_id,
    )
    return await execute(db, "get_product", product_id=product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to CREATE product name='{name}'",
        name=data.name,
    )
    response = await execute(
        db,
        "create_product",
        name=data.name,
        price=data.price,
        category=data.category,
        description=data.description,
    )
    logger.info(
        "Product successfully created: id={id}",
        id=response.id,
    )
    return response


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(product_id: IdPath, data: ProductUpdate, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to UPDATE product with id={id}",
        id=product_id,
    )
    return await execute(
        db,
        "update_product",
        product_id=product_id,
        fields=data.model_dump(exclude_unset=True),
    )


@router.post("/{product_id}/deactivate", response_model=ProductRead)
async def deactivate_product(product_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to DEACTIVATE product with id={id}",
        id=product_id,
    )
    return await execute(db, "deactivate_product", product_id=product_id)


@router.delete("/{product_id}", response_model=MessageOut)
async def delete_product(product_id: IdPath, db: AsyncSession = Depends(get_db)):
    logger.info(
        "Request to DELETE product with id={id}",
        id=product_id,
    )
    response = await execute(db, "delete_product_hard", product_id=product_id)
    logger.info(
        "Product with id={id} successfully deleted",
        id=product_id,
    )
    return response
