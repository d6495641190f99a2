from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Web"], include_in_schema=False)


# the browser UI is one page; it routes client-side and talks to /api/*
@router.get("/")
@router.get("/orders")
@router.get("/orders/new")
@router.get("/orders/{order_id}")
@router.get("/products")
async def index():
    return FileResponse(STATIC_DIR / "index.html")
