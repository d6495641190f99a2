from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from cafe_service import __version__
from cafe_service.core.exceptions import register_exception_handlers
from cafe_service.core.logging import setup_logging
from cafe_service.db import engine
from cafe_service.env import HOST, PORT, SERVICE_NAME
from cafe_service.middleware.logging import LoggingMiddleware
from cafe_service.middleware.metrics import MetricsMiddleware
from cafe_service.routers import dashboard as dashboard_router
from cafe_service.routers import health as health_router
from cafe_service.routers import metrics as metrics_router
from cafe_service.routers import orders as orders_router
from cafe_service.routers import orders_items as order_items_router
from cafe_service.routers import products as products_router
from cafe_service.routers import web as web_router


setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup: service={service}", service=SERVICE_NAME)
    yield
    logger.info("Application shutdown: disposing DB engine")
    await engine.dispose()


app = FastAPI(title="Cafe Service", version=__version__, lifespan=lifespan)

register_exception_handlers(app)

app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(health_router.router)
app.include_router(metrics_router.router)
app.include_router(products_router.router)
app.include_router(orders_router.router)
app.include_router(order_items_router.router)
app.include_router(dashboard_router.router)
app.include_router(web_router.router)

app.mount("/static", StaticFiles(directory=web_router.STATIC_DIR), name="static")


if __name__ == "__main__":
    uvicorn.run("cafe_service.main:app", host=HOST, port=PORT, reload=True)
