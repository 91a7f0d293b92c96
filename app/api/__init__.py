# app/api/__init__.py
from fastapi import FastAPI

from app.api.middleware import install_request_id
from app.api.routers import carts, orders, payments
from app.api.routers.health import router as health_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Order Service",
        version="1.0.0",
    )
    install_request_id(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)

    return app
