# usedbooks/api/__init__.py
from fastapi import FastAPI
from usedbooks.api.routers import auth, carts, health, orders, products


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    return app
