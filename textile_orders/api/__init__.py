# textile_orders/api/__init__.py
from fastapi import APIRouter

from textile_orders.api.routers import drafts, orders, health

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(drafts.router)
api_router.include_router(orders.router)
