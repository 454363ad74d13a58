from fastapi import APIRouter

from app.api.v1.routes import health, telegram

api_router = APIRouter()
api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(telegram.router, prefix="/v1/telegram", tags=["telegram"])
