from fastapi import APIRouter

from app.api.routes import health, notifications, notify

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])  # GET
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])  # GET, GET /count, GET|PATCH /{id}
api_router.include_router(notify.router, prefix="/notify", tags=["notify"])  # POST /email, /sms
