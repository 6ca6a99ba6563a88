from fastapi import APIRouter

from .auth import router as auth_router
from .health import router as health_router

health_router_root = health_router

auth_router_root = APIRouter(prefix="/auth")
auth_router_root.include_router(auth_router, tags=["Auth"])
