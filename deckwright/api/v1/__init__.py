"""API v1 routers"""

from fastapi import APIRouter

from .exports import router as exports_router
from .plans import router as plans_router
from .projects import router as projects_router
from .themes import router as themes_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(themes_router)
v1_router.include_router(plans_router)
v1_router.include_router(exports_router)
v1_router.include_router(projects_router)
