"""
API 路由模块
"""
from fastapi import APIRouter

from .images import router as images_router

# 创建主路由
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(images_router)

__all__ = ["api_router"]
