"""
请求依赖
"""
from typing import Optional

from fastapi import Header, HTTPException

from pixology.services.image_service import ImageGenerationService, get_image_generation_service


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    获取当前用户ID

    身份认证由上游网关完成，这里只读取透传的用户ID
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="用户未登录")
    return x_user_id.strip()


def get_generation_service() -> ImageGenerationService:
    return get_image_generation_service()
