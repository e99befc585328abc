"""
生图 API
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StringConstraints

from pixology.api.deps import get_current_user_id, get_generation_service
from pixology.models.generation_record import GenerationRecord
from pixology.models.style_parameters import StyleParameters
from pixology.services.image_service import ImageGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


class GenerateImageRequest(BaseModel):
    """生图请求"""
    prompt: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=1000)]
    style_parameters: Optional[StyleParameters] = None


def _record_to_response(record: GenerationRecord) -> dict:
    """将 GenerationRecord 转换为响应字典"""
    return {
        "id": record.id,
        "user_id": record.user_id,
        "prompt": record.prompt,
        "style_parameters": record.style_parameters,
        "status": record.status,
        "artifact_url": record.artifact_url,
        "artifact_size_bytes": record.artifact_size_bytes,
        "mime_type": record.mime_type,
        "dimensions": record.dimensions,
        "error_summary": record.error_summary,
        "created_at": record.created_at.isoformat(),
        "updated_at": record.updated_at.isoformat(),
    }


@router.get("/health")
async def health_check():
    """健康检查"""
    return {"success": True, "message": "Pixology API 运行中"}


@router.post("/generate/image", status_code=201)
async def generate_image(
    request: GenerateImageRequest,
    user_id: str = Depends(get_current_user_id),
    service: ImageGenerationService = Depends(get_generation_service),
):
    """
    生成图片

    配额、生图、上传、记录全部由编排服务完成，失败时由全局异常处理返回通用错误
    """
    logger.info(
        f"收到生图请求: user_id={user_id}, prompt={request.prompt[:50]}, "
        f"has_style={request.style_parameters is not None}"
    )

    result = await service.generate(user_id, request.prompt, request.style_parameters)

    return {
        "success": True,
        "image": {
            "id": result.id,
            "artifact_url": result.artifact_url,
            "prompt": result.prompt,
            "style_parameters": (
                result.style_parameters.model_dump(exclude_none=True)
                if result.style_parameters
                else None
            ),
            "dimensions": result.dimensions.model_dump(),
            "created_at": result.created_at.isoformat(),
        },
    }


@router.get("/images/history")
async def get_image_history(
    limit: int = Query(default=50, ge=1, le=200),
    user_id: str = Depends(get_current_user_id),
    service: ImageGenerationService = Depends(get_generation_service),
):
    """获取当前用户的生图历史"""
    records = service.get_user_history(user_id, limit=limit)
    return {
        "success": True,
        "images": [_record_to_response(record) for record in records],
        "count": len(records),
    }


@router.get("/images/{image_id}")
async def get_image(
    image_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ImageGenerationService = Depends(get_generation_service),
):
    """获取单张图片记录（仅所属用户可见）"""
    record = service.get_image(user_id, image_id)
    return {"success": True, "image": _record_to_response(record)}
