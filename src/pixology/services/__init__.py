"""
服务模块
"""
from .image_service import ImageGenerationService, get_image_generation_service
from .prompt_service import compose_prompt
from .quota_service import QuotaGate
from .record_service import MetadataRecorder

__all__ = [
    "ImageGenerationService",
    "get_image_generation_service",
    "compose_prompt",
    "QuotaGate",
    "MetadataRecorder",
]
