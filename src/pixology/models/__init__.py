"""
数据模型模块
"""
from .generation import ArtifactRef, GenerationResult, RawImage
from .generation_record import GenerationRecord, GenerationStatus
from .style_parameters import Dimensions, ImageQuality, StyleParameters

__all__ = [
    "ArtifactRef",
    "GenerationResult",
    "RawImage",
    "GenerationRecord",
    "GenerationStatus",
    "Dimensions",
    "ImageQuality",
    "StyleParameters",
]
