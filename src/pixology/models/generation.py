"""
生图流程中传递的数据对象
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .style_parameters import Dimensions, StyleParameters


@dataclass(frozen=True)
class RawImage:
    """模型返回的原始图片"""

    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class ArtifactRef:
    """已保存图片的引用"""

    url: str
    path: str
    size_bytes: int
    mime_type: str


class GenerationResult(BaseModel):
    """一次成功生图的结果"""

    id: str
    artifact_url: str
    dimensions: Dimensions
    artifact_size_bytes: int
    prompt: str
    style_parameters: Optional[StyleParameters] = None
    created_at: datetime
