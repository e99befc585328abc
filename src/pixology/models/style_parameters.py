"""
风格参数值对象
"""
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

# 风格文本字段：去掉首尾空白，最长 100 字符
StyleText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class ImageQuality(str, Enum):
    """图片质量档位"""

    STANDARD = "standard"
    HIGH = "high"
    ULTRA = "ultra"


class Dimensions(BaseModel):
    """
    图片尺寸（像素）

    宽高可以只给一个，缺失的一边由默认尺寸补齐
    """

    model_config = ConfigDict(frozen=True)

    width: Optional[int] = Field(default=None, ge=256, le=2048)
    height: Optional[int] = Field(default=None, ge=256, le=2048)


class StyleParameters(BaseModel):
    """
    生图风格参数

    所有字段均可选，一旦随记录保存即不再修改
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    style: Optional[StyleText] = Field(default=None, description="艺术风格，如 realistic/cartoon")
    color_scheme: Optional[StyleText] = Field(default=None, description="配色方案")
    mood: Optional[StyleText] = Field(default=None, description="氛围")
    modifiers: Optional[list[str]] = Field(default=None, description="附加修饰词，原样追加")
    dimensions: Optional[Dimensions] = Field(default=None, description="期望尺寸")
    quality: Optional[ImageQuality] = Field(default=None, description="质量档位")
