"""
生图记录模型
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class GenerationStatus(str, Enum):
    """记录终态（只在结果确定后写入一次，没有对外可见的 pending 状态）"""

    COMPLETED = "completed"
    FAILED = "failed"


class GenerationRecord(SQLModel, table=True):
    """
    生图记录表

    每次生图尝试对应一条记录，以尝试 ID 为主键，写入后不再修改
    """

    __tablename__ = "generation_records"

    # 尝试 ID，在调用任何外部服务前生成
    id: str = Field(primary_key=True, description="生图尝试ID")
    user_id: str = Field(index=True, description="所属用户ID")

    # 请求参数
    prompt: str = Field(description="用户原始Prompt（未拼接风格）")
    style_parameters: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="风格参数",
    )

    # 状态
    status: str = Field(description="状态: completed/failed")

    # 成功时填写
    artifact_url: Optional[str] = Field(default=None, description="图片公开访问URL")
    artifact_path: Optional[str] = Field(default=None, description="对象存储中的路径")
    artifact_size_bytes: Optional[int] = Field(default=None, description="文件大小（字节）")
    mime_type: Optional[str] = Field(default=None, description="MIME 类型")
    dimensions: Optional[dict] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="实际使用的尺寸 {width, height}",
    )

    # 失败时填写
    error_summary: Optional[str] = Field(default=None, description="错误摘要（不含敏感信息）")

    # 时间戳（由记录服务在保存时写入）
    created_at: datetime = Field(default_factory=datetime.now, index=True)
    updated_at: datetime = Field(default_factory=datetime.now)
