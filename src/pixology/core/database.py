"""
数据库连接管理 - 统一管理数据库连接
"""
from sqlmodel import SQLModel, create_engine

from pixology.core.config import get_settings

# 创建全局数据库引擎
_settings = get_settings()
engine = create_engine(_settings.database_url, echo=False)


def create_tables() -> None:
    """创建全部数据表（已存在则跳过）"""
    # 导入模型以注册到 metadata
    import pixology.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


__all__ = ["engine", "create_tables"]
