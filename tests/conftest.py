"""
测试配置
"""
import os
import sys

import pytest

# 添加 src 目录到 Python 路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# 设置测试环境变量（必须在导入前）
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["STORAGE_PUBLIC_URL_BASE"] = "https://storage.example.com/test-bucket/"


@pytest.fixture
def test_db():
    """测试数据库 fixture（内存库，多线程共享同一连接）"""
    from sqlalchemy.pool import StaticPool
    from sqlmodel import SQLModel, create_engine

    from pixology.models import GenerationRecord  # noqa: F401

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def recorder(test_db):
    from pixology.services.record_service import MetadataRecorder

    return MetadataRecorder(engine=test_db)
