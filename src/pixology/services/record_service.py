"""
生图记录服务 - 记录的创建与查询
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from pixology.core.exceptions import PersistenceFailure
from pixology.models.generation_record import GenerationRecord

logger = logging.getLogger(__name__)


class MetadataRecorder:
    """
    生图记录读写

    只有创建、按 ID 读取、按用户列出三种操作；记录写入后不做原地更新
    """

    def __init__(self, engine: Optional[Engine] = None):
        if engine is None:
            from pixology.core.database import engine as default_engine

            engine = default_engine
        self.engine = engine

    def save(self, record: GenerationRecord) -> GenerationRecord:
        """
        保存记录，时间戳由这里写入

        主键重复时插入失败，不会覆盖已有记录

        Raises:
            PersistenceFailure: 写入失败
        """
        now = datetime.now()
        record.created_at = now
        record.updated_at = now

        try:
            with Session(self.engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
        except Exception as e:
            logger.error(f"保存生图记录失败: id={record.id}, error={e}", exc_info=True)
            raise PersistenceFailure() from e

        logger.info(f"生图记录已保存: id={record.id}, status={record.status}")
        return record

    def get(self, record_id: str) -> Optional[GenerationRecord]:
        """按 ID 获取记录，不存在返回 None"""
        with Session(self.engine) as session:
            return session.get(GenerationRecord, record_id)

    def list_by_user(self, user_id: str, limit: int = 50) -> list[GenerationRecord]:
        """获取用户的记录（按创建时间倒序）"""
        with Session(self.engine) as session:
            statement = (
                select(GenerationRecord)
                .where(GenerationRecord.user_id == user_id)
                .order_by(GenerationRecord.created_at.desc())
                .limit(limit)
            )
            return list(session.exec(statement).all())
