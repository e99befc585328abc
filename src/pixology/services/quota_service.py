"""
每日生图配额检查
"""
import logging
from datetime import datetime
from typing import Callable

from pixology.services.record_service import MetadataRecorder

logger = logging.getLogger(__name__)


class QuotaGate:
    """
    每日配额闸门

    统计当天（服务器本地时间 0 点起）该用户的记录数，成功失败都计入。

    注意：
    - 读取失败时放行（返回未达上限），可用性优先，不要改成拒绝。
    - 检查与写入不是原子操作，同一用户并发请求可能略微超出上限。
    """

    def __init__(
        self,
        recorder: MetadataRecorder,
        daily_limit: int,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.recorder = recorder
        self.daily_limit = daily_limit
        self._now = now

    def start_of_day(self) -> datetime:
        return self._now().replace(hour=0, minute=0, second=0, microsecond=0)

    def count_today(self, user_id: str) -> int:
        """统计当天记录数，最多读取 daily_limit + 1 条"""
        start_of_day = self.start_of_day()
        records = self.recorder.list_by_user(user_id, limit=self.daily_limit + 1)
        return sum(1 for record in records if record.created_at >= start_of_day)

    def has_reached_daily_limit(self, user_id: str) -> bool:
        """
        检查用户是否已达当日上限

        Args:
            user_id: 用户ID

        Returns:
            True 表示已达上限；读取失败时返回 False
        """
        try:
            today_count = self.count_today(user_id)
        except Exception as e:
            logger.error(f"检查每日配额失败，按未达上限放行: user_id={user_id}, error={e}")
            return False

        has_reached = today_count >= self.daily_limit
        logger.info(
            f"每日配额检查: user_id={user_id}, today={today_count}, "
            f"limit={self.daily_limit}, reached={has_reached}"
        )
        return has_reached

