"""
模块 2: 时间间隔策略 (Gap Policy)
职责：判断两个相邻条目在时间上是否足够接近，可以属于同一个候选簇
"""

from typing import Dict, Any, Union
from datetime import timedelta
import logging

from ..config import to_seconds
from .stream_sorter import entry_time

logger = logging.getLogger(__name__)


class GapPolicy:
    """时间间隔策略"""

    def __init__(self, gap_threshold: Union[int, float, timedelta] = 300):
        """
        初始化时间间隔策略

        Args:
            gap_threshold: 时间阈值（秒或 timedelta），间隔超过此值则断开

        Raises:
            ConfigurationError: 阈值非正或无法解析
        """
        self.gap_threshold = to_seconds(gap_threshold)
        logger.debug(f"初始化时间间隔策略: 时间阈值={self.gap_threshold:.0f}秒")

    def is_connected(self, last_entry: Dict[str, Any], current_entry: Dict[str, Any]) -> bool:
        """
        判断当前条目是否延续上一个条目所在的簇

        Args:
            last_entry: 簇中最后一个条目
            current_entry: 当前条目（时间不早于 last_entry）

        Returns:
            True 如果间隔不超过阈值
        """
        time_diff = (entry_time(current_entry) - entry_time(last_entry)).total_seconds()

        # 如果时间差为负（不应该发生，因为已经排序），返回 False
        if time_diff < 0:
            logger.warning(f"⚠️  时间顺序异常: {last_entry['timestamp']} > {current_entry['timestamp']}")
            return False

        connected = time_diff <= self.gap_threshold

        if connected:
            logger.debug(f"✅ 条目连接: {last_entry['id']} -> {current_entry['id']} ({time_diff:.0f}秒)")
        else:
            logger.debug(f"❌ 条目断开: {last_entry['id']} -> {current_entry['id']} ({time_diff:.0f}秒)")

        return connected
