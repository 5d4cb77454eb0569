"""
模块 3: 时间分组器 (Temporal Grouper)
职责：按时间间隔把条目流切分为候选簇（链式：只和簇中最后一个条目比较）
"""

from typing import List, Dict, Any, Union
from datetime import timedelta
import logging

from .gap_policy import GapPolicy
from .stream_sorter import entry_time

logger = logging.getLogger(__name__)


class TemporalGrouper:
    """时间分组器"""

    def __init__(self, gap_threshold: Union[int, float, timedelta] = 300):
        """
        初始化分组器

        Args:
            gap_threshold: 时间阈值（秒或 timedelta）
        """
        self.gap_policy = GapPolicy(gap_threshold)

    @property
    def gap_threshold(self) -> float:
        return self.gap_policy.gap_threshold

    def group(self, entries: List[Dict[str, Any]]) -> List[List[Dict[str, Any]]]:
        """
        单次从左到右扫描，切分候选簇

        Args:
            entries: 条目列表（不要求有序，时间戳必须可解析）

        Returns:
            候选簇列表，每个簇内按时间升序排列，簇之间也按时间升序排列
        """
        sorted_entries = sorted(entries, key=entry_time)

        clusters: List[List[Dict[str, Any]]] = []
        current_cluster: List[Dict[str, Any]] = []

        for entry in sorted_entries:
            if not current_cluster:
                current_cluster.append(entry)
                continue

            # Hit: 连接 → 加入当前簇；Miss: 断开 → 封存当前簇，开始新簇
            if self.gap_policy.is_connected(current_cluster[-1], entry):
                current_cluster.append(entry)
            else:
                clusters.append(current_cluster)
                current_cluster = [entry]

        if current_cluster:
            clusters.append(current_cluster)

        multi_count = sum(1 for cluster in clusters if len(cluster) > 1)
        logger.info(f"✅ 时间分组完成: {len(clusters)} 个簇 (其中 {multi_count} 个包含多个条目, "
                    f"阈值 {self.gap_threshold:.0f}秒)")

        return clusters

    def get_time_span(self, cluster: List[Dict[str, Any]]) -> float:
        """
        计算簇的时间跨度（秒）

        Args:
            cluster: 按时间升序排列的条目列表

        Returns:
            时间跨度（秒）
        """
        if not cluster:
            return 0.0

        return (entry_time(cluster[-1]) - entry_time(cluster[0])).total_seconds()
