"""
模块 1: 条目合并器 (Entry Merger)
职责：把判定为同一 thread 的一组条目打包成一个新条目
"""

from typing import List, Dict, Any
import logging

from ..config import TIMESTAMP_POLICIES
from ..errors import ConfigurationError
from ..phase1_classify import CATEGORY_UPDATE, CATEGORY_THOUGHT
from ..phase2_thread_fusion import entry_time

logger = logging.getLogger(__name__)

CONTENT_SEPARATOR = '\n\n'


class EntryMerger:
    """条目合并器"""

    def __init__(self, timestamp_policy: str = 'earliest'):
        """
        初始化合并器

        Args:
            timestamp_policy: 合并后条目的时间戳
                'earliest' - 使用最早成员的时间（thread 开始时间）
                'latest'   - 使用最晚成员的时间（thread 完成时间）
        """
        if timestamp_policy not in TIMESTAMP_POLICIES:
            raise ConfigurationError(
                f"未知的时间戳策略: {timestamp_policy!r} (可选: {', '.join(TIMESTAMP_POLICIES)})")

        self.timestamp_policy = timestamp_policy
        logger.debug(f"初始化合并器: 时间戳策略={timestamp_policy}")

    def merge(self, group: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        合并一组条目

        Args:
            group: 至少 1 个条目，顺序任意

        Returns:
            单个条目时原样返回；多个条目时返回新条目：
            {
                'id': str,          # 最早成员的 id
                'content': str,     # 按时间升序、以空行连接
                'timestamp': ...,   # 按 timestamp_policy 取最早或最晚成员的原始值
                'category': str,    # 任一成员是 thought 则为 thought
                'notable': bool     # 任一成员 notable 则为 True
            }
        """
        if not group:
            raise ValueError("不能合并空的分组")

        if len(group) == 1:
            return group[0]

        # 阅读顺序：按时间升序，与分组到达的顺序无关
        ordered = sorted(group, key=entry_time)

        anchor = ordered[0] if self.timestamp_policy == 'earliest' else ordered[-1]

        merged = {
            'id': ordered[0]['id'],
            'content': CONTENT_SEPARATOR.join(entry['content'] for entry in ordered),
            'timestamp': anchor['timestamp'],
            'category': (CATEGORY_THOUGHT
                         if any(entry.get('category') == CATEGORY_THOUGHT for entry in ordered)
                         else CATEGORY_UPDATE),
            'notable': any(bool(entry.get('notable')) for entry in ordered),
        }

        logger.info(f"📦 合并 thread: {len(ordered)} 个条目 → {merged['id']} "
                    f"({self._preview(ordered[0]['content'])})")

        return merged

    def _preview(self, content: str, limit: int = 60) -> str:
        return content if len(content) <= limit else content[:limit] + '...'
