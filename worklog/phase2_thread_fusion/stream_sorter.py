"""
模块 1: 时间流预处理模块 (Stream Sorter & Validator)
职责：剔除无效条目，并确保输入的条目流严格按时间顺序排列
"""

from typing import List, Dict, Any, Tuple
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime:
    """
    解析条目时间戳（ISO-8601），统一为带时区的 datetime

    Args:
        value: ISO-8601 字符串（支持结尾的 'Z'）或 datetime

    Returns:
        带时区的 datetime（无时区的值按 UTC 处理）

    Raises:
        ValueError: 无法解析
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"无法解析的时间戳: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


def entry_time(entry: Dict[str, Any]) -> datetime:
    """排序用的时间键"""
    return parse_timestamp(entry['timestamp'])


class StreamSorter:
    """时间流预处理模块"""

    def __init__(self):
        """初始化排序器"""
        pass

    def sort_and_validate(self, entries: List[Dict[str, Any]]
                          ) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        对条目列表进行验证和排序

        Args:
            entries: 条目列表（可能无序）
                [
                    {
                        'id': str,
                        'content': str,
                        'timestamp': str | datetime,
                        'category': str (可选),
                        'notable': bool (可选)
                    },
                    ...
                ]

        Returns:
            (按时间升序排列的有效条目, 被拒绝的条目报告)
            报告格式: [{'entry': Dict, 'reason': str}, ...]
        """
        if not entries:
            logger.warning("⚠️  输入条目列表为空")
            return [], []

        logger.info(f"📋 开始排序和验证: {len(entries)} 个条目")

        # 1. 验证和清洗
        valid_entries = []
        rejected = []
        seen_ids = set()

        for idx, entry in enumerate(entries):
            reason = self._validate_entry(entry, seen_ids)
            if reason:
                logger.warning(f"⚠️  跳过无效条目 #{idx}: {reason}")
                rejected.append({'entry': entry, 'reason': reason})
                continue

            seen_ids.add(entry['id'])
            valid_entries.append(entry)

        if rejected:
            logger.warning(f"⚠️  清洗完成: 移除了 {len(rejected)} 个无效条目")

        # 2. 排序：基于时间戳升序排列（时间相同则保持输入顺序）
        sorted_entries = sorted(valid_entries, key=entry_time)

        logger.info(f"✅ 排序完成: {len(sorted_entries)} 个有效条目")

        # 3. 输出时间范围信息
        if sorted_entries:
            first_time = entry_time(sorted_entries[0])
            last_time = entry_time(sorted_entries[-1])
            time_span = last_time - first_time

            logger.info(f"   时间范围: {first_time} ~ {last_time}")
            logger.info(f"   时间跨度: {time_span.total_seconds():.0f} 秒 "
                        f"({time_span.total_seconds()/3600:.2f} 小时)")

        return sorted_entries, rejected

    def _validate_entry(self, entry: Any, seen_ids: set) -> str:
        """
        验证条目是否有效

        Args:
            entry: 条目字典
            seen_ids: 已出现过的 id

        Returns:
            拒绝原因；有效时返回空字符串
        """
        if not isinstance(entry, dict):
            return "条目不是字典"

        # 检查必要字段
        for field in ('id', 'content', 'timestamp'):
            if field not in entry or entry[field] is None:
                return f"缺少必要字段 '{field}'"

        entry_id = entry['id']
        if not isinstance(entry_id, str) or not entry_id:
            return "id 不是非空字符串"

        if entry_id in seen_ids:
            return f"重复的 id '{entry_id}'"

        content = entry['content']
        if not isinstance(content, str) or not content.strip():
            return "内容为空"

        try:
            parse_timestamp(entry['timestamp'])
        except (TypeError, ValueError):
            return f"时间戳无法解析: {entry['timestamp']!r}"

        return ''
