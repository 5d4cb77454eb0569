"""
Phase 2: 时间分组 (Thread Fusion)
校验并排序条目流，按时间间隔切分为候选簇
"""

from .stream_sorter import StreamSorter, parse_timestamp, entry_time
from .gap_policy import GapPolicy
from .temporal_grouper import TemporalGrouper

__all__ = [
    'StreamSorter',
    'parse_timestamp',
    'entry_time',
    'GapPolicy',
    'TemporalGrouper',
]
