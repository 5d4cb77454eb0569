"""
Phase 4: thread 合并 (Consolidation)
把判定为同一 thread 的条目合并成一个条目，并输出按时间降序的结果
"""

from .entry_merger import EntryMerger
from .consolidation_pipeline import Thread_Consolidation_Pipeline, run_pipeline

__all__ = [
    'EntryMerger',
    'Thread_Consolidation_Pipeline',
    'run_pipeline',
]
