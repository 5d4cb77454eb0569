"""
Worklog 模块
包含 Phase 1 (条目分类)、Phase 2 (时间分组)、Phase 3 (合并策略) 和 Phase 4 (thread 合并)
"""

# Phase 1: 条目分类
from .phase1_classify import (
    EntryClassifier
)

# Phase 2: 时间分组
from .phase2_thread_fusion import (
    StreamSorter,
    GapPolicy,
    TemporalGrouper
)

# Phase 3: 合并策略
from .phase3_merge_policy import (
    MergePolicy,
    RuleOracle,
    PromptEngine,
    LLMGateway,
    ResponseValidator,
    NarrativeOracle,
    NarrativeMergePolicy
)

# Phase 4: thread 合并
from .phase4_consolidate import (
    EntryMerger,
    Thread_Consolidation_Pipeline,
    run_pipeline
)

__all__ = [
    # Phase 1
    'EntryClassifier',
    # Phase 2
    'StreamSorter',
    'GapPolicy',
    'TemporalGrouper',
    # Phase 3
    'MergePolicy',
    'RuleOracle',
    'PromptEngine',
    'LLMGateway',
    'ResponseValidator',
    'NarrativeOracle',
    'NarrativeMergePolicy',
    # Phase 4
    'EntryMerger',
    'Thread_Consolidation_Pipeline',
    'run_pipeline',
]
