"""
模块 7: 叙事合并策略 (Narrative Merge Policy)
职责：调用外部叙事判断，并对其输出做防御性校验；判断失败时降级为"不合并"
"""

import time
import logging
from typing import List, Dict, Any, Callable

from .merge_policy import MergePolicy, singleton_partition, whole_partition
from .response_validator import ResponseValidator

logger = logging.getLogger(__name__)


class NarrativeMergePolicy(MergePolicy):
    """外部叙事判断的合并策略"""

    def __init__(self, oracle, pacing_seconds: float = 1.0,
                 sleep: Callable[[float], None] = time.sleep):
        """
        初始化叙事合并策略

        Args:
            oracle: 任何带 judge(ordered_texts) 方法的对象，返回下标划分或 bool（binary 判断）
                    （NarrativeOracle、本地模型、测试桩）
            pacing_seconds: 相邻两次判断之间的等待时间（秒），只为照顾外部服务的速率限制
            sleep: 等待函数
        """
        super().__init__()
        self.oracle = oracle
        self.pacing_seconds = pacing_seconds
        self.sleep = sleep
        self.validator = ResponseValidator()
        self.judgment_count = 0
        self.fallback_count = 0

    @property
    def name(self) -> str:
        return getattr(self.oracle, 'mode', 'narrative')

    def reset(self):
        super().reset()
        self.judgment_count = 0
        self.fallback_count = 0

    def partition(self, cluster: List[Dict[str, Any]]) -> List[List[int]]:
        """
        判断一个候选簇的 thread 划分

        Args:
            cluster: 已分类、按时间升序排列的条目列表

        Returns:
            合法的下标划分；判断失败或划分非法时每个条目各自成组
        """
        size = len(cluster)
        if size < 2:
            return singleton_partition(size)

        # 速率控制：第一次判断之前不等待
        if self.judgment_count > 0 and self.pacing_seconds > 0:
            self.sleep(self.pacing_seconds)
        self.judgment_count += 1

        ordered_texts = [
            (idx, entry.get('category', ''), entry['content'])
            for idx, entry in enumerate(cluster)
        ]
        cluster_ids = [entry['id'] for entry in cluster]

        try:
            partition = self.oracle.judge(ordered_texts)
        except Exception as e:
            self.fallback_count += 1
            self.warn(f"叙事判断失败，簇 {cluster_ids} 保持不合并: {type(e).__name__}: {e}")
            return singleton_partition(size)

        # binary 判断可以直接返回 True / False
        if isinstance(partition, bool):
            partition = whole_partition(size) if partition else singleton_partition(size)

        validation = self.validator.validate_partition(partition, size)
        if not validation['is_valid']:
            self.fallback_count += 1
            self.warn(f"叙事判断返回非法划分，簇 {cluster_ids} 保持不合并: "
                      f"{'; '.join(validation['warnings'])}")
            return singleton_partition(size)

        return self._enforce_category_rule(partition, cluster)

    def _enforce_category_rule(self, partition: List[List[int]],
                               cluster: List[Dict[str, Any]]) -> List[List[int]]:
        """
        不同类别的条目不能进入同一组；违反时把该组拆成单条

        Args:
            partition: 已通过结构校验的划分
            cluster: 候选簇

        Returns:
            按首个下标排序的划分
        """
        result = []
        for group in partition:
            group = sorted(group)
            categories = {cluster[idx].get('category') for idx in group}
            if len(group) > 1 and len(categories) > 1:
                self.warn(f"叙事判断把不同类别的条目分到同一组，已拆开: "
                          f"{[cluster[idx]['id'] for idx in group]}")
                result.extend([idx] for idx in group)
            else:
                result.append(group)

        result.sort(key=lambda group: group[0])
        return result
