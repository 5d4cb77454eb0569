"""
模块 1: 合并策略接口 (Merge Policy Interface)

合并策略接收一个按时间升序排列的候选簇，返回簇内下标的划分：
每个子列表是一组应当合并成一个条目的下标。规则判断（RuleOracle）
和外部叙事判断（NarrativeMergePolicy）都实现这个接口，由配置选择。
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Any

logger = logging.getLogger(__name__)


def singleton_partition(size: int) -> List[List[int]]:
    """每个条目各自成组（不合并）"""
    return [[idx] for idx in range(size)]


def whole_partition(size: int) -> List[List[int]]:
    """整个簇合并为一组"""
    return [list(range(size))] if size else []


class MergePolicy(ABC):
    """合并策略基类"""

    name = 'base'

    def __init__(self):
        # 非致命警告（降级判断等），由 Pipeline 在每次运行后收集
        self.warnings: List[str] = []

    @abstractmethod
    def partition(self, cluster: List[Dict[str, Any]]) -> List[List[int]]:
        """
        判断一个候选簇内哪些条目属于同一条 thread

        Args:
            cluster: 已分类、按时间升序排列的条目列表（至少 1 个）

        Returns:
            下标划分，例如 [[0], [1, 2, 3], [4]]
        """
        pass

    def reset(self):
        """重置状态（用于处理新的数据流）"""
        self.warnings = []

    def warn(self, message: str):
        """记录一条非致命警告"""
        logger.warning(f"⚠️  {message}")
        self.warnings.append(message)
