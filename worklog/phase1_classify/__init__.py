"""
Phase 1: 条目分类 (Entry Classification)
为每个条目确定类别（update / thought）和 notable 标记
"""

from .category_rules import CATEGORY_UPDATE, CATEGORY_THOUGHT, CATEGORIES
from .entry_classifier import EntryClassifier

__all__ = [
    'CATEGORY_UPDATE',
    'CATEGORY_THOUGHT',
    'CATEGORIES',
    'EntryClassifier',
]
