"""
模块 2: 条目分类器 (Entry Classifier)
职责：根据内容为每个条目确定类别（update / thought）和 notable 标记
"""

import logging
from typing import Dict, Any, List, Tuple

from .category_rules import (
    CATEGORY_UPDATE,
    CATEGORY_THOUGHT,
    CATEGORIES,
    SHORT_THRESHOLD,
    LONG_THRESHOLD,
    NOTABLE_LENGTH_THRESHOLD,
    UPDATE_PATTERNS,
    THOUGHT_PATTERNS,
    NOTABLE_PATTERNS,
    REFLECTIVE_WORDS,
    compile_patterns,
)

logger = logging.getLogger(__name__)


class EntryClassifier:
    """基于有序规则的条目分类器"""

    def __init__(self,
                 short_threshold: int = SHORT_THRESHOLD,
                 long_threshold: int = LONG_THRESHOLD,
                 notable_length_threshold: int = NOTABLE_LENGTH_THRESHOLD):
        """
        初始化分类器

        Args:
            short_threshold: 无规则命中时，短于此长度的内容视为 update
            long_threshold: 无规则命中时，长于此长度的内容视为 thought
            notable_length_threshold: thought 超过此长度即标记为 notable
        """
        self.short_threshold = short_threshold
        self.long_threshold = long_threshold
        self.notable_length_threshold = notable_length_threshold

        # 编译正则表达式（顺序即优先级：update 在前）
        self.category_rules: List[Tuple[str, Any]] = (
            [(CATEGORY_UPDATE, pattern) for pattern in compile_patterns(UPDATE_PATTERNS)] +
            [(CATEGORY_THOUGHT, pattern) for pattern in compile_patterns(THOUGHT_PATTERNS)]
        )
        self.notable_patterns = compile_patterns(NOTABLE_PATTERNS)

        logger.debug(f"初始化分类器: {len(self.category_rules)} 条类别规则, "
                     f"{len(self.notable_patterns)} 条 notable 规则")

    def classify(self, content: str) -> Tuple[str, bool]:
        """
        对一段内容进行分类

        Args:
            content: 条目内容

        Returns:
            (category, notable)，update 永远不会是 notable
        """
        trimmed = (content or '').strip()

        # 1. 有序规则：第一个命中的规则决定类别
        for category, pattern in self.category_rules:
            if pattern.search(trimmed):
                if category == CATEGORY_UPDATE:
                    return CATEGORY_UPDATE, False
                return CATEGORY_THOUGHT, self._is_notable(trimmed)

        # 2. 长度兜底
        if len(trimmed) < self.short_threshold:
            return CATEGORY_UPDATE, False

        if len(trimmed) > self.long_threshold:
            return CATEGORY_THOUGHT, self._is_notable(trimmed)

        # 3. 中等长度：检查反思类词汇
        lowered = trimmed.lower()
        if any(word in lowered for word in REFLECTIVE_WORDS):
            return CATEGORY_THOUGHT, self._is_notable(trimmed)

        return CATEGORY_UPDATE, False

    def _is_notable(self, trimmed: str) -> bool:
        """thought 的 notable 判断：命中洞察类规则，或内容足够长"""
        for pattern in self.notable_patterns:
            if pattern.search(trimmed):
                return True

        return len(trimmed) > self.notable_length_threshold

    def classify_entry(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        """
        返回分类后的条目副本（不修改原条目）

        已有合法类别的条目直接沿用原类别（支持增量运行），
        只保证 notable 字段存在且 update 不会被标记为 notable。

        Args:
            entry: 条目字典

        Returns:
            新的条目字典
        """
        classified = dict(entry)

        if classified.get('category') in CATEGORIES:
            notable = bool(classified.get('notable', False))
            classified['notable'] = notable and classified['category'] == CATEGORY_THOUGHT
            return classified

        category, notable = self.classify(classified.get('content', ''))
        classified['category'] = category
        classified['notable'] = notable
        return classified

    def classify_all(self, entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        批量分类

        Args:
            entries: 条目列表

        Returns:
            分类后的条目副本列表（顺序不变）
        """
        pending = sum(1 for entry in entries if entry.get('category') not in CATEGORIES)
        logger.info(f"🏷️  开始分类: {len(entries)} 个条目 (其中 {pending} 个待分类)")

        classified = [self.classify_entry(entry) for entry in entries]

        updates = sum(1 for entry in classified if entry['category'] == CATEGORY_UPDATE)
        thoughts = len(classified) - updates
        notable = sum(1 for entry in classified if entry['notable'])

        logger.info(f"✅ 分类完成: update={updates}, thought={thoughts}, notable={notable}")

        return classified
