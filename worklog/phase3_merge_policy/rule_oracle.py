"""
模块 2: 规则判断 (Rule Oracle)
职责：用确定性的模式/长度规则判断一个候选簇是否是被拆开的同一段思考
"""

import re
import logging
from typing import List, Dict, Any

from .merge_policy import MergePolicy, singleton_partition, whole_partition
from ..phase1_classify import CATEGORY_THOUGHT

logger = logging.getLogger(__name__)

# 延续标记：后一条以这些开头，说明它在接着上一条说
CONTINUATION_PATTERNS = [
    r"^so i",
    r"^it'll be",
    r"^it will be",
    r"^this means",
    r"^this is",
    r"^that's why",
    r"^which means",
    r"^all this to say",
    r"^in other words",
    r"^basically",
    r"^anyway",
    r"^also,",
    r"^and ",
    r"^but ",
    r"^because ",
    r"^since ",
    r"^nvm,",
    r"^fixed\.",
    r"^update:",
    r"^cont'd",
    r"^continued",
    r"^\d+\.",  # 编号列表 "1. ..."
    r"^- ",     # 项目符号
]

# 独立 update 的形态：出现在簇里就一票否决
STANDALONE_UPDATE_PATTERNS = [
    r"^completed ",
    r"^recorded \d+ roasts",
    r"^sent \d+ ",
    r"^hosted ",
    r"^crushed ",
    r"^gym",
    r"^1:1 with",
    r"^paid ",
    r"^reviewed ",
    r"^cancelled ",
    r"^purchased ",
    r"^leg day",
    r"^chest day",
    r"^back day",
    r"^arm day",
]

SUBSTANCE_THRESHOLD = 100


class RuleOracle(MergePolicy):
    """确定性的规则判断"""

    name = 'rule'

    def __init__(self, substance_threshold: int = SUBSTANCE_THRESHOLD):
        """
        初始化规则判断

        Args:
            substance_threshold: 所有成员都超过此长度时，即使没有延续标记也视为同一 thread
        """
        super().__init__()
        self.substance_threshold = substance_threshold
        self.continuation_patterns = [re.compile(p, re.IGNORECASE) for p in CONTINUATION_PATTERNS]
        self.standalone_patterns = [re.compile(p, re.IGNORECASE) for p in STANDALONE_UPDATE_PATTERNS]

    def is_standalone_update(self, content: str) -> bool:
        trimmed = content.strip()
        return any(pattern.search(trimmed) for pattern in self.standalone_patterns)

    def is_continuation(self, content: str) -> bool:
        trimmed = content.strip()
        return any(pattern.search(trimmed) for pattern in self.continuation_patterns)

    def partition(self, cluster: List[Dict[str, Any]]) -> List[List[int]]:
        """
        整簇判断：要么整簇合并，要么全部保持独立

        规则：
        1. 单个条目没有可合并的对象
        2. 任何成员不是 thought，或命中独立 update 形态 → 一票否决
        3. 每一对相邻成员都必须"连上"：后一条以延续标记开头，
           或者所有成员都超过 substance_threshold

        Args:
            cluster: 按时间升序排列的条目列表

        Returns:
            [[0..n-1]] 或 [[0], [1], ...]
        """
        size = len(cluster)
        if size < 2:
            return singleton_partition(size)

        if not self._is_eligible(cluster):
            return singleton_partition(size)

        all_substantial = all(
            len(entry['content'].strip()) > self.substance_threshold for entry in cluster
        )

        for earlier, later in zip(cluster, cluster[1:]):
            if all_substantial or self.is_continuation(later['content']):
                continue
            logger.debug(f"   ❌ 未连接: {earlier['id']} -> {later['id']} (无延续标记且内容不够长)")
            return singleton_partition(size)

        logger.debug(f"   ✅ 规则判断合并: {[entry['id'] for entry in cluster]}")
        return whole_partition(size)

    def _is_eligible(self, cluster: List[Dict[str, Any]]) -> bool:
        """簇内全部是 thought，且没有独立 update 形态"""
        for entry in cluster:
            if self.is_standalone_update(entry['content']):
                logger.debug(f"   🚫 独立 update 否决: {entry['id']}")
                return False
            if entry.get('category') != CATEGORY_THOUGHT:
                logger.debug(f"   🚫 类别不是 thought: {entry['id']} ({entry.get('category')})")
                return False
        return True
