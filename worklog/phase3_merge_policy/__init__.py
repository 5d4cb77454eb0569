"""
Phase 3: 合并策略 (Merge Policy)
判断候选簇中哪些条目是被拆开的同一段思考：规则判断或外部叙事判断
"""

from .merge_policy import MergePolicy, singleton_partition, whole_partition
from .rule_oracle import RuleOracle
from .prompt_engine import PromptEngine
from .llm_gateway import LLMGateway
from .response_validator import ResponseValidator
from .narrative_oracle import NarrativeOracle
from .narrative_policy import NarrativeMergePolicy

__all__ = [
    'MergePolicy',
    'singleton_partition',
    'whole_partition',
    'RuleOracle',
    'PromptEngine',
    'LLMGateway',
    'ResponseValidator',
    'NarrativeOracle',
    'NarrativeMergePolicy',
]
