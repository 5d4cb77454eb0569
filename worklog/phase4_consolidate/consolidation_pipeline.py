"""
第四阶段主 Pipeline: Thread_Consolidation_Pipeline
整合分类、时间分组、合并策略和合并器，实现完整的 thread 合并流程
"""

import logging
from typing import List, Dict, Any, Optional, Union
from datetime import timedelta

from ..config import validate_pipeline_config, check_oracle_environment
from ..errors import ConfigurationError
from ..phase1_classify import EntryClassifier
from ..phase2_thread_fusion import StreamSorter, TemporalGrouper, entry_time
from ..phase3_merge_policy import MergePolicy, RuleOracle, NarrativeOracle, NarrativeMergePolicy
from .entry_merger import EntryMerger

logger = logging.getLogger(__name__)


class Thread_Consolidation_Pipeline:
    """第四阶段：thread 合并 Pipeline"""

    def __init__(self,
                 gap_threshold: Union[int, float, timedelta] = 300,
                 merge_policy: Optional[MergePolicy] = None,
                 classifier: Optional[EntryClassifier] = None,
                 timestamp_policy: str = 'earliest'):
        """
        初始化 Thread Consolidation Pipeline

        Args:
            gap_threshold: 时间阈值（秒或 timedelta），间隔超过此值不属于同一候选簇
            merge_policy: 合并策略（默认 RuleOracle）
            classifier: 分类器（默认阈值的 EntryClassifier）
            timestamp_policy: 合并后条目的时间戳策略（'earliest' / 'latest'）

        Raises:
            ConfigurationError: 配置非法（在处理任何条目之前失败）
        """
        logger.info("=" * 60)
        logger.info("初始化 Thread Consolidation Pipeline")
        logger.info("=" * 60)

        if merge_policy is not None and not isinstance(merge_policy, MergePolicy):
            raise ConfigurationError(f"merge_policy 必须是 MergePolicy: {type(merge_policy).__name__}")

        # 初始化各个模块
        self.sorter = StreamSorter()                                  # 校验 + 排序
        self.classifier = classifier or EntryClassifier()             # Phase 1
        self.grouper = TemporalGrouper(gap_threshold)                 # Phase 2
        self.merge_policy = merge_policy or RuleOracle()              # Phase 3
        self.merger = EntryMerger(timestamp_policy)                   # Phase 4

        self.last_report: Dict[str, Any] = {}

        logger.info(f"✅ Thread Consolidation Pipeline 初始化完成 "
                    f"(策略: {self.merge_policy.name}, 阈值: {self.grouper.gap_threshold:.0f}秒, "
                    f"时间戳: {timestamp_policy})")

    @classmethod
    def from_config(cls, config: Dict[str, Any], oracle=None) -> 'Thread_Consolidation_Pipeline':
        """
        根据配置字典构建 Pipeline

        Args:
            config: get_pipeline_config() 的返回值（或同结构的字典）
            oracle: 可选的叙事判断对象（带 judge 方法）；为 None 且策略不是 rule 时创建 NarrativeOracle

        Returns:
            Pipeline 实例

        Raises:
            ConfigurationError: 配置非法，或无法创建叙事判断（缺少 vertexai、项目ID等）
        """
        config = validate_pipeline_config(config)
        strategy = config['merge_strategy']

        if strategy == 'rule':
            merge_policy = RuleOracle()
        else:
            if oracle is None:
                environment = check_oracle_environment()
                if not environment['ok'] and not config.get('project_id'):
                    raise ConfigurationError(
                        f"叙事判断缺少环境变量: {', '.join(environment['missing'])}")
                try:
                    oracle = NarrativeOracle(
                        mode=strategy,
                        model_name=config.get('model_name', 'gemini-2.5-flash-lite'),
                        project_id=config.get('project_id'),
                        location=config.get('location', 'us-central1')
                    )
                except ConfigurationError:
                    raise
                except (ImportError, ValueError) as e:
                    raise ConfigurationError(f"无法创建叙事判断 ({strategy}): {e}") from e
            merge_policy = NarrativeMergePolicy(oracle, pacing_seconds=config['pacing_seconds'])

        return cls(
            gap_threshold=config['gap_threshold'],
            merge_policy=merge_policy,
            timestamp_policy=config['timestamp_policy']
        )

    def run(self, raw_entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        运行 thread 合并流程

        Args:
            raw_entries: 条目列表（可能无序，可以已分类）
                [
                    {
                        'id': str,
                        'content': str,
                        'timestamp': str | datetime,
                        'category': 'update' | 'thought' (可选),
                        'notable': bool (可选)
                    },
                    ...
                ]

        Returns:
            合并后的条目列表，按时间降序排列（最新的在前）
        """
        logger.info("=" * 60)
        logger.info("开始 thread 合并流程")
        logger.info("=" * 60)

        self.merge_policy.reset()
        self.last_report = {
            'input_count': len(raw_entries),
            'output_count': 0,
            'rejected': [],
            'warnings': [],
            'merged_groups': [],
            'cluster_count': 0,
        }

        # 1. 校验并分类（已分类的条目原样通过）
        logger.info("\n[步骤 1] 校验和分类...")
        valid_entries, rejected = self.sorter.sort_and_validate(raw_entries)
        self.last_report['rejected'] = rejected

        if not valid_entries:
            logger.warning("⚠️  没有有效条目")
            return []

        classified = self.classifier.classify_all(valid_entries)

        # 2. 时间分组
        logger.info("\n[步骤 2] 时间分组...")
        clusters = self.grouper.group(classified)
        self.last_report['cluster_count'] = len(clusters)

        # 3-4. 合并策略 + 合并
        logger.info(f"\n[步骤 3] 合并判断 (策略: {self.merge_policy.name})...")
        results = []

        for idx, cluster in enumerate(clusters, 1):
            if len(cluster) == 1:
                results.append(cluster[0])
                continue

            logger.info(f"\n检查簇 #{idx}/{len(clusters)}: {len(cluster)} 个条目")
            for position, entry in enumerate(cluster):
                logger.debug(f"  [{position}] ({entry['category']}) {entry['content'][:50]}")

            partition = self.merge_policy.partition(cluster)

            for indices in partition:
                group = [cluster[position] for position in indices]
                results.append(self.merger.merge(group))
                if len(group) > 1:
                    self.last_report['merged_groups'].append([entry['id'] for entry in group])

        # 5. 按时间降序排列（最新的在前）
        results.sort(key=entry_time, reverse=True)

        self.last_report['output_count'] = len(results)
        self.last_report['warnings'] = list(self.merge_policy.warnings)

        logger.info("\n" + "=" * 60)
        logger.info(f"✅ thread 合并完成: {len(raw_entries)} → {len(results)} 个条目")
        logger.info("=" * 60)

        logger.info(f"\n📊 统计信息:")
        logger.info(f"   候选簇数: {len(clusters)}")
        logger.info(f"   合并 thread 数: {len(self.last_report['merged_groups'])}")
        logger.info(f"   拒绝条目数: {len(rejected)}")
        if self.last_report['warnings']:
            logger.warning(f"   ⚠️  降级判断: {len(self.last_report['warnings'])} 次")

        return results


def run_pipeline(raw_entries: List[Dict[str, Any]],
                 classifier_config: Optional[Dict[str, Any]] = None,
                 gap_threshold: Union[int, float, timedelta] = 300,
                 merge_policy: Optional[MergePolicy] = None,
                 timestamp_policy: str = 'earliest') -> List[Dict[str, Any]]:
    """
    便捷函数：一次性运行整个流程

    Args:
        raw_entries: 条目列表
        classifier_config: EntryClassifier 的参数（short_threshold 等）
        gap_threshold: 时间阈值（秒或 timedelta）
        merge_policy: 合并策略（默认 RuleOracle）
        timestamp_policy: 合并后条目的时间戳策略

    Returns:
        合并后的条目列表（按时间降序）
    """
    pipeline = Thread_Consolidation_Pipeline(
        gap_threshold=gap_threshold,
        merge_policy=merge_policy,
        classifier=EntryClassifier(**(classifier_config or {})),
        timestamp_policy=timestamp_policy
    )
    return pipeline.run(raw_entries)
