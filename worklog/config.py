"""
配置模块
从环境变量（.env）读取流程配置，并在流程开始前做快速校验
"""

import os
import math
import logging
from datetime import timedelta
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# 加载环境变量
load_dotenv()

logger = logging.getLogger(__name__)

MERGE_STRATEGIES = ('rule', 'binary', 'partition')
TIMESTAMP_POLICIES = ('earliest', 'latest')

# 不同策略下的时间间隔阈值（秒）
GAP_THRESHOLD_PRESETS = {
    'rule': 5 * 60,
    'binary': 10 * 60,
    'partition': 10 * 60,
}

# 外部判断调用之间的间隔（秒）
PACING_PRESETS = {
    'rule': 0.0,
    'binary': 0.5,
    'partition': 1.0,
}


def get_pipeline_config(strategy: Optional[str] = None) -> Dict[str, Any]:
    """
    从环境变量获取流程配置

    Args:
        strategy: 覆盖 WORKLOG_MERGE_STRATEGY；阈值和间隔的默认值跟随策略
    """
    if strategy is None:
        strategy = os.getenv('WORKLOG_MERGE_STRATEGY', 'rule')
    strategy = strategy.strip().lower()

    return {
        'merge_strategy': strategy,
        'gap_threshold': os.getenv('WORKLOG_GAP_THRESHOLD',
                                   GAP_THRESHOLD_PRESETS.get(strategy, GAP_THRESHOLD_PRESETS['rule'])),
        'timestamp_policy': os.getenv('WORKLOG_TIMESTAMP_POLICY', 'earliest').strip().lower(),
        'pacing_seconds': os.getenv('WORKLOG_ORACLE_PACING',
                                    PACING_PRESETS.get(strategy, 0.0)),
        'model_name': os.getenv('WORKLOG_ORACLE_MODEL', 'gemini-2.5-flash-lite'),
        'project_id': os.getenv('GOOGLE_CLOUD_PROJECT'),
        'location': os.getenv('GOOGLE_CLOUD_LOCATION', 'us-central1'),
    }


def to_seconds(value: Any, name: str = 'gap_threshold') -> float:
    """
    把阈值统一转换成秒

    Args:
        value: int / float / 数字字符串 / timedelta
        name: 配置项名称（用于错误信息）

    Returns:
        秒数（必须为正）
    """
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool):
        raise ConfigurationError(f"{name} 必须是数字，而不是布尔值")
    else:
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} 不是合法的数字: {value!r}")

    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigurationError(f"{name} 必须为有限的正数: {value!r}")

    return seconds


def validate_pipeline_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    校验配置，返回规范化后的配置副本

    Args:
        config: get_pipeline_config() 返回的字典（或调用方自己构造的字典）

    Returns:
        规范化后的配置（gap_threshold / pacing_seconds 为 float）

    Raises:
        ConfigurationError: 配置非法
    """
    normalized = dict(config)

    strategy = normalized.get('merge_strategy', 'rule')
    if strategy not in MERGE_STRATEGIES:
        raise ConfigurationError(
            f"未知的合并策略: {strategy!r} (可选: {', '.join(MERGE_STRATEGIES)})")
    normalized['merge_strategy'] = strategy

    policy = normalized.get('timestamp_policy', 'earliest')
    if policy not in TIMESTAMP_POLICIES:
        raise ConfigurationError(
            f"未知的时间戳策略: {policy!r} (可选: {', '.join(TIMESTAMP_POLICIES)})")
    normalized['timestamp_policy'] = policy

    normalized['gap_threshold'] = to_seconds(
        normalized.get('gap_threshold', GAP_THRESHOLD_PRESETS[strategy]))

    pacing = normalized.get('pacing_seconds', PACING_PRESETS[strategy])
    try:
        pacing = float(pacing)
    except (TypeError, ValueError):
        raise ConfigurationError(f"pacing_seconds 不是合法的数字: {pacing!r}")
    if not math.isfinite(pacing) or pacing < 0:
        raise ConfigurationError(f"pacing_seconds 必须是有限的非负数: {pacing!r}")
    normalized['pacing_seconds'] = pacing

    logger.debug(f"配置校验通过: 策略={strategy}, 阈值={normalized['gap_threshold']:.0f}秒, "
                 f"时间戳={policy}")

    return normalized


def check_oracle_environment() -> Dict[str, Any]:
    """
    检查外部判断（Gemini）所需的环境变量

    Returns:
        {
            'ok': bool,              # 必需变量是否齐全
            'missing': List[str],    # 缺失的必需变量
            'variables': Dict[str, Optional[str]]
        }
    """
    required_vars = ['GOOGLE_CLOUD_PROJECT']
    optional_vars = ['GOOGLE_APPLICATION_CREDENTIALS', 'GOOGLE_CLOUD_LOCATION']

    variables = {var: os.getenv(var) for var in required_vars + optional_vars}
    missing = [var for var in required_vars if not variables[var]]

    for var in required_vars:
        if variables[var]:
            logger.debug(f"  ✅ {var}: {variables[var]}")
        else:
            logger.warning(f"  ❌ {var}: 未设置")

    credentials = variables['GOOGLE_APPLICATION_CREDENTIALS']
    if credentials and not os.path.exists(credentials):
        logger.warning(f"  ⚠️  Service Account 文件不存在: {credentials}")

    return {
        'ok': not missing,
        'missing': missing,
        'variables': variables,
    }
