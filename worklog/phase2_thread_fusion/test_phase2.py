#!/usr/bin/env python3
"""
测试脚本：验证第二阶段（校验排序 + 时间分组）的功能
"""

import sys
import logging
from pathlib import Path
from datetime import datetime, timedelta, timezone

import pytest

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from worklog.errors import ConfigurationError
from worklog.phase2_thread_fusion import StreamSorter, GapPolicy, TemporalGrouper, parse_timestamp

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

BASE_TIME = datetime(2025, 9, 1, 9, 0, 0, tzinfo=timezone.utc)


def make_entry(entry_id, offset_seconds, content=None):
    """按相对时间构造条目"""
    timestamp = (BASE_TIME + timedelta(seconds=offset_seconds)).strftime('%Y-%m-%dT%H:%M:%SZ')
    return {
        'id': entry_id,
        'content': content or f"entry {entry_id}",
        'timestamp': timestamp,
    }


def create_mock_entries():
    """
    创建模拟的条目数据（用于测试），输入故意乱序

    Returns:
        List[Dict]: 模拟的条目列表
    """
    return [
        # 第二组：10:00 之后的单条
        make_entry('e4', 60 * 60),
        # 第一组：3 个条目，每个间隔 2 分钟
        make_entry('e2', 120),
        make_entry('e1', 0),
        make_entry('e3', 240),
        # 第三组：两个条目间隔恰好 5 分钟
        make_entry('e5', 2 * 60 * 60),
        make_entry('e6', 2 * 60 * 60 + 300),
    ]


def test_parse_timestamp_variants():
    assert parse_timestamp('2025-09-01T09:00:00Z') == BASE_TIME
    assert parse_timestamp('2025-09-01T11:00:00+02:00') == BASE_TIME
    assert parse_timestamp('2025-09-01T09:00:00') == BASE_TIME
    assert parse_timestamp(datetime(2025, 9, 1, 9, 0, 0)) == BASE_TIME

    for bad in ['', 'yesterday', None, 12345]:
        with pytest.raises(ValueError):
            parse_timestamp(bad)


def test_stream_sorter_rejects_malformed_entries():
    entries = create_mock_entries() + [
        {'id': 'bad-time', 'content': 'hello', 'timestamp': 'not a date'},
        {'id': 'blank', 'content': '   ', 'timestamp': '2025-09-01T09:00:00Z'},
        {'id': 'no-content', 'timestamp': '2025-09-01T09:00:00Z'},
        {'content': 'no id', 'timestamp': '2025-09-01T09:00:00Z'},
        make_entry('e1', 30),
        'not a dict',
    ]

    valid, rejected = StreamSorter().sort_and_validate(entries)

    assert [entry['id'] for entry in valid] == ['e1', 'e2', 'e3', 'e4', 'e5', 'e6']
    assert len(rejected) == 6
    assert all(report['reason'] for report in rejected)
    assert rejected[4]['entry']['timestamp'] == make_entry('e1', 30)['timestamp']


def test_stream_sorter_empty_input():
    assert StreamSorter().sort_and_validate([]) == ([], [])


def test_gap_policy_threshold_is_inclusive():
    policy = GapPolicy(gap_threshold=300)
    assert policy.is_connected(make_entry('a', 0), make_entry('b', 300))
    assert not policy.is_connected(make_entry('a', 0), make_entry('b', 301))
    # 顺序异常时不连接
    assert not policy.is_connected(make_entry('a', 60), make_entry('b', 0))


@pytest.mark.parametrize("threshold", [0, -5, timedelta(0), 'abc', None, True])
def test_invalid_gap_threshold_fails_fast(threshold):
    with pytest.raises(ConfigurationError):
        TemporalGrouper(gap_threshold=threshold)


def test_gap_threshold_accepts_timedelta():
    grouper = TemporalGrouper(gap_threshold=timedelta(minutes=2))
    assert grouper.gap_threshold == 120


def test_group_sorts_and_splits():
    clusters = TemporalGrouper(gap_threshold=300).group(create_mock_entries())

    assert [[entry['id'] for entry in cluster] for cluster in clusters] == [
        ['e1', 'e2', 'e3'],
        ['e4'],
        ['e5', 'e6'],
    ]


def test_cluster_chaining():
    """t, t+Δ, t+2Δ（Δ 略小于阈值）属于同一簇，即使 t 到 t+2Δ 超过阈值"""
    delta = 299
    entries = [make_entry('a', 0), make_entry('b', delta), make_entry('c', 2 * delta)]

    clusters = TemporalGrouper(gap_threshold=300).group(entries)

    assert len(clusters) == 1
    assert [entry['id'] for entry in clusters[0]] == ['a', 'b', 'c']


def test_singletons_pass_through():
    entries = [make_entry('a', 0), make_entry('b', 1000), make_entry('c', 2000)]
    clusters = TemporalGrouper(gap_threshold=300).group(entries)
    assert [len(cluster) for cluster in clusters] == [1, 1, 1]
    assert clusters[1][0] is entries[1]


def test_group_empty_input():
    assert TemporalGrouper(gap_threshold=300).group([]) == []


def test_time_span():
    grouper = TemporalGrouper(gap_threshold=300)
    cluster = grouper.group(create_mock_entries())[0]
    assert grouper.get_time_span(cluster) == 240
    assert grouper.get_time_span([]) == 0.0


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
