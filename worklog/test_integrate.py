#!/usr/bin/env python3
"""
测试脚本：验证配置模块和 posts 文件处理脚本
"""

import sys
import json
import logging
from pathlib import Path
from datetime import timedelta

import pytest

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from worklog.config import (
    get_pipeline_config,
    validate_pipeline_config,
    check_oracle_environment,
    to_seconds,
)
from worklog.errors import ConfigurationError, PostsFileError
from worklog.integrate_consolidation import load_posts_file, save_posts_file, main

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

ENV_VARS = [
    'WORKLOG_MERGE_STRATEGY',
    'WORKLOG_GAP_THRESHOLD',
    'WORKLOG_TIMESTAMP_POLICY',
    'WORKLOG_ORACLE_PACING',
    'WORKLOG_ORACLE_MODEL',
    'GOOGLE_CLOUD_PROJECT',
    'GOOGLE_CLOUD_LOCATION',
    'GOOGLE_APPLICATION_CREDENTIALS',
]


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def create_posts():
    return {
        'profile': {'name': 'Sam', 'bio': '日志'},
        'posts': [
            {'id': 'up-1', 'content': "Recorded 7 roasts", 'timestamp': '2025-09-01T11:00:00Z',
             'category': 'update', 'curated': True},
            {'id': 'th-3', 'content': "It'll be simple and easy to keep current.",
             'timestamp': '2025-09-01T09:03:00Z', 'category': 'thought', 'curated': False},
            {'id': 'th-2', 'content': "So I'm going to keep a single page of priorities instead.",
             'timestamp': '2025-09-01T09:02:00Z', 'category': 'thought', 'curated': False},
            {'id': 'th-1', 'content': "Coming to the conclusion that long planning docs don't work for me.",
             'timestamp': '2025-09-01T09:00:00Z', 'category': 'thought', 'curated': True},
        ],
    }


def write_posts(path, data):
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')


# ========== 配置 ==========

def test_config_defaults(clean_env):
    config = get_pipeline_config()

    assert config['merge_strategy'] == 'rule'
    assert config['gap_threshold'] == 300
    assert config['timestamp_policy'] == 'earliest'
    assert config['pacing_seconds'] == 0.0


def test_config_strategy_presets(clean_env):
    assert get_pipeline_config('binary')['gap_threshold'] == 600
    assert get_pipeline_config('binary')['pacing_seconds'] == 0.5
    assert get_pipeline_config('Partition')['pacing_seconds'] == 1.0


def test_config_from_environment(clean_env):
    clean_env.setenv('WORKLOG_MERGE_STRATEGY', 'partition')
    clean_env.setenv('WORKLOG_GAP_THRESHOLD', '900')
    clean_env.setenv('WORKLOG_TIMESTAMP_POLICY', 'LATEST')

    config = validate_pipeline_config(get_pipeline_config())

    assert config['merge_strategy'] == 'partition'
    assert config['gap_threshold'] == 900.0
    assert config['timestamp_policy'] == 'latest'
    assert config['pacing_seconds'] == 1.0


@pytest.mark.parametrize("override", [
    {'merge_strategy': 'magic'},
    {'timestamp_policy': 'middle'},
    {'gap_threshold': 'soon'},
    {'gap_threshold': 0},
    {'pacing_seconds': -1},
    {'pacing_seconds': 'nan'},
])
def test_validate_config_rejects_invalid_values(clean_env, override):
    config = get_pipeline_config()
    config.update(override)

    with pytest.raises(ConfigurationError):
        validate_pipeline_config(config)


def test_to_seconds():
    assert to_seconds(timedelta(minutes=5)) == 300
    assert to_seconds('42') == 42.0
    with pytest.raises(ConfigurationError):
        to_seconds(True)
    with pytest.raises(ConfigurationError):
        to_seconds(None)
    for value in ('nan', float('inf'), '-inf'):
        with pytest.raises(ConfigurationError):
            to_seconds(value)


def test_check_oracle_environment(clean_env):
    status = check_oracle_environment()
    assert status['ok'] is False
    assert status['missing'] == ['GOOGLE_CLOUD_PROJECT']

    clean_env.setenv('GOOGLE_CLOUD_PROJECT', 'demo-project')
    status = check_oracle_environment()
    assert status['ok'] is True
    assert status['variables']['GOOGLE_CLOUD_PROJECT'] == 'demo-project'


# ========== posts 文件 ==========

def test_load_posts_file_maps_curated(tmp_path):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())

    data = load_posts_file(path)

    assert data['profile']['name'] == 'Sam'
    assert all('curated' not in post for post in data['posts'])
    assert [post['notable'] for post in data['posts']] == [True, False, False, True]


def test_load_posts_file_keeps_existing_notable(tmp_path):
    path = tmp_path / 'posts.json'
    write_posts(path, {'profile': {}, 'posts': [
        {'id': 'a', 'content': 'A', 'timestamp': '2025-09-01T09:00:00Z', 'notable': False, 'curated': True},
    ]})

    post = load_posts_file(path)['posts'][0]
    assert post['notable'] is False


def test_save_posts_file_keeps_unicode(tmp_path):
    path = tmp_path / 'posts.json'
    save_posts_file(path, {'profile': {'bio': '日志'}, 'posts': []})

    text = path.read_text(encoding='utf-8')
    assert '日志' in text
    assert text.endswith('\n')


def test_main_merges_and_writes_back(tmp_path, clean_env):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())

    assert main([str(path), '--strategy', 'rule']) == 0

    data = json.loads(path.read_text(encoding='utf-8'))
    assert data['profile'] == create_posts()['profile']
    assert [post['id'] for post in data['posts']] == ['up-1', 'th-1']

    thread = data['posts'][1]
    assert thread['content'].count('\n\n') == 2
    assert thread['timestamp'] == '2025-09-01T09:00:00Z'
    assert thread['notable'] is True
    assert data['posts'][0]['notable'] is False


def test_main_dry_run_leaves_file_untouched(tmp_path, clean_env):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())
    before = path.read_text(encoding='utf-8')

    assert main([str(path), '--dry-run']) == 0
    assert path.read_text(encoding='utf-8') == before


def test_main_gap_override(tmp_path, clean_env):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())

    # 阈值 60 秒时 th-1 和 th-2 之间断开
    assert main([str(path), '--gap', '60']) == 0

    data = json.loads(path.read_text(encoding='utf-8'))
    assert [post['id'] for post in data['posts']] == ['up-1', 'th-2', 'th-1']


def test_main_keeps_rejected_posts(tmp_path, clean_env):
    data = create_posts()
    bad = {'id': 'tw-1', 'content': "Shipped the beta", 'timestamp': 'Wed Oct 10 20:19:24 +0000 2018'}
    data['posts'].append(bad)
    path = tmp_path / 'posts.json'
    write_posts(path, data)

    assert main([str(path), '--strategy', 'rule']) == 0

    written = json.loads(path.read_text(encoding='utf-8'))['posts']
    assert [post['id'] for post in written] == ['up-1', 'th-1', 'tw-1']
    assert written[-1] == bad


def test_main_all_rejected_leaves_posts_in_place(tmp_path, clean_env):
    posts = [
        {'id': 'tw-1', 'content': 'first', 'timestamp': 'Wed Oct 10 20:19:24 +0000 2018'},
        {'id': 'tw-2', 'content': 'second', 'timestamp': 'Thu Oct 11 08:00:00 +0000 2018'},
    ]
    path = tmp_path / 'posts.json'
    write_posts(path, {'profile': {}, 'posts': posts})

    assert main([str(path)]) == 0

    assert json.loads(path.read_text(encoding='utf-8'))['posts'] == posts


@pytest.mark.parametrize("text", ["{not json", "42", '{"posts": {"id": "a"}}'])
def test_main_unreadable_posts_file(tmp_path, clean_env, text):
    path = tmp_path / 'posts.json'
    path.write_text(text, encoding='utf-8')

    assert main([str(path)]) == 3
    assert path.read_text(encoding='utf-8') == text


def test_load_posts_file_rejects_invalid_json(tmp_path):
    path = tmp_path / 'posts.json'
    path.write_text("{not json", encoding='utf-8')

    with pytest.raises(PostsFileError):
        load_posts_file(path)


def test_main_nan_gap_from_environment(tmp_path, clean_env):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())
    clean_env.setenv('WORKLOG_GAP_THRESHOLD', 'nan')

    assert main([str(path)]) == 2


def test_main_missing_file(tmp_path, clean_env):
    assert main([str(tmp_path / 'missing.json')]) == 1


def test_main_invalid_configuration(tmp_path, clean_env):
    path = tmp_path / 'posts.json'
    write_posts(path, create_posts())
    clean_env.setenv('WORKLOG_TIMESTAMP_POLICY', 'middle')

    assert main([str(path)]) == 2


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
