#!/usr/bin/env python3
"""
完整流程脚本：读取 posts 文件 → 分类 → 时间分组 → 合并 thread → 写回 posts 文件
"""

import sys
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from worklog.config import get_pipeline_config
from worklog.errors import ConfigurationError, PostsFileError
from worklog.phase4_consolidate import Thread_Consolidation_Pipeline

logger = logging.getLogger(__name__)


def load_posts_file(path: Path) -> Dict[str, Any]:
    """
    读取 posts 文件

    旧文件使用 'curated' 标记，没有 'notable' 时沿用它

    Args:
        path: posts.json 路径

    Returns:
        {'profile': Dict, 'posts': List[Dict]}

    Raises:
        PostsFileError: 不是合法的 JSON，或者结构不是 posts 列表
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PostsFileError(f"无法解析 posts 文件 {path}: {e}") from e

    if isinstance(data, list):
        data = {'profile': {}, 'posts': data}

    if not isinstance(data, dict) or not isinstance(data.get('posts', []), list):
        raise PostsFileError(f"posts 文件结构不对，需要 {{'profile', 'posts': [...]}}: {path}")

    posts = []
    for post in data.get('posts', []):
        if isinstance(post, dict) and 'notable' not in post and 'curated' in post:
            post = dict(post)
            post['notable'] = bool(post.pop('curated'))
        posts.append(post)

    data['posts'] = posts
    logger.info(f"📄 读取 {len(posts)} 个条目: {path}")
    return data


def save_posts_file(path: Path, data: Dict[str, Any]):
    """写回 posts 文件"""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        f.write('\n')

    logger.info(f"💾 已保存 {len(data.get('posts', []))} 个条目: {path}")


def consolidate_posts_file(path: Path, config: Dict[str, Any],
                           dry_run: bool = False, oracle=None) -> Dict[str, Any]:
    """
    对一个 posts 文件运行完整流程

    Args:
        path: posts.json 路径
        config: 流程配置
        dry_run: True 时只打印结果，不写回文件
        oracle: 可选的叙事判断对象（测试或本地模型）

    Returns:
        pipeline.last_report
    """
    pipeline = Thread_Consolidation_Pipeline.from_config(config, oracle=oracle)

    data = load_posts_file(path)
    posts: List[Dict[str, Any]] = data['posts']

    results = pipeline.run(posts)
    report = pipeline.last_report

    # 显示合并了哪些 thread
    for idx, group in enumerate(report['merged_groups'], 1):
        logger.info(f"   Thread {idx}: {', '.join(group)}")

    for rejected in report['rejected']:
        logger.warning(f"   ⚠️  拒绝条目: {rejected['reason']}")

    # 被拒绝的条目不参与合并，但原样写回，排在最后
    kept = [rejected['entry'] for rejected in report['rejected']]
    output = results + kept

    logger.info(f"条目数: {len(posts)} → {len(output)} (其中 {len(kept)} 个未处理条目原样保留)")

    if dry_run:
        logger.info("🔍 dry-run：不写回文件")
    else:
        data['posts'] = output
        save_posts_file(path, data)

    return report


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    import argparse

    parser = argparse.ArgumentParser(description='合并 posts 文件中被拆开的 thread')
    parser.add_argument('posts_file', help='posts.json 路径')
    parser.add_argument('--strategy', choices=['rule', 'binary', 'partition'],
                        help='合并策略（默认读取 WORKLOG_MERGE_STRATEGY）')
    parser.add_argument('--gap', type=float, help='时间阈值（秒）')
    parser.add_argument('--dry-run', action='store_true', help='只打印结果，不写回文件')
    parser.add_argument('--verbose', '-v', action='store_true', help='输出调试日志')

    args = parser.parse_args(argv)

    # 配置日志
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = get_pipeline_config(args.strategy)
    if args.gap is not None:
        config['gap_threshold'] = args.gap

    path = Path(args.posts_file)
    if not path.exists():
        logger.error(f"❌ 文件不存在: {path}")
        return 1

    try:
        consolidate_posts_file(path, config, dry_run=args.dry_run)
    except ConfigurationError as e:
        logger.error(f"❌ 配置错误: {e}")
        return 2
    except PostsFileError as e:
        logger.error(f"❌ {e}")
        return 3

    return 0


if __name__ == '__main__':
    sys.exit(main())
