#!/usr/bin/env python3
"""
验证叙事判断（Gemini）配置脚本
用于在使用 binary / partition 策略之前确认外部判断可用
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from worklog.config import get_pipeline_config, check_oracle_environment


SAMPLE_TEXTS = [
    (0, 'thought', "Coming to the conclusion that long planning docs don't work for me."),
    (1, 'thought', "So I'm going to keep a single page of priorities instead."),
]


def check_environment_variables():
    """检查必需的环境变量"""
    print("🔍 检查环境变量...")

    status = check_oracle_environment()
    for var, value in status['variables'].items():
        if value:
            print(f"  ✅ {var}: {value}")
        elif var in status['missing']:
            print(f"  ❌ {var}: 未设置")
        else:
            print(f"  ⚠️  {var}: 未设置（可选）")

    return status['ok']


def test_oracle_judgment(mode: str):
    """用一个两条思考的样例簇测试叙事判断"""
    print(f"\n🔍 测试叙事判断 (模式: {mode})...")

    try:
        from worklog.phase3_merge_policy import NarrativeOracle

        config = get_pipeline_config(mode)
        oracle = NarrativeOracle(
            mode=mode,
            model_name=config['model_name'],
            project_id=config['project_id'],
            location=config['location']
        )

        partition = oracle.judge(SAMPLE_TEXTS)

        print(f"  ✅ 判断成功!")
        print(f"  划分结果: {partition}")
        return True

    except FileNotFoundError as e:
        print(f"  ❌ Service Account 文件未找到: {e}")
        return False
    except Exception as e:
        print(f"  ❌ 判断失败: {type(e).__name__}: {e}")
        return False


def main():
    """主函数"""
    print("=" * 60)
    print("叙事判断配置验证")
    print("=" * 60)
    print()

    env_ok = check_environment_variables()

    if not env_ok:
        print("\n❌ 环境变量配置不完整，请检查配置后重试")
        print("\n💡 提示:")
        print("   1. 创建 .env 文件（参考 .env.example）")
        print("   2. 设置 GOOGLE_APPLICATION_CREDENTIALS 指向 Service Account 文件")
        return 1

    mode = sys.argv[1] if len(sys.argv) > 1 else 'partition'
    judgment_ok = test_oracle_judgment(mode)

    print("\n" + "=" * 60)
    if judgment_ok:
        print("✅ 配置验证成功！叙事判断已就绪")
        return 0
    else:
        print("❌ 配置验证失败，请检查错误信息")
        return 1


if __name__ == "__main__":
    sys.exit(main())
