"""
模块 5: 响应清洗与校验器 (Response Parser & Validator)
职责：把外部判断的原始响应解析为下标划分，并校验划分的结构合法性
"""

import re
import json
import logging
from typing import Any, Dict, List

from ..errors import OracleResponseError

logger = logging.getLogger(__name__)


class ResponseValidator:
    """响应清洗与校验器"""

    def __init__(self):
        """初始化校验器"""
        pass

    def parse_binary(self, raw_response: str) -> bool:
        """
        解析是/否判断

        Args:
            raw_response: LLM 原始响应文本

        Returns:
            True 表示整簇是同一个 thread

        Raises:
            OracleResponseError: 响应中既没有 yes 也没有 no
        """
        text = self._clean_format(raw_response).lower()

        yes_match = re.search(r'\byes\b', text)
        no_match = re.search(r'\bno\b', text)

        if yes_match and no_match:
            # 两者都出现时以先出现的为准
            return yes_match.start() < no_match.start()
        if yes_match:
            return True
        if no_match:
            return False

        raise OracleResponseError(f"无法解析是/否判断: {raw_response[:100]!r}")

    def parse_partition(self, raw_response: str) -> List[List[int]]:
        """
        解析下标划分（提取第一个 [...] 块再做 JSON 解析）

        Args:
            raw_response: LLM 原始响应文本

        Returns:
            下标划分（只做类型检查，不做覆盖检查）

        Raises:
            OracleResponseError: 找不到 JSON 数组、JSON 非法或类型不对
        """
        text = self._clean_format(raw_response)

        match = re.search(r'\[[\s\S]*\]', text)
        if not match:
            raise OracleResponseError(f"响应中没有 JSON 数组: {text[:100]!r}")

        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise OracleResponseError(f"JSON 解析失败: {e}") from e

        if not isinstance(parsed, list) or not all(isinstance(group, list) for group in parsed):
            raise OracleResponseError(f"划分必须是数组的数组: {parsed!r}")

        for group in parsed:
            for idx in group:
                # bool 是 int 的子类，这里要排除
                if not isinstance(idx, int) or isinstance(idx, bool):
                    raise OracleResponseError(f"划分中包含非整数下标: {idx!r}")

        return parsed

    def validate_partition(self, partition: Any, size: int) -> Dict[str, Any]:
        """
        校验划分是否恰好覆盖 0..size-1 的每个下标一次

        Args:
            partition: 外部判断返回的划分
            size: 簇的大小

        Returns:
            {
                'is_valid': bool,
                'warnings': List[str]
            }
        """
        warnings = []

        if not isinstance(partition, (list, tuple)):
            return {'is_valid': False, 'warnings': [f"划分不是列表: {type(partition).__name__}"]}

        seen = set()
        for group in partition:
            if not isinstance(group, (list, tuple)):
                warnings.append(f"分组不是列表: {group!r}")
                continue
            if not group:
                warnings.append("包含空分组")
            for idx in group:
                if not isinstance(idx, int) or isinstance(idx, bool):
                    warnings.append(f"非整数下标: {idx!r}")
                elif idx < 0 or idx >= size:
                    warnings.append(f"下标越界: {idx} (簇大小 {size})")
                elif idx in seen:
                    warnings.append(f"重复下标: {idx}")
                else:
                    seen.add(idx)

        missing = sorted(set(range(size)) - seen)
        if missing:
            warnings.append(f"缺少下标: {missing}")

        is_valid = len(warnings) == 0

        if is_valid:
            logger.debug(f"✅ 划分校验通过: {partition}")

        return {
            'is_valid': is_valid,
            'warnings': warnings
        }

    def _clean_format(self, text: str) -> str:
        """
        清洗格式（去除 Markdown 代码块、首尾空白）

        Args:
            text: 原始文本

        Returns:
            清洗后的文本
        """
        if not text:
            return ''

        text = re.sub(r'```(?:json)?', '', text)
        text = re.sub(r'`([^`]+)`', r'\1', text)

        return text.strip()
