"""
模块 6: 叙事判断 (Narrative Oracle)
职责：把一个候选簇交给 LLM，根据内容语义判断 thread 的归属
"""

import logging
from typing import List, Tuple, Optional

from .prompt_engine import PromptEngine
from .llm_gateway import LLMGateway
from .response_validator import ResponseValidator
from .merge_policy import singleton_partition, whole_partition

logger = logging.getLogger(__name__)

ORACLE_MODES = ('binary', 'partition')

# 每种判断模式的生成参数：binary 只需要一个词，partition 要求 JSON 输出
GENERATION_CONFIGS = {
    'binary': {'max_output_tokens': 10},
    'partition': {'max_output_tokens': 1024, 'response_mime_type': 'application/json'},
}


class NarrativeOracle:
    """基于 LLM 的叙事判断"""

    def __init__(self,
                 mode: str = 'partition',
                 llm_gateway=None,
                 model_name: str = 'gemini-2.5-flash-lite',
                 project_id: Optional[str] = None,
                 location: str = 'us-central1'):
        """
        初始化叙事判断

        Args:
            mode: 'binary'（整簇是/否）或 'partition'（任意划分）
            llm_gateway: 任何带 generate(system_prompt, user_prompt, generation_config) 方法的对象；
                         为 None 时创建 Gemini 网关
            model_name: Gemini 模型名称
            project_id: Google Cloud 项目ID
            location: Vertex AI 区域

        Raises:
            ValueError: 未知的判断模式
            ConfigurationError: 需要创建 Gemini 网关但环境不完整
        """
        if mode not in ORACLE_MODES:
            raise ValueError(f"未知的判断模式: {mode!r} (可选: {', '.join(ORACLE_MODES)})")

        self.mode = mode
        self.prompt_engine = PromptEngine()
        self.validator = ResponseValidator()

        if llm_gateway is None:
            llm_gateway = LLMGateway(
                model_name=model_name,
                project_id=project_id,
                location=location
            )
        self.llm_gateway = llm_gateway

        logger.info(f"✅ 叙事判断初始化完成 (模式: {mode})")

    def judge(self, ordered_texts: List[Tuple[int, str, str]]) -> List[List[int]]:
        """
        判断一个簇的 thread 划分

        Args:
            ordered_texts: [(index, category, content), ...]，按时间升序

        Returns:
            下标划分（binary 模式下是整簇一组或每个一组）

        Raises:
            OracleResponseError: 响应无法解析
            Exception: 网关调用失败（重试后仍失败）
        """
        size = len(ordered_texts)
        if size < 2:
            return singleton_partition(size)

        prompts = self.prompt_engine.build_full_prompt(ordered_texts, mode=self.mode)

        raw_response = self.llm_gateway.generate(
            system_prompt=prompts['system_prompt'],
            user_prompt=prompts['user_prompt'],
            generation_config=GENERATION_CONFIGS[self.mode]
        )

        logger.debug(f"LLM 原始响应: {raw_response[:200]}")

        if self.mode == 'binary':
            if self.validator.parse_binary(raw_response):
                return whole_partition(size)
            return singleton_partition(size)

        return self.validator.parse_partition(raw_response)
