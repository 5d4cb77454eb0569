"""
模块 4: 叙事判断网关 (Judgment Gateway)
职责：把一次 thread 判断发给 Gemini，取回原始文本

生成参数（输出长度、JSON 模式）由调用方按判断模式传入，
System Prompt 作为 system_instruction 绑定到模型实例上。
"""

import os
import logging
from typing import Optional, Dict, Any

from tenacity import retry, stop_after_attempt, wait_exponential, before_sleep_log

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

# 尝试导入 Vertex AI
try:
    import vertexai
    from vertexai.generative_models import GenerativeModel, GenerationConfig
    VERTEX_AI_AVAILABLE = True
except ImportError:
    VERTEX_AI_AVAILABLE = False
    logger.warning("⚠️  vertexai 未安装，叙事判断策略不可用")

# 判断类任务一律用确定性采样
DEFAULT_GENERATION_CONFIG = {
    'temperature': 0.0,
    'max_output_tokens': 1024,
}


class LLMGateway:
    """叙事判断网关（Gemini）"""

    def __init__(self,
                 model_name: str = 'gemini-2.5-flash-lite',
                 project_id: Optional[str] = None,
                 location: str = 'us-central1'):
        """
        Args:
            model_name: Gemini 模型名称
            project_id: Google Cloud 项目ID（为 None 时读取 GOOGLE_CLOUD_PROJECT）
            location: Vertex AI 区域

        Raises:
            ConfigurationError: vertexai 未安装或项目ID缺失
        """
        if not VERTEX_AI_AVAILABLE:
            raise ConfigurationError("叙事判断需要 google-cloud-aiplatform: pip install google-cloud-aiplatform")

        project_id = project_id or os.getenv('GOOGLE_CLOUD_PROJECT')
        if not project_id:
            raise ConfigurationError("叙事判断需要 GOOGLE_CLOUD_PROJECT")

        self.model_name = model_name
        self.project_id = project_id
        self.location = location

        # 每种 System Prompt 对应一个模型实例（binary / partition 各一个）
        self._models: Dict[str, Any] = {}

        vertexai.init(project=project_id, location=location)
        logger.info(f"✅ 判断网关就绪: {model_name} (项目: {project_id}, 区域: {location})")

    def _model_for(self, system_prompt: str):
        model = self._models.get(system_prompt)
        if model is None:
            model = GenerativeModel(self.model_name, system_instruction=system_prompt or None)
            self._models[system_prompt] = model
        return model

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def generate(self, system_prompt: str, user_prompt: str,
                 generation_config: Optional[Dict[str, Any]] = None) -> str:
        """
        发送一次判断请求

        Args:
            system_prompt: 判断规则（作为 system_instruction）
            user_prompt: 按时间排列的条目
            generation_config: 覆盖 DEFAULT_GENERATION_CONFIG 的生成参数，
                               例如 {'max_output_tokens': 10} 或 {'response_mime_type': 'application/json'}

        Returns:
            响应文本；被安全策略拦截或没有候选时返回空字符串（由解析器判为非法响应）
        """
        config = dict(DEFAULT_GENERATION_CONFIG)
        config.update(generation_config or {})

        logger.debug(f"📤 判断请求: 模型={self.model_name}, 参数={config}, "
                     f"条目文本 {len(user_prompt)} 字符")

        response = self._model_for(system_prompt).generate_content(
            user_prompt,
            generation_config=GenerationConfig(**config)
        )

        try:
            text = response.text
        except ValueError as e:
            # 没有可用候选（例如被拦截）时 response.text 会抛 ValueError
            logger.warning(f"⚠️  判断响应没有文本: {e}")
            return ""

        return (text or "").strip()
