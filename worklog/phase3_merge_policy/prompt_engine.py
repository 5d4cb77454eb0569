"""
模块 3: 提示词工程引擎 (Prompt Template Engine)
职责：组装 System Prompt 和 User Prompt，向外部判断说明 thread 的判定规则和输出格式
"""

from typing import List, Tuple, Dict
import logging

logger = logging.getLogger(__name__)

# 不可违反的规则：与 RuleOracle 的一票否决保持一致
NON_NEGOTIABLE_RULES = """RULES FOR THREAD DETECTION:
1. A thread is a SINGLE CONTINUOUS THOUGHT split across multiple posts
2. Posts must have NARRATIVE CONTINUITY - the later post continues where the earlier one left off
3. Posts must be the SAME TYPE - never group an "update" (task completion) with a "thought" (reflection)
4. Short status updates like "Completed X" or "Recorded Y" are NOT threads even if posted together
5. Only group posts when it is OBVIOUS the author intended them as one message split across posts"""

EXAMPLES = """EXAMPLES OF REAL THREADS (should be grouped):
- "Coming to the conclusion that X doesn't work..." -> "So I'm going to try Y instead..." -> "It'll be simple and straightforward..."
- "Finding: X is really important..." -> "This means we should..." -> "All this to say..."

EXAMPLES THAT ARE NOT THREADS (keep separate):
- "Completed task A" + "Completed task B" (separate updates, not a thread)
- "Recorded video" + "I think social media is broken" (update + unrelated thought)
- "Gym day" + "Built new feature" (unrelated updates)"""


class PromptEngine:
    """提示词工程引擎"""

    def __init__(self):
        """初始化提示词引擎"""
        pass

    def build_full_prompt(self, ordered_texts: List[Tuple[int, str, str]],
                          mode: str = 'partition') -> Dict[str, str]:
        """
        构建完整的 Prompt（System Prompt + User Prompt）

        Args:
            ordered_texts: [(index, category, content), ...]，按时间升序
            mode: 'binary'（整簇是/否）或 'partition'（任意划分）

        Returns:
            {
                'system_prompt': str,
                'user_prompt': str
            }
        """
        system_prompt = self._build_system_prompt()

        if mode == 'binary':
            user_prompt = self._build_binary_prompt(ordered_texts)
        else:
            user_prompt = self._build_partition_prompt(ordered_texts)

        logger.debug(f"✅ Prompt 构建完成 ({mode}): System={len(system_prompt)}字符, "
                     f"User={len(user_prompt)}字符")

        return {
            'system_prompt': system_prompt,
            'user_prompt': user_prompt
        }

    def _build_system_prompt(self) -> str:
        """构建 System Prompt（定义角色和规则）"""
        return ("You are analyzing short posts from one author's work log to identify threads "
                "(multi-part posts that form a single continuous thought).\n\n"
                f"{NON_NEGOTIABLE_RULES}\n\n{EXAMPLES}")

    def _format_posts(self, ordered_texts: List[Tuple[int, str, str]]) -> str:
        return '\n\n'.join(
            f'[{index}] ({category}) "{content}"' for index, category, content in ordered_texts
        )

    def _build_binary_prompt(self, ordered_texts: List[Tuple[int, str, str]]) -> str:
        """整簇判断：只回答 yes / no"""
        return (f"Here are {len(ordered_texts)} posts, in the order they were published:\n\n"
                f"{self._format_posts(ordered_texts)}\n\n"
                "Are ALL of these posts part of the same thread (one continuous thought posted "
                "in sequence)? Answer only \"yes\" or \"no\".")

    def _build_partition_prompt(self, ordered_texts: List[Tuple[int, str, str]]) -> str:
        """任意划分：返回下标数组的数组"""
        return (f"Here are {len(ordered_texts)} posts to analyze, in the order they were published:\n\n"
                f"{self._format_posts(ordered_texts)}\n\n"
                "Return a JSON array of arrays, where each inner array contains the indices that form a thread.\n"
                "- Every index must appear exactly once\n"
                "- Posts that aren't part of any thread should be in their own single-element array\n"
                "- Example: [[0], [1, 2, 3], [4, 5], [6]] means posts 1-2-3 are one thread, "
                "4-5 are another, 0 and 6 are standalone\n\n"
                "Return ONLY the JSON array, nothing else.")
