# =============================================================================
# 分类器 Provider 基类与公用工具模块
# =============================================================================
# 本模块定义了行为分类的抽象基类和所有 Provider 共用的工具函数。
# 在架构中，它是 Provider 策略模式的核心，确保不同 LLM 服务
# 遵循统一的接口契约。
#
# 主要组成：
#   - SYSTEM_PROMPT: 固定的系统提示词，要求 LLM 只返回严格 JSON
#   - 工具函数: parse_json_response, clamp_int
#   - BaseClassifierProvider: 抽象基类，定义 Provider 接口
# =============================================================================

"""Base classifier provider abstract class."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

# 严重度与影响因子的取值范围
SEVERITY_MIN, SEVERITY_MAX = 0, 10
FACTOR_MIN, FACTOR_MAX = 1, 1000

# -----------------------------------------------------------------------------
# 系统提示词
# 要求 LLM 返回 action / subactions / keywords / severity / factor 五个字段。
# 内容不可随意改动：前端的得分公式依赖 severity 的 0/5/10 语义。
# -----------------------------------------------------------------------------
SYSTEM_PROMPT = """
You will be given an action performed by the user. Respond with a valid JSON in the following format:

{
  "action": "string",
  "subactions": [
    {"action": "string", "severity": int}
  ],
  "keywords": ["string"],
  "severity": int,
  "factor": int
}

• The “action” should be a concise summary of the action (preferably 4-5 words or less, maximum 10 words).
• “subactions” are all the underlying actions and implications for people, the planet, ecology, customs, etc. Each sub-action should have a severity rating.
• Severity rating: 0 = positive, 5 = neutral, 10 = very serious.
• “keywords” should be a list of 10 words or proper nouns related to the action.
• “severity” is the overall seriousness of the action (0 to 10).
• “factor” is a metric to assess the impact of the action (1 = everyday task, 1000 = significant impact).

If the language is not English, translate the action and respond in English.

Example:

Action: Eating a hamburger

Response:

{
  "action": "eating a hamburger",
  "subactions": [
    {"action": "tastes good", "severity": 2},
    {"action": "bad for health", "severity": 6},
    {"action": "supports intensive farming", "severity": 7},
    {"action": "promotes fast food industry", "severity": 5}
  ],
  "keywords": ["food", "health", "meat", "farming", "fast food", "nutrition", "ecology", "diet", "restaurant", "environment"],
  "severity": 6,
  "factor": 50
}

Remember to think about all the implications of the action in the subactions.
Do not include any Markdown or other formatting in the response. Only provide the JSON output.
"""


def parse_json_response(response: str) -> dict:
    """Parse JSON from an LLM response, handling markdown code blocks.

    解析 LLM 返回的 JSON，支持 ```json ``` 包裹格式。
    与宽松解析不同，这里不做正则兜底：无法解析即视为分类失败。

    Args:
        response: Raw response string.

    Returns:
        dict: Parsed JSON object.

    Raises:
        ValueError: If no JSON object can be decoded.
    """
    response = response.strip()
    if response.startswith("```"):
        lines = response.split("\n")
        end_idx = len(lines)
        for i in range(len(lines) - 1, 0, -1):
            if lines[i].strip() == "```":
                end_idx = i
                break
        response = "\n".join(lines[1:end_idx])
    # 提取 JSON 对象的范围（从第一个 { 到最后一个 }）
    json_start = response.find("{")
    json_end = response.rfind("}") + 1
    if json_start != -1 and json_end > json_start:
        response = response[json_start:json_end]
    data = json.loads(response)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def clamp_int(value: Any, low: int, high: int) -> int:
    """Coerce ``value`` to int and clamp it into ``[low, high]``.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        raise ValueError(f"Not a number: {value!r}") from None
    return max(low, min(high, number))


# -----------------------------------------------------------------------------
# 分类器 Provider 抽象基类
# 子类只需实现 classify 和 is_available 两个方法。
# extract_result 作为公共的归一化逻辑放在基类中复用。
# -----------------------------------------------------------------------------
class BaseClassifierProvider(ABC):
    """Abstract base class for action classifier providers."""

    name = "base"

    @abstractmethod
    async def classify(self, message: str) -> dict:
        """Classify a free-text action.

        Returns:
            dict: Normalized classification plus ``success`` (and
            ``error_message`` when ``success`` is False).
        """
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the provider is usable (e.g. credentials configured)."""
        ...

    async def close(self) -> None:
        """Release resources held by the provider."""
        pass

    def build_messages(self, message: str) -> list[dict]:
        """Build the chat messages: fixed system prompt + the user's text."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": message},
        ]

    def extract_result(self, data: dict) -> dict:
        """Extract a normalized classification from parsed JSON.

        缺失字段使用默认值；severity 钳制到 0-10，factor 钳制到 1-1000，
        每个 subaction 的 severity 同样钳制到 0-10。
        非数字的 severity/factor 视为无效回复。

        Args:
            data: Parsed JSON dictionary.

        Returns:
            dict: ``action``, ``subactions``, ``keywords``, ``severity``, ``factor``.

        Raises:
            ValueError: If severity or factor is not numeric.
        """
        subactions = []
        for sub in data.get("subactions") or []:
            if isinstance(sub, dict):
                subactions.append({
                    "action": str(sub.get("action", "")),
                    "severity": clamp_int(sub.get("severity", 5), SEVERITY_MIN, SEVERITY_MAX),
                })

        keywords = [str(k) for k in data.get("keywords") or [] if k is not None]

        return {
            "action": str(data.get("action", "")),
            "subactions": subactions,
            "keywords": keywords,
            "severity": clamp_int(data.get("severity", 5), SEVERITY_MIN, SEVERITY_MAX),
            "factor": clamp_int(data.get("factor", FACTOR_MIN), FACTOR_MIN, FACTOR_MAX),
        }
