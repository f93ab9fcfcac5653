"""
評価プロンプトを定義するモジュール
"""
from typing import Dict, List
from ..models.metric_info import MetricInfo

SYSTEM_PROMPT = """You are a strict and impartial evaluator of generated text.
You score a generated response against a single quality metric.

Reply with a JSON object only, without code fences or any other text:
{"score": <number between 0 and 1>, "reason": "<one or two sentences justifying the score>"}

A score of 1 means the response fully satisfies the metric; 0 means it does not satisfy it at all."""

USER_PROMPT_TEMPLATE = """Metric: {metric_name}
Criteria: {criteria}

{expected_label}:
{expected}

Generated response:
{response}"""

def build_messages(metric: MetricInfo, response: str, expected: str) -> List[Dict[str, str]]:
    """
    判定モデルに渡すメッセージを生成する

    Args:
        metric (MetricInfo): 評価メトリクス
        response (str): 評価対象の生成テキスト
        expected (str): 参照出力またはコンテキスト

    Returns:
        List[Dict[str, str]]: system / user メッセージ
    """
    user_prompt = USER_PROMPT_TEMPLATE.format(
        metric_name=metric.display_name,
        criteria=metric.description,
        expected_label=metric.expected_label,
        expected=expected.strip() or "(none)",
        response=response.strip()
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt}
    ]
