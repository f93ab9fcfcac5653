"""
評価メトリクスのマッピングを定義するモジュール
"""
from ..models.evaluation import InvalidRequestError
from ..models.metric_info import MetricInfo

# 評価メトリクスの優先順位定数
METRIC_PRIORITY = {
    "answer_correctness": 1,
    "answer_relevancy": 2,
    "faithfulness": 3,
    "similarity": 4
}

# 評価メトリクスのマッピング
METRIC_MAPPING = {
    "answer_correctness": MetricInfo(
        id="answer_correctness",
        display_name="Answer Correctness",
        description=(
            "Judge whether the generated response is factually correct and complete "
            "when compared with the expected output. Penalise contradictions and "
            "missing key facts; ignore differences in wording."
        ),
        priority=METRIC_PRIORITY["answer_correctness"]
    ),
    "answer_relevancy": MetricInfo(
        id="answer_relevancy",
        display_name="Answer Relevancy",
        description=(
            "Judge how directly the generated response addresses the question or "
            "context it was produced for. Penalise off-topic, evasive or padded content."
        ),
        priority=METRIC_PRIORITY["answer_relevancy"],
        requires_expected=False,
        expected_label="Question or context"
    ),
    "faithfulness": MetricInfo(
        id="faithfulness",
        display_name="Faithfulness",
        description=(
            "Judge whether every claim in the generated response is supported by the "
            "given context. Any claim that is not grounded in the context is a hallucination."
        ),
        priority=METRIC_PRIORITY["faithfulness"],
        threshold=0.7,
        expected_label="Context"
    ),
    "similarity": MetricInfo(
        id="similarity",
        display_name="Semantic Similarity",
        description=(
            "Judge how close in meaning the generated response is to the expected output, "
            "regardless of phrasing or ordering."
        ),
        priority=METRIC_PRIORITY["similarity"]
    )
}

def get_metric(metric_id: str) -> MetricInfo:
    """
    メトリクスIDから評価メトリクスを取得する

    Args:
        metric_id (str): メトリクスID

    Returns:
        MetricInfo: 評価メトリクス

    Raises:
        InvalidRequestError: 未知のメトリクスIDが指定された場合
    """
    try:
        return METRIC_MAPPING[metric_id]
    except KeyError:
        available = ", ".join(sorted(METRIC_MAPPING))
        raise InvalidRequestError(f"未知の評価メトリクスです: {metric_id} (利用可能: {available})")
