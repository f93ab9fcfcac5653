"""
評価処理を管理するサービス
"""
import json
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..config import Settings, get_metric, get_settings
from ..models.evaluation import EvaluationRequest, EvaluationResult, InvalidRequestError
from ..models.metric_info import MetricInfo
from ..prompt_template.prompt import build_messages
from .llm_client import EvaluationError, call_openai_api
from .score_calculator import ScoreCalculator

logger = logging.getLogger(__name__)

Judge = Callable[[List[Dict[str, str]]], Awaitable[str]]

REASON_KEYS = ("reason", "reasoning", "feedback")

CODE_FENCE_OPEN = re.compile(r'^```[\w-]*\s*')
CODE_FENCE_CLOSE = re.compile(r'\s*```$')

def _truncate(text: str, limit: int = 100) -> str:
    return text[:limit] + '...' if len(text) > limit else text

def _load_json_object(text: str) -> Any:
    """応答テキストからJSONを取り出す"""
    text = text.strip()

    # コードブロックマーカーの除去（1行で囲まれた応答も含む）
    text = CODE_FENCE_OPEN.sub('', text)
    text = CODE_FENCE_CLOSE.sub('', text)

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 前後に説明文が付いている場合は最も外側の {...} を取り出す
    start = text.find('{')
    end = text.rfind('}')
    if start != -1 and end > start:
        text = text[start:end + 1]

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # 制御文字を除去して再試行
        cleaned_text = ''.join(char for char in text if ord(char) >= 32)
        return json.loads(cleaned_text)

def parse_judge_response(text: str) -> Tuple[Any, Optional[str]]:
    """
    判定モデルの応答からスコアと理由を取り出す

    Args:
        text (str): 判定モデルの応答テキスト

    Returns:
        Tuple[Any, Optional[str]]: (正規化前のスコア, 理由)

    Raises:
        EvaluationError: 応答を解釈できない場合
    """
    if not text or not text.strip():
        raise EvaluationError(
            message="評価テキストが空です",
            error_type="パースエラー",
            details="判定モデルからの応答テキストが空でした"
        )

    try:
        data = _load_json_object(text)
    except json.JSONDecodeError as e:
        logger.error(f"JSONパースエラー: {str(e)}")
        logger.debug(f"パース対象テキスト:\n{text}")
        raise EvaluationError(
            message="JSONパースエラー",
            error_type="パースエラー",
            details=f"応答のJSONパースに失敗: {str(e)}"
        )

    if not isinstance(data, dict) or 'score' not in data:
        raise EvaluationError(
            message="無効な応答形式",
            error_type="パースエラー",
            details="応答に score フィールドを持つJSONオブジェクトが含まれていません"
        )

    reason = None
    for key in REASON_KEYS:
        value = data.get(key)
        if value:
            if isinstance(value, list):
                reason = '\n'.join(str(item) for item in value if item)
            else:
                reason = str(value)
            break

    return data['score'], reason

class EvaluationService:
    """生成テキスト評価サービス"""

    def __init__(self, judge: Optional[Judge] = None, settings: Optional[Settings] = None):
        """
        Args:
            judge: メッセージを受け取り判定モデルの応答を返す非同期関数
            settings: 環境設定
        """
        self.settings = settings or get_settings()
        self.judge = judge or (lambda messages: call_openai_api(messages, settings=self.settings))
        self.score_calculator = ScoreCalculator()

    def _resolve_metric(self, request: EvaluationRequest) -> MetricInfo:
        return get_metric(request.metric or self.settings.DEFAULT_METRIC)

    def _resolve_threshold(self, request: EvaluationRequest, metric: MetricInfo) -> float:
        if request.threshold is not None:
            return request.threshold
        if metric.threshold is not None:
            return metric.threshold
        return self.settings.EVALUATION_THRESHOLD

    def _validate_input(self, request: EvaluationRequest, metric: MetricInfo) -> None:
        if not request.response.strip():
            raise InvalidRequestError("評価対象のresponseが空です")
        if metric.requires_expected and not request.expected.strip():
            raise InvalidRequestError(f"メトリクス {metric.id} には expected（参照出力またはコンテキスト）が必要です")

    async def evaluate(self, request: EvaluationRequest) -> EvaluationResult:
        """
        生成テキストを評価する

        Args:
            request (EvaluationRequest): 評価リクエスト

        Returns:
            EvaluationResult: 評価結果

        Raises:
            InvalidRequestError: 入力値が不正な場合
            EvaluationError: 判定モデルの呼び出しまたは応答の解釈に失敗した場合
        """
        metric = self._resolve_metric(request)
        self._validate_input(request, metric)
        threshold = self._resolve_threshold(request, metric)

        logger.info(f"=== 評価開始: {metric.id} ===")
        logger.debug(f"response: {_truncate(request.response)}")
        logger.debug(f"expected: {_truncate(request.expected)}")

        messages = build_messages(metric, request.response, request.expected)
        judge_output = await self.judge(messages)
        raw_score, reason = parse_judge_response(judge_output)

        try:
            score = self.score_calculator.normalize_score(raw_score)
        except ValueError as e:
            raise EvaluationError(
                message="無効なスコア",
                error_type="パースエラー",
                details=str(e)
            )

        success = self.score_calculator.is_success(score, threshold)
        logger.info(f"=== 評価完了: {metric.id} score={score} threshold={threshold} success={success} ===")

        return EvaluationResult(
            success=success,
            score=score,
            reason=reason,
            metric=metric.id,
            threshold=threshold
        )
