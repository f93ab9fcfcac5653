"""
評価エンドポイントを呼び出すクライアント
"""
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from .models.evaluation import EvaluationResult

logger = logging.getLogger(__name__)

class EvaluationClientError(Exception):
    """評価エンドポイントの呼び出しに失敗したことを表す例外"""
    def __init__(self, status_code: Optional[int], detail: str, error_type: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        self.error_type = error_type
        super().__init__(f"[{status_code}] {error_type}: {detail}" if status_code else detail)

class EvaluationClient:
    """
    評価サービスのHTTPクライアント

    使用例:
        client = EvaluationClient("http://127.0.0.1:8001")
        result = client.evaluate("生成された応答", "期待される出力")
        assert result.success
    """

    def __init__(self, base_url: str, timeout: float = 30, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json", "Accept": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}/api{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"評価サービスへの接続に失敗しました: {url} ({str(e)})")
            raise EvaluationClientError(None, str(e), type(e).__name__) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            if isinstance(body, dict):
                detail = body.get("detail", response.text)
                error_type = body.get("type")
            else:
                detail, error_type = response.text, None
            raise EvaluationClientError(response.status_code, str(detail), error_type)

        if body is None:
            raise EvaluationClientError(
                response.status_code, f"JSON以外の応答を受信しました: {response.text[:100]}", "InvalidResponse"
            )
        return body

    def evaluate(
        self,
        response: str,
        expected: str,
        metric: Optional[str] = None,
        threshold: Optional[float] = None
    ) -> EvaluationResult:
        """
        生成テキストを評価する

        Args:
            response (str): 評価対象の生成テキスト
            expected (str): 参照出力またはコンテキスト
            metric (str): 評価メトリクスID（省略時はサーバーの既定値）
            threshold (float): 合格ライン（省略時はメトリクスの既定値）

        Returns:
            EvaluationResult: 評価結果
        """
        payload: Dict[str, Any] = {"response": response, "expected": expected}
        if metric is not None:
            payload["metric"] = metric
        if threshold is not None:
            payload["threshold"] = threshold

        data = self._request("POST", "/evaluate", json=payload)
        try:
            return EvaluationResult.model_validate(data)
        except ValidationError as e:
            raise EvaluationClientError(200, str(e), "InvalidResponse") from e

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def metrics(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/metrics")
