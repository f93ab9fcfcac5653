"""
評価リクエストと評価結果を表現するモデル
"""
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class InvalidRequestError(ValueError):
    """評価リクエストの内容が不正であることを表す例外"""

class EvaluationRequest(BaseModel):
    """評価リクエストモデル"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "response": "The order was shipped on May 3rd.",
                "expected": "Your order shipped on 3 May.",
                "metric": "answer_correctness",
                "threshold": 0.7
            }
        }
    )

    response: str
    # 参照出力またはコンテキスト（expected_output / context も受け付ける）
    expected: str = Field(
        default="",
        validation_alias=AliasChoices("expected", "expected_output", "context")
    )
    metric: Optional[str] = None
    threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)

class EvaluationResult(BaseModel):
    """評価結果モデル"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "score": 0.9,
                "reason": "The response states the same shipping date as the expected output.",
                "metric": "answer_correctness",
                "threshold": 0.7
            }
        }
    )

    success: bool
    score: float
    reason: Optional[str] = None
    metric: Optional[str] = None
    threshold: Optional[float] = None

    def to_dict(self) -> dict:
        """
        評価結果を辞書形式に変換

        Returns:
            dict: 評価結果の辞書表現
        """
        return self.model_dump()

class ErrorResponse(BaseModel):
    """エラーレスポンスモデル"""
    detail: str
    type: str
