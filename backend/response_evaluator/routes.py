from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from .config import METRIC_MAPPING
from .models.evaluation import EvaluationRequest, EvaluationResult, ErrorResponse
from .services.evaluation_service import EvaluationService
from .services.health_service import check_health

router = APIRouter()

def get_evaluation_service() -> EvaluationService:
    """リクエストごとに評価サービスを生成する"""
    return EvaluationService()

@router.get('/health')
async def health_check() -> Dict[str, Any]:
    """ヘルスチェックエンドポイント"""
    return check_health()

@router.get('/metrics')
async def list_metrics() -> List[Dict[str, Any]]:
    """利用可能な評価メトリクスを優先度順に返す"""
    return [
        metric.to_dict()
        for metric in sorted(METRIC_MAPPING.values(), key=lambda m: m.priority)
    ]

@router.post(
    '/evaluate',
    response_model=EvaluationResult,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def evaluate(
    request: EvaluationRequest,
    service: EvaluationService = Depends(get_evaluation_service)
) -> EvaluationResult:
    """生成テキストを評価する"""
    return await service.evaluate(request)
