"""
ヘルスチェックサービス
"""
from typing import Any, Dict, Optional
from ..config import Settings, get_settings

def check_health(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    サービスの状態を返す

    判定モデルへの接続は確認せず、設定の有無のみを報告する
    """
    settings = settings or get_settings()
    return {
        "status": "healthy",
        "llm_configured": bool(settings.OPENAI_API_KEY and settings.OPENAI_API_LLM_MODEL_NAME),
        "model": settings.OPENAI_API_LLM_MODEL_NAME
    }
