"""
判定モデル（OpenAI API）との通信を管理するモジュール
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from openai import AsyncAzureOpenAI, AsyncOpenAI

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

BASE_DELAY = 2
MAX_DELAY = 60

RATE_LIMIT_ERROR = "レート制限エラー"
TIMEOUT_ERROR = "タイムアウトエラー"
RETRYABLE_ERROR_TYPES = (RATE_LIMIT_ERROR, TIMEOUT_ERROR)

class EvaluationError(Exception):
    """評価処理に関するエラーを表すカスタム例外クラス"""
    def __init__(self, message: str, error_type: str, details: str):
        self.message = message
        self.error_type = error_type
        self.details = details
        super().__init__(message)

def get_http_client(settings: Settings) -> httpx.AsyncClient:
    """APIリクエスト用のHTTPクライアントを生成する"""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=10.0,
            read=settings.OPENAI_TIMEOUT,
            write=10.0,
            pool=settings.OPENAI_TIMEOUT
        ),
        limits=httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0
        ),
        follow_redirects=True
    )

def create_client(settings: Optional[Settings] = None):
    """
    設定に応じたOpenAIクライアントを生成する

    Args:
        settings (Settings): 環境設定

    Returns:
        AsyncAzureOpenAI | AsyncOpenAI: 非同期クライアント

    Raises:
        EvaluationError: 判定モデルの設定が不足している場合
    """
    settings = settings or get_settings()
    is_azure = settings.OPENAI_API_TYPE.lower() == "azure"

    missing = [
        name for name, value in (
            ("OPENAI_API_KEY", settings.OPENAI_API_KEY),
            ("OPENAI_API_BASE_URL", settings.OPENAI_API_BASE_URL),
            ("OPENAI_API_VERSION", settings.OPENAI_API_VERSION if is_azure else "-"),
        )
        if not value
    ]
    if missing:
        raise EvaluationError(
            message="判定モデルの設定が不足しています",
            error_type="設定エラー",
            details=f"{', '.join(missing)} を環境変数または .env に設定してください"
        )

    # リトライはcall_openai_apiで制御する
    try:
        if is_azure:
            client = AsyncAzureOpenAI(
                api_key=settings.OPENAI_API_KEY,
                api_version=settings.OPENAI_API_VERSION,
                base_url=settings.OPENAI_API_BASE_URL,
                http_client=get_http_client(settings),
                max_retries=0
            )
        else:
            client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                base_url=settings.OPENAI_API_BASE_URL,
                http_client=get_http_client(settings),
                max_retries=0
            )
    except Exception as e:
        logger.error(f"=== クライアント初期化エラー === {type(e).__name__}: {str(e)}")
        raise EvaluationError(
            message="クライアントの初期化に失敗しました",
            error_type="設定エラー",
            details=str(e)
        ) from e

    logger.info("=== クライアント初期化成功 ===")
    logger.info(f"APIタイプ: {settings.OPENAI_API_TYPE}")
    logger.info(f"ベースURL: {settings.OPENAI_API_BASE_URL}")
    return client

def classify_api_error(error: Exception) -> Tuple[str, str]:
    """
    API呼び出しエラーを分類する

    Returns:
        Tuple[str, str]: (エラー種別, エラー詳細)
    """
    message = str(error).lower()

    if "rate limit" in message:
        return RATE_LIMIT_ERROR, "APIの呼び出し回数制限に達しました"
    if "timeout" in message or "timed out" in message:
        return TIMEOUT_ERROR, "API呼び出しがタイムアウトしました"
    if "token" in message:
        return "トークン制限エラー", "トークン数が制限を超えています"
    if "authentication" in message or "unauthorized" in message:
        return "認証エラー", "APIキーまたは認証情報が無効です"
    if "not found" in message:
        return "エンドポイントエラー", "APIエンドポイントが見つかりません"
    return "APIエラー", str(error)

async def _create_completion(client: Any, messages: List[Dict[str, str]], settings: Settings) -> str:
    """再試行可能なエラーの間だけ判定モデルの呼び出しを繰り返す"""
    max_retries = max(1, settings.OPENAI_MAX_RETRIES)
    error_type, error_details = "APIエラー", ""

    logger.info("=== OpenAI API リクエスト開始 ===")
    logger.debug(f"使用モデル: {settings.OPENAI_API_LLM_MODEL_NAME}")
    logger.debug(f"メッセージ数: {len(messages)}")

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"試行 {attempt}/{max_retries}")

            response = await client.chat.completions.create(
                model=settings.OPENAI_API_LLM_MODEL_NAME,
                messages=messages,
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=settings.OPENAI_MAX_TOKENS,
                timeout=settings.OPENAI_TIMEOUT
            )

            if not response or not response.choices:
                raise EvaluationError(
                    message="APIレスポンスが無効です",
                    error_type="APIエラー",
                    details="APIからの応答が空または無効な形式です"
                )

            content = response.choices[0].message.content
            if not content or not content.strip():
                raise EvaluationError(
                    message="生成されたコンテンツが空です",
                    error_type="コンテンツエラー",
                    details="APIは応答しましたが、生成されたテキストが空でした"
                )

            logger.info("=== API呼び出し成功 ===")
            usage = getattr(response, 'usage', None)
            if usage is not None:
                logger.debug(f"トークン使用量: {usage.total_tokens}")

            return content

        except EvaluationError as e:
            error_type, error_details = e.error_type, e.details
        except Exception as e:
            error_type, error_details = classify_api_error(e)

        logger.warning(f"=== 試行 {attempt} 失敗 === {error_type}: {error_details}")

        if error_type not in RETRYABLE_ERROR_TYPES or attempt == max_retries:
            break

        delay = min(BASE_DELAY * (2 ** (attempt - 1)), MAX_DELAY)
        logger.info(f"{delay}秒後に再試行します...")
        await asyncio.sleep(delay)

    raise EvaluationError(
        message=f"OpenAI API呼び出しが{attempt}回失敗しました",
        error_type=error_type,
        details=error_details
    )

async def call_openai_api(
    messages: List[Dict[str, str]],
    *,
    client: Any = None,
    settings: Optional[Settings] = None
) -> str:
    """
    判定モデルを呼び出し、生成されたテキストを返す

    レート制限とタイムアウトのみ指数バックオフで再試行する。
    clientを省略した場合は設定から生成し、呼び出し後に閉じる。

    Args:
        messages: チャットメッセージ
        client: OpenAIクライアント（省略時は設定から生成）
        settings: 環境設定

    Returns:
        str: 判定モデルの応答テキスト

    Raises:
        EvaluationError: 設定が不足している場合、または呼び出しが失敗した場合
    """
    settings = settings or get_settings()

    if not messages:
        raise EvaluationError(
            message="メッセージが空です",
            error_type="入力エラー",
            details="評価用のメッセージが指定されていません"
        )

    if client is not None:
        return await _create_completion(client, messages, settings)

    client = create_client(settings)
    try:
        return await _create_completion(client, messages, settings)
    finally:
        await client.close()
