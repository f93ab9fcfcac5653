"""
アプリケーション設定を管理するモジュール
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """環境設定クラス"""
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"  # 未定義の環境変数を無視する
    )

    # アプリケーション設定
    APP_NAME: str = "Response Evaluator API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS設定
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:8001",
    ]
    CORS_METHODS: list = ["GET", "POST", "OPTIONS"]
    CORS_HEADERS: list = [
        "Content-Type",
        "Accept",
        "Authorization",
        "X-Requested-With",
    ]
    CORS_CREDENTIALS: bool = True

    # OpenAI API設定（azure または openai）
    OPENAI_API_TYPE: str = "azure"
    OPENAI_API_KEY: str | None = None
    OPENAI_API_VERSION: str | None = None
    OPENAI_API_BASE_URL: str | None = None
    OPENAI_API_LLM_MODEL_NAME: str | None = None
    OPENAI_MAX_TOKENS: int = 1000
    OPENAI_TEMPERATURE: float = 0.0
    OPENAI_TIMEOUT: int = 60
    OPENAI_MAX_RETRIES: int = 3

    # 評価設定
    EVALUATION_THRESHOLD: float = 0.5
    DEFAULT_METRIC: str = "answer_correctness"

@lru_cache()
def get_settings() -> Settings:
    """
    設定インスタンスを取得（キャッシュ付き）

    Returns:
        Settings: 設定インスタンス
    """
    return Settings()
