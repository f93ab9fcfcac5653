"""
テスト共通のフィクスチャ
"""
import pytest
from fastapi.testclient import TestClient
from response_evaluator.config import Settings
from response_evaluator.main import app
from response_evaluator.routes import get_evaluation_service
from response_evaluator.services.evaluation_service import EvaluationService

@pytest.fixture
def test_settings():
    """テスト用の環境設定"""
    return Settings(
        OPENAI_API_KEY="test-api-key",
        OPENAI_API_TYPE="openai",
        OPENAI_API_BASE_URL="https://test-endpoint.example.com/v1",
        OPENAI_API_LLM_MODEL_NAME="gpt-4o-mini",
        OPENAI_MAX_RETRIES=3,
        EVALUATION_THRESHOLD=0.5,
        DEFAULT_METRIC="answer_correctness"
    )

@pytest.fixture
def make_judge():
    """固定の応答を返す判定関数を生成するフィクスチャ"""
    def factory(reply):
        calls = []

        async def judge(messages):
            calls.append(messages)
            if isinstance(reply, Exception):
                raise reply
            return reply

        judge.calls = calls
        return judge
    return factory

@pytest.fixture
def api_client(test_settings, make_judge):
    """判定関数を差し替えたテストクライアントを生成するフィクスチャ"""
    def factory(reply):
        judge = make_judge(reply)
        app.dependency_overrides[get_evaluation_service] = (
            lambda: EvaluationService(judge=judge, settings=test_settings)
        )
        return TestClient(app, raise_server_exceptions=False)

    yield factory
    app.dependency_overrides.clear()

@pytest.fixture
def service_client():
    """任意の評価サービスを注入したテストクライアントを生成するフィクスチャ"""
    def factory(service):
        app.dependency_overrides[get_evaluation_service] = lambda: service
        return TestClient(app, raise_server_exceptions=False)

    yield factory
    app.dependency_overrides.clear()
