"""
評価クライアントのテスト
"""
import json

import pytest
import requests
from response_evaluator.client import EvaluationClient, EvaluationClientError

class ForwardingResponse:
    """httpxのレスポンスに requests 互換の ok 属性を付与する"""

    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.text = response.text
        self.ok = response.is_success

    def json(self):
        return self._response.json()

class ForwardingSession:
    """requests.Session の代わりにTestClientへ転送するセッション"""

    def __init__(self, test_client):
        self.test_client = test_client
        self.headers = {}

    def request(self, method, url, timeout=None, **kwargs):
        return ForwardingResponse(self.test_client.request(method, url, headers=self.headers, **kwargs))

class FailingSession:
    headers = {}

    def request(self, method, url, timeout=None, **kwargs):
        raise requests.ConnectionError("Connection refused")

@pytest.fixture
def evaluation_client(api_client):
    def factory(reply):
        return EvaluationClient("http://testserver/", session=ForwardingSession(api_client(reply)))
    return factory

def test_evaluate(evaluation_client):
    client = evaluation_client('{"score": 0.9, "reason": "Equivalent."}')

    result = client.evaluate("Paris", "The capital is Paris", metric="similarity", threshold=0.8)

    assert result.success is True
    assert result.score == 0.9
    assert result.reason == "Equivalent."
    assert result.metric == "similarity"
    assert result.threshold == 0.8

def test_evaluate_error_response(evaluation_client):
    client = evaluation_client('{}')

    with pytest.raises(EvaluationClientError) as exc_info:
        client.evaluate("   ", "expected")

    assert exc_info.value.status_code == 422
    assert exc_info.value.error_type == "InvalidRequestError"

def test_health_and_metrics(evaluation_client):
    client = evaluation_client('{}')

    assert client.health()["status"] == "healthy"
    assert {metric["id"] for metric in client.metrics()} >= {"answer_correctness", "faithfulness"}

def test_connection_error():
    client = EvaluationClient("http://127.0.0.1:9", session=FailingSession())

    with pytest.raises(EvaluationClientError) as exc_info:
        client.health()

    assert exc_info.value.status_code is None
    assert exc_info.value.error_type == "ConnectionError"

class StaticResponse:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text
        self.ok = 200 <= status_code < 300

    def json(self):
        return json.loads(self.text)

class StaticSession:
    """固定のレスポンスを返すセッション"""

    def __init__(self, status_code, text):
        self.headers = {}
        self.response = StaticResponse(status_code, text)

    def request(self, method, url, timeout=None, **kwargs):
        return self.response

def test_error_response_with_non_object_body():
    client = EvaluationClient("http://127.0.0.1:8001", session=StaticSession(503, '["unavailable"]'))

    with pytest.raises(EvaluationClientError) as exc_info:
        client.health()

    assert exc_info.value.status_code == 503
    assert exc_info.value.detail == '["unavailable"]'
    assert exc_info.value.error_type is None

def test_success_response_without_json_body():
    client = EvaluationClient("http://127.0.0.1:8001", session=StaticSession(200, "<html>proxy</html>"))

    with pytest.raises(EvaluationClientError) as exc_info:
        client.health()

    assert exc_info.value.status_code == 200
    assert exc_info.value.error_type == "InvalidResponse"

def test_evaluate_response_missing_fields():
    client = EvaluationClient("http://127.0.0.1:8001", session=StaticSession(200, '{"score": 0.5}'))

    with pytest.raises(EvaluationClientError) as exc_info:
        client.evaluate("answer", "expected")

    assert exc_info.value.error_type == "InvalidResponse"
