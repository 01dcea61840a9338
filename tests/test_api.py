"""
Tests for the packaged application and its bundled translations.
"""

from fastapi.testclient import TestClient
import pytest

from polyglot.main import app


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestLanguagesEndpoint:
    def test_lists_bundled_languages(self, client):
        response = client.get("/v1/i18n/languages", headers={"Accept-Language": "en"})

        assert response.status_code == 200
        assert response.json() == {
            "code": 200,
            "message": "Ok",
            "data": {"languages": ["en", "zh", "zh-TW"], "current": "en", "default": "zh"},
        }

    def test_region_tag_resolves_to_catalog_spelling(self, client):
        response = client.get("/v1/i18n/languages", headers={"Accept-Language": "zh-tw"})

        assert response.json()["data"]["current"] == "zh-TW"
        assert response.json()["message"] == "成功"
        assert response.headers["Content-Language"] == "zh-TW"


class TestMessagesEndpoint:
    def test_renders_with_query_params(self, client):
        response = client.get(
            "/v1/i18n/messages/404",
            params={"resource": "User"},
            headers={"Accept-Language": "en"},
        )

        assert response.json()["data"] == {
            "key": "404",
            "locale": "en",
            "text": "User Not Found",
        }

    def test_unknown_key_is_business_404(self, client):
        response = client.get("/v1/i18n/messages/999", headers={"Accept-Language": "zh"})

        assert response.status_code == 200
        assert response.json() == {"code": 404, "message": "Message不存在", "data": None}
