"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from witlt.api.main import app


@pytest.fixture(scope="module")
def schema() -> dict:
    response = TestClient(app).get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_title_and_version(self, schema: dict) -> None:
        assert schema["info"]["title"] == "witlt"
        assert "When Is The Last Time" in schema["info"]["description"]
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/auth/register/send-code", "post"),
            ("/auth/register/resend-code", "post"),
            ("/auth/register/verify", "post"),
            ("/auth/login", "post"),
            ("/auth/me", "get"),
            ("/auth/logout", "post"),
            ("/auth/refresh", "post"),
            ("/auth/social/{provider}/redirect", "get"),
            ("/auth/social/{provider}/callback", "get"),
            ("/health", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert method in schema["paths"][path]

    def test_auth_routes_tagged(self, schema: dict) -> None:
        assert schema["paths"]["/auth/register/verify"]["post"]["tags"] == ["auth"]

    def test_send_code_request_uses_camel_case_schema(self, schema: dict) -> None:
        props = schema["components"]["schemas"]["SendCodeRequest"]["properties"]

        assert set(props) == {"email", "password", "nickname"}

    def test_verify_documents_error_envelope(self, schema: dict) -> None:
        responses = schema["paths"]["/auth/register/verify"]["post"]["responses"]

        assert "201" in responses
        assert "400" in responses
        assert "429" in responses
        assert "ErrorResponse" in responses["429"]["content"]["application/json"]["schema"]["$ref"]

    def test_bearer_security_scheme(self, schema: dict) -> None:
        assert "HTTPBearer" in schema["components"]["securitySchemes"]
