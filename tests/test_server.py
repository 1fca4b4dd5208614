"""Tests for the FastAPI application."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from uigen.backends.remote import RemoteBackend
from uigen.errors import BackendError, CodeValidationError
from uigen.schemas.config import AppConfig
from uigen.server.app import create_app

CODE = 'export default function GeneratedUI() {\n  return <Card title="Hi" />;\n}\n'


class FailingGenerator:
    """Generator stub that raises the configured exception."""

    name = "failing"

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def generate(self, prompt: str, current_code: str | None = None, *, on_progress=None):
        raise self.exc

    async def health(self) -> dict[str, Any]:
        raise BackendError("Backend not reachable")


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(AppConfig(backend="rule_based")))


def _failing(exc: Exception) -> TestClient:
    return TestClient(create_app(AppConfig(), FailingGenerator(exc)))


def _remote(body: Any) -> TestClient:
    backend = RemoteBackend(
        "http://gen.test", transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    )
    return TestClient(create_app(AppConfig(), backend))


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "backend": "rule_based", "model": ""}

    def test_health_reports_model(self) -> None:
        resp = TestClient(create_app(AppConfig(), dry_run=True)).get("/health")
        assert resp.json() == {"status": "ok", "backend": "agent", "model": "dry-run"}

    def test_backend_health(self, client: TestClient) -> None:
        resp = client.get("/api/generate")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_backend_unreachable(self) -> None:
        resp = _failing(RuntimeError("x")).get("/api/generate")
        assert resp.status_code == 503
        assert resp.json() == {"status": "error", "error": "Backend not reachable"}


class TestGenerate:
    def test_generate(self, client: TestClient) -> None:
        resp = client.post("/api/v1/generate", json={"prompt": "a login form"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["code"].startswith("export default function GeneratedUI()")
        assert data["validation"]["valid"] is True
        assert data["component_usage"] == ["Card", "Input", "Button"]
        assert "layoutStructure" in data["plan"]
        assert data["explanation"]

    def test_generate_with_current_code(self, client: TestClient) -> None:
        first = client.post("/api/v1/generate", json={"prompt": "a navbar"}).json()
        resp = client.post("/api/v1/generate", json={"prompt": "add a table", "current_code": first["code"]})

        assert resp.status_code == 200
        assert "<Navbar" in resp.json()["code"]
        assert "<Table" in resp.json()["code"]

    def test_missing_prompt(self, client: TestClient) -> None:
        assert client.post("/api/v1/generate", json={}).status_code == 422

    @pytest.mark.parametrize("prompt", ["", "   "])
    def test_blank_prompt(self, client: TestClient, prompt: str) -> None:
        resp = client.post("/api/v1/generate", json={"prompt": prompt})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Prompt is required"}

    def test_validation_failure(self) -> None:
        resp = _failing(CodeValidationError(["Unauthorized component: Foo"])).post(
            "/api/v1/generate", json={"prompt": "x"},
        )
        assert resp.status_code == 422
        assert resp.json() == {
            "detail": "Code validation failed: Unauthorized component: Foo",
            "errors": ["Unauthorized component: Foo"],
        }

    def test_backend_failure(self) -> None:
        resp = _failing(BackendError("upstream down")).post("/api/v1/generate", json={"prompt": "x"})
        assert resp.status_code == 502
        assert resp.json() == {"detail": "upstream down"}

    def test_unexpected_failure(self) -> None:
        app = create_app(AppConfig(), FailingGenerator(RuntimeError("boom")))
        resp = TestClient(app, raise_server_exceptions=False).post("/api/v1/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"detail": "boom"}

    @pytest.mark.parametrize(
        ("body", "detail"),
        [
            ({"code": CODE, "plan": {"components": [1, 2]}}, "Backend returned an invalid response"),
            (["nope"], "Backend returned an invalid response"),
            ({"explanation": "hi", "plan": {}}, "Backend returned no component code"),
        ],
    )
    def test_bad_remote_reply(self, body, detail: str) -> None:
        resp = _remote(body).post("/api/v1/generate", json={"prompt": "x"})
        assert resp.status_code == 502
        assert resp.json() == {"detail": detail}


class TestFrontendGenerate:
    def test_generate(self, client: TestClient) -> None:
        resp = client.post("/api/generate", json={"prompt": "a contact form", "currentCode": None})

        assert resp.status_code == 200
        assert set(resp.json()) == {"code", "explanation", "plan"}

    def test_missing_prompt(self, client: TestClient) -> None:
        resp = client.post("/api/generate", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Prompt is required"}

    def test_error(self) -> None:
        resp = _failing(RuntimeError("model exploded")).post("/api/generate", json={"prompt": "x"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "model exploded"}


class TestLibraryRoutes:
    def test_components(self, client: TestClient) -> None:
        resp = client.get("/api/v1/components")
        names = [c["name"] for c in resp.json()]
        assert names == ["Button", "Card", "Input", "Table", "Modal", "Sidebar", "Navbar", "Chart"]

    def test_validate(self, client: TestClient) -> None:
        resp = client.post("/api/v1/validate", json={"code": '<Button variant="huge">x</Button>'})
        data = resp.json()
        assert data["valid"] is False
        assert data["errors"] == ["Invalid value 'huge' for Button.variant"]


class TestSessions:
    def test_chat_flow(self, client: TestClient) -> None:
        session = client.post("/api/v1/sessions")
        assert session.status_code == 201
        sid = session.json()["id"]

        first = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "a login form"})
        assert first.status_code == 200
        assert first.json()["version"]["user_prompt"] == "a login form"

        second = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "add a navbar"})
        assert "<Navbar" in second.json()["code"]

        versions = client.get(f"/api/v1/sessions/{sid}/versions").json()
        assert [v["user_prompt"] for v in versions] == ["add a navbar", "a login form"]

        state = client.get(f"/api/v1/sessions/{sid}").json()
        assert len(state["messages"]) == 4
        assert state["current_code"] == second.json()["code"]

    def test_rollback(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]
        first = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "a login form"}).json()
        client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "add a chart"})

        resp = client.post(f"/api/v1/sessions/{sid}/versions/{first['version']['id']}/rollback")

        assert resp.status_code == 200
        assert client.get(f"/api/v1/sessions/{sid}").json()["current_code"] == first["code"]
        assert len(client.get(f"/api/v1/sessions/{sid}/versions").json()) == 2

    def test_update_code(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]

        resp = client.put(f"/api/v1/sessions/{sid}/code", json={"code": "<Widget />"})

        assert resp.status_code == 200
        assert resp.json()["current_code"] == "<Widget />"
        assert resp.json()["validation"]["errors"] == ["Unauthorized component: Widget"]

    def test_empty_message(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]
        resp = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": ""})
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Please enter a prompt"}

    def test_bad_remote_reply_keeps_current_code(self) -> None:
        client = _remote({"explanation": "hi", "plan": {}})
        sid = client.post("/api/v1/sessions").json()["id"]
        client.put(f"/api/v1/sessions/{sid}/code", json={"code": CODE})

        resp = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "make it blue"})

        assert resp.status_code == 502
        state = client.get(f"/api/v1/sessions/{sid}").json()
        assert state["current_code"] == CODE
        assert client.get(f"/api/v1/sessions/{sid}/versions").json() == []

    def test_message_prompt_is_stored_trimmed(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]
        resp = client.post(f"/api/v1/sessions/{sid}/messages", json={"prompt": "  a login form \n"})
        assert resp.json()["version"]["user_prompt"] == "a login form"

    def test_unknown_session(self, client: TestClient) -> None:
        resp = client.get("/api/v1/sessions/nope")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Session not found: nope"}

    def test_unknown_version(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]
        resp = client.post(f"/api/v1/sessions/{sid}/versions/missing/rollback")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Version not found: missing"}

    def test_delete(self, client: TestClient) -> None:
        sid = client.post("/api/v1/sessions").json()["id"]
        assert client.delete(f"/api/v1/sessions/{sid}").status_code == 204
        assert client.get(f"/api/v1/sessions/{sid}").status_code == 404
