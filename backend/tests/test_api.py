import json

import pytest
from fastapi.testclient import TestClient

from conftest import REMOTE_JD, VALID_CONTENT, FakeGateway, make_response
from resumegen.main import app
from resumegen.utils.dependencies import get_generation_service, get_profile_store

GENERATE_BODY = {
    "profile": "jd",
    "jd": REMOTE_JD,
    "roleName": "Senior Engineer!",
    "companyName": "Acme, Inc.",
}


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(make_service, profile_store, gateway):
    app.dependency_overrides[get_generation_service] = lambda: make_service(gateway)
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── POST /api/generate ───────────────────────────────────────────────────────


def test_generate_returns_pdf_attachment(client, gateway):
    raw = "```json\n" + json.dumps(VALID_CONTENT)[:-1] + ",}\n```"
    gateway.responses.append(make_response(raw))

    response = client.post("/api/generate", json=GENERATE_BODY)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == (
        'attachment; filename="Jane_Doe_Senior_Engineer_Acme_Inc.pdf"'
    )
    assert response.content.startswith(b"%PDF")


def test_generate_rejects_onsite_job(client, gateway):
    body = {**GENERATE_BODY, "jd": "On-site role in Denver, must relocate."}

    response = client.post("/api/generate", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["locationType"] == "onsite"
    assert "ONSITE" in payload["error"]
    assert gateway.calls == []


def test_generate_requires_role_name(client, gateway):
    body = {k: v for k, v in GENERATE_BODY.items() if k != "roleName"}

    response = client.post("/api/generate", json=body)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Role name is required",
        "kind": "request_validation",
        "stage": "validating",
    }
    assert gateway.calls == []


def test_generate_unknown_profile(client):
    response = client.post("/api/generate", json={**GENERATE_BODY, "profile": "nobody"})

    assert response.status_code == 404
    assert response.json()["error"] == 'Profile with slug "nobody" not found'
    assert response.json()["stage"] == "loading"


def test_generate_unknown_template(client, gateway):
    response = client.post("/api/generate", json={**GENERATE_BODY, "template": "Nope"})

    assert response.status_code == 404
    assert gateway.calls == []


def test_generate_invalid_model_output(client, gateway):
    gateway.responses.append(make_response("I cannot help with that."))

    response = client.post("/api/generate", json=GENERATE_BODY)

    assert response.status_code == 500
    assert response.json()["kind"] == "model_refused"
    assert response.json()["stage"] == "extracting"


# ── Catalog ──────────────────────────────────────────────────────────────────


def test_list_profiles(client):
    response = client.get("/api/profiles")

    assert response.status_code == 200
    assert {"id": "jd", "resume": "Jane Q Doe", "template": "Resume-Tech-Teal", "prompt": "default"} in response.json()


def test_list_templates(client):
    payload = client.get("/api/templates").json()

    assert payload["default"] == "Resume"
    ids = [t["id"] for t in payload["templates"]]
    assert "Resume" in ids and "Resume-Executive-Navy" in ids
    assert len(ids) == 10


def test_list_roles(client):
    assert "devops" in client.get("/api/roles").json()["roles"]


def test_providers_reflect_header_keys(client):
    response = client.get("/api/llm/providers", headers={"X-Anthropic-Key": "sk-ant-header"})

    providers = {p["id"]: p for p in response.json()["providers"]}
    assert providers["claude"]["configured"] is True
    assert "sk-ant-header" not in response.text


def test_health(client):
    assert client.get("/api/health").json()["status"] == "healthy"


# ── Profile detail and template preview ──────────────────────────────────────


def test_get_profile(client):
    response = client.get("/api/profiles/jd")

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "Jane Q Doe"
    assert payload["template"] == "Resume-Tech-Teal"
    assert [job["company"] for job in payload["experience"]] == ["Northwind", "Contoso", "Fabrikam"]


def test_get_unknown_profile(client):
    response = client.get("/api/profiles/nobody")

    assert response.status_code == 404
    assert response.json()["error"] == 'Profile with slug "nobody" not found'


def test_preview_renders_inline_pdf(client, gateway):
    response = client.get("/api/preview", params={"template": "Resume-Bold-Emerald"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'inline; filename="preview-Resume-Bold-Emerald.pdf"'
    assert response.content.startswith(b"%PDF")
    assert gateway.calls == []


def test_preview_requires_template(client):
    response = client.get("/api/preview")

    assert response.status_code == 400
    assert response.json()["error"] == "Template parameter required"


def test_preview_unknown_template(client):
    response = client.get("/api/preview", params={"template": "Nope"})

    assert response.status_code == 404
    assert response.json()["error"] == 'Template "Nope" not found'
