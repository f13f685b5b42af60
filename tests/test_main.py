import pytest
from fastapi.testclient import TestClient

from contentforge import main
from contentforge.config import Settings
from contentforge.main import app, create_app, get_client


@pytest.fixture
def configured(stub_client):
    """Build an app around a stub backend and return (test client, stub)."""

    def install(*script, api_key="hf_test", **options):
        backend = stub_client(*script)
        api = create_app(Settings(api_key=api_key, model="org/model", **options))
        api.dependency_overrides[get_client] = lambda: backend
        return TestClient(api), backend

    return install


def test_root_ok():
    r = TestClient(app).get("/")
    assert r.status_code == 200
    assert "POST /generate" in r.text


def test_health_reports_model(configured):
    client, _ = configured()
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "model": "org/model"}


def test_generate_success(configured):
    client, backend = configured("one two three", "Polished one two three four")

    r = client.post("/generate", json={"topic": "Solar power", "target_words": 3})

    assert r.status_code == 200
    assert r.json() == {
        "content": "Polished one two three four",
        "word_count": 5,
        "note": "Generated using Hugging Face model: stub/model",
    }
    assert len(backend.calls) == 2


@pytest.mark.parametrize("body", [{}, {"topic": ""}, {"topic": "  ab  "}, {"topic": 12}])
def test_generate_rejects_bad_topic(configured, body):
    client, backend = configured("unused")

    r = client.post("/generate", json=body)

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid topic."}
    assert backend.calls == []


def test_generate_rejects_bad_target_words(configured):
    client, backend = configured("unused")

    r = client.post("/generate", json={"topic": "Solar power", "target_words": 0})

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid request."}
    assert backend.calls == []


def test_generate_without_credential(configured):
    client, backend = configured("unused", api_key=None)

    r = client.post("/generate", json={"topic": "Solar power"})

    assert r.status_code == 500
    assert r.json() == {"error": "Server not configured with HF_API_KEY."}
    assert backend.calls == []


def test_generate_first_call_failure(configured, backend_down):
    client, backend = configured(backend_down)

    r = client.post("/generate", json={"topic": "Solar power"})

    assert r.status_code == 500
    assert r.json() == {
        "error": "Hugging Face first call failed: HuggingFace error: 503 - model is loading"
    }
    assert len(backend.calls) == 1


def test_generate_degrades_when_later_calls_fail(configured, backend_down):
    client, backend = configured("Short draft.", backend_down)

    r = client.post("/generate", json={"topic": "Solar power", "target_words": 50})

    assert r.status_code == 200
    assert r.json()["content"] == "Short draft."
    assert r.json()["word_count"] == 2
    assert len(backend.calls) == 3


def test_generate_accepts_sources(configured):
    client, backend = configured("enough text", "final text")

    r = client.post(
        "/generate",
        json={
            "topic": "Solar power",
            "target_words": 1,
            "style": "formal",
            "sources": [{"title": "Report", "text": "Cheap panels."}, {"title": "Empty"}, None],
        },
    )

    assert r.status_code == 200
    assert backend.prompts[0].count("SOURCE:") == 1


def test_oversized_body_rejected():
    small = create_app(Settings(api_key="hf_test", max_body_bytes=64))

    r = TestClient(small).post("/generate", json={"topic": "x" * 200})

    assert r.status_code == 413
    assert r.json() == {"error": "Request body too large."}


def test_cors_allows_any_origin(configured):
    client, _ = configured()

    r = client.get("/health", headers={"Origin": "https://example.com"})

    assert r.headers["access-control-allow-origin"] == "*"


def test_injected_settings_ignore_environment(monkeypatch, stub_client):
    monkeypatch.delenv("HF_API_KEY", raising=False)
    monkeypatch.delenv("HF_MODEL", raising=False)
    backend = stub_client("one two three", "Polished text")
    built_with = []

    def fake_build_client(settings):
        built_with.append(settings)
        return backend

    monkeypatch.setattr(main, "build_client", fake_build_client)
    client = TestClient(create_app(Settings(api_key="hf_injected", model="org/injected")))

    assert client.get("/health").json() == {"status": "ok", "model": "org/injected"}
    r = client.post("/generate", json={"topic": "Solar power", "target_words": 3})
    assert r.status_code == 200
    assert built_with[0].api_key == "hf_injected"


def test_missing_credential_reported_before_validation(configured):
    client, backend = configured("unused", api_key=None)

    r = client.post("/generate", json={"topic": "ab"})

    assert r.status_code == 500
    assert r.json() == {"error": "Server not configured with HF_API_KEY."}
    assert backend.calls == []


def test_generate_ignores_non_object_sources(configured):
    client, backend = configured("enough text", "final text")

    r = client.post(
        "/generate",
        json={
            "topic": "Solar power",
            "target_words": 1,
            "sources": ["stray", None, 5, ["nested"], {"title": "A", "text": "x"}],
        },
    )

    assert r.status_code == 200
    assert backend.prompts[0].count("SOURCE:") == 1
    assert "SOURCE: A\nx\n---\n" in backend.prompts[0]


def test_chunked_oversized_body_rejected(configured):
    client, backend = configured("unused", max_body_bytes=64)
    chunks = [b'{"topic": "', b"x" * 200, b'"}']

    r = client.post(
        "/generate",
        content=iter(chunks),
        headers={"content-type": "application/json"},
    )

    assert r.status_code == 413
    assert r.json() == {"error": "Request body too large."}
    assert backend.calls == []


def test_unknown_route_uses_error_shape():
    r = TestClient(app).get("/missing")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
