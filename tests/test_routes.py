import httpx
from fastapi.testclient import TestClient

from empathic_chatbot.config import Settings, get_settings
from empathic_chatbot.dependencies import get_http_client

RELAY_URL = "/api/empathic-chatbot"


def get_test_client(
    app, handler, settings: Settings | None = None
) -> tuple[TestClient, list[httpx.Request]]:
    calls: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return handler(request)

    transport = httpx.MockTransport(recording)
    app.dependency_overrides[get_http_client] = lambda: httpx.AsyncClient(transport=transport)
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app), calls


def test_relay_happy_path(app, gemini_reply) -> None:
    client, _ = get_test_client(
        app,
        lambda _: httpx.Response(
            200,
            json=gemini_reply(
                "That sounds hard. ",
                usage={"promptTokenCount": 9, "candidatesTokenCount": 5, "totalTokenCount": 14},
            ),
        ),
    )

    response = client.post(RELAY_URL, json={"text": "I had a rough day"})

    assert response.status_code == 200
    assert response.json() == {
        "response": "That sounds hard.",
        "usage": {"promptTokens": 9, "candidatesTokens": 5, "totalTokens": 14},
    }


def test_relay_missing_text(app) -> None:
    client, calls = get_test_client(app, lambda _: httpx.Response(200, json={}))

    for body in ({}, {"text": ""}, {"text": 12}, ["text"]):
        response = client.post(RELAY_URL, json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid input. Please provide text."}

    assert calls == []


def test_relay_malformed_json_body(app) -> None:
    client, calls = get_test_client(app, lambda _: httpx.Response(200, json={}))

    response = client.post(
        RELAY_URL, content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to generate response")
    assert calls == []


def test_relay_missing_credential(app, monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    client, calls = get_test_client(
        app, lambda _: httpx.Response(200, json={}), settings=Settings(_env_file=None)
    )

    response = client.post(RELAY_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert "GEMINI_API_KEY" in response.json()["error"]
    assert calls == []


def test_relay_provider_status_is_mirrored(app) -> None:
    client, calls = get_test_client(
        app,
        lambda _: httpx.Response(429, json={"error": {"message": "Resource exhausted"}}),
    )

    response = client.post(RELAY_URL, json={"text": "hello"})

    assert response.status_code == 429
    assert response.json() == {"error": "Gemini API error: Resource exhausted"}
    assert len(calls) == 1


def test_relay_abnormal_finish(app, gemini_reply) -> None:
    client, _ = get_test_client(
        app, lambda _: httpx.Response(200, json=gemini_reply("cut", finish_reason="MAX_TOKENS"))
    )

    response = client.post(RELAY_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Model output was cut off (MAX_TOKENS)."}


def test_healthz(app) -> None:
    client = TestClient(app)

    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
