"""End-to-end tests for the HTTP surface."""

from agent.core.prompt import BOOTSTRAP_MESSAGE


MISSING_FIELDS = "Missing sessionId or userResponse in request body."


def test_conversation_flow(client, provider):
    provider.reply_with("Hi!")
    res = client.post("/chat", json={"sessionId": "s1", "userResponse": ""})

    assert res.status_code == 200
    assert res.json() == {
        "response": "Hi!",
        "history": [
            {"role": "user", "text": BOOTSTRAP_MESSAGE},
            {"role": "model", "text": "Hi!"},
        ],
    }

    provider.reply_with("What type of vehicle?")
    res = client.post("/chat", json={"sessionId": "s1", "userResponse": "yes"})

    assert res.status_code == 200
    body = res.json()
    assert body["response"] == "What type of vehicle?"
    assert len(body["history"]) == 4
    assert body["history"][-2:] == [
        {"role": "user", "text": "yes"},
        {"role": "model", "text": "What type of vehicle?"},
    ]


def test_missing_session_id(client, provider):
    res = client.post("/chat", json={"userResponse": "Hello"})

    assert res.status_code == 400
    assert res.json() == {"error": MISSING_FIELDS}
    assert provider.sessions == []


def test_missing_user_response(client, provider):
    res = client.post("/chat", json={"sessionId": "testSession456"})

    assert res.status_code == 400
    assert res.json() == {"error": MISSING_FIELDS}


def test_null_user_response(client):
    res = client.post("/chat", json={"sessionId": "s1", "userResponse": None})

    assert res.status_code == 400
    assert res.json() == {"error": MISSING_FIELDS}


def test_wrong_field_type(client):
    res = client.post("/chat", json={"sessionId": ["s1"], "userResponse": "hi"})

    assert res.status_code == 400
    assert res.json() == {"error": MISSING_FIELDS}


def test_provider_error(client, provider, store):
    provider.error = RuntimeError("API error occurred.")

    res = client.post("/chat", json={"sessionId": "errorSession", "userResponse": "Test message"})

    assert res.status_code == 500
    assert res.json() == {"error": "Failed to get a response from Tina. Please try again."}
    assert store.get("errorSession") == []


def test_history_sync_error(client, provider):
    provider.error = RuntimeError("First content should be with role 'user', got model")

    res = client.post("/chat", json={"sessionId": "syncErrorSession", "userResponse": "Test message"})

    assert res.status_code == 500
    assert res.json() == {
        "error": "There was an internal chat history synchronization issue. "
        "Please refresh the page and try again."
    }


def test_raw_provider_text_is_not_leaked(client, provider):
    provider.error = RuntimeError("quota exceeded for project 1234")

    res = client.post("/chat", json={"sessionId": "s1", "userResponse": "hi"})

    assert "quota" not in res.text


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
