"""Tests for the Lead Qualification API endpoints."""

SESSION = {"X-Session-Id": "session-1"}


def _create(client, **lead):
    resp = client.post("/api/v1/conversations", json={"name": "Asha", **lead}, headers=SESSION)
    assert resp.status_code == 201
    return resp.json()


def test_root_endpoint(client):
    resp = client.get("/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["service"] == "Lead Qualification API"
    assert "version" in data


def test_health_endpoint(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["ledger"] == "InMemoryClassificationLedger"


def test_list_industries(client):
    resp = client.get("/api/v1/industries")
    assert resp.status_code == 200
    ids = [item["id"] for item in resp.json()]
    assert ids == ["real_estate", "software"]
    required = {item["id"]: item["required_fields"] for item in resp.json()}
    assert required["software"] == ["budget", "timeline"]
    assert required["real_estate"] == ["location", "budget", "timeline", "propertyType"]


def test_create_conversation(client):
    data = _create(client)
    assert data["conversation_id"]
    assert data["greeting"].startswith("Hi Asha!")
    assert data["initial_turn"] is None


def test_create_with_initial_message(client):
    data = _create(client, initial_message="Looking for a villa in Goa")
    assert data["initial_turn"]["bot_response"]
    assert data["initial_turn"]["classification"] is None


def test_create_requires_name(client):
    resp = client.post("/api/v1/conversations", json={"phone": "9999"}, headers=SESSION)
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Invalid request"


def test_create_unknown_industry(client):
    resp = client.post("/api/v1/conversations", json={"name": "Asha", "industry": "aviation"}, headers=SESSION)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Resource not found"


def test_full_conversation_is_classified(client):
    conversation_id = _create(client)["conversation_id"]

    turns = []
    for text in ["hi", "Mumbai", "2bhk", "50L"]:
        resp = client.post(
            f"/api/v1/conversations/{conversation_id}/messages",
            json={"text": text},
            headers=SESSION,
        )
        assert resp.status_code == 200
        turns.append(resp.json())

    assert turns[-1]["classification"]["status"] == "Hot"
    assert turns[-1]["classification"]["confidence"] == 1.0
    assert turns[-1]["warnings"] == []

    detail = client.get(f"/api/v1/conversations/{conversation_id}").json()
    assert detail["status"] == "classified"
    assert detail["stage"] == "qualification"
    assert detail["metadata"]["propertyType"] == "2BHK"
    assert len(detail["messages"]) == 9

    records = client.get("/api/v1/classifications", params={"limit": 5}).json()
    assert len(records) == 1
    assert records[0]["id"] == conversation_id
    assert records[0]["status"] == "Hot"


def test_other_session_forbidden(client):
    conversation_id = _create(client)["conversation_id"]
    resp = client.post(
        f"/api/v1/conversations/{conversation_id}/messages",
        json={"text": "Mumbai"},
        headers={"X-Session-Id": "someone-else"},
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not allowed to access this conversation"


def test_missing_session_forbidden(client):
    conversation_id = _create(client)["conversation_id"]
    resp = client.post(f"/api/v1/conversations/{conversation_id}/messages", json={"text": "Mumbai"})
    assert resp.status_code == 403


def test_empty_message_rejected(client):
    conversation_id = _create(client)["conversation_id"]
    resp = client.post(
        f"/api/v1/conversations/{conversation_id}/messages",
        json={"text": ""},
        headers=SESSION,
    )
    assert resp.status_code == 422


def test_unknown_conversation(client):
    assert client.get("/api/v1/conversations/missing").status_code == 404
    resp = client.post("/api/v1/conversations/missing/messages", json={"text": "hi"}, headers=SESSION)
    assert resp.status_code == 404


def test_list_conversations(client):
    _create(client)
    _create(client, industry="software")
    resp = client.get("/api/v1/conversations")
    assert resp.status_code == 200
    data = resp.json()
    assert [c["industry"] for c in data] == ["real_estate", "software"]
    assert all(c["status"] == "active" for c in data)


def test_classifications_empty(client):
    resp = client.get("/api/v1/classifications")
    assert resp.status_code == 200
    assert resp.json() == []
