import uuid

from fastapi.testclient import TestClient

from teamdocs.core.errors import UpstreamError
from teamdocs.db.backends import SqlBackend
from teamdocs.main import create_app

from tests.conftest import FakeGenerator, TickingClock, register


def create_document(client, headers, **fields):
    fields.setdefault("title", "Release Notes")
    fields.setdefault("content", "What we are shipping")
    response = client.post("/api/documents", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["storage"] == "memory"


def test_register_login_and_me(client):
    headers, user = register(client, "alice@example.com", name="Alice")
    assert user["role"] == "user"
    assert "password_hash" not in user

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["id"]

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"

    renamed = client.put("/api/auth/me", json={"name": "Alice Liddell"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Alice Liddell"


def test_register_duplicate_and_invalid(client):
    register(client, "alice@example.com")

    duplicate = client.post("/api/auth/register", json={
        "email": "alice@example.com", "password": "secret123", "name": "Alice"
    })
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "User already exists"

    short = client.post("/api/auth/register", json={
        "email": "bob@example.com", "password": "123", "name": "Bob"
    })
    assert short.status_code == 400
    assert short.json()["detail"] == "Invalid input"
    assert short.json()["errors"]


def test_bad_login(client):
    register(client, "alice@example.com")

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_authentication_required(client):
    missing = client.get("/api/documents")
    assert missing.status_code == 401
    assert missing.json()["detail"] == "Access token required"

    bad = client.get("/api/documents", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401
    assert bad.headers["www-authenticate"] == "Bearer"


def test_document_lifecycle(client):
    headers, user = register(client, "alice@example.com", name="Alice")

    created = create_document(client, headers, title="Onboarding", content="Welcome...", tags=["hr"])
    assert created["version"] == 1
    assert created["author_id"] == user["id"]

    updated = client.put(
        f"/api/documents/{created['id']}", json={"title": "Onboarding Guide"}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["version"] == 2
    assert updated.json()["content"] == "Welcome..."

    details = client.get(f"/api/documents/{created['id']}", headers=headers).json()
    assert details["title"] == "Onboarding Guide"
    assert details["author"]["name"] == "Alice"
    assert [v["version"] for v in details["versions"]] == [2, 1]

    versions = client.get(f"/api/documents/{created['id']}/versions", headers=headers).json()
    assert [v["change_description"] for v in versions] == ["Document updated", "Initial version"]

    listing = client.get("/api/documents", headers=headers).json()
    assert [item["id"] for item in listing] == [created["id"]]

    deleted = client.delete(f"/api/documents/{created['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Document deleted successfully"}

    assert client.get(f"/api/documents/{created['id']}", headers=headers).status_code == 404
    assert client.get(f"/api/documents/{created['id']}/versions", headers=headers).json() == []

    activities = client.get("/api/activities", headers=headers).json()
    assert [a["type"] for a in activities] == ["deleted"]
    assert activities[0]["description"] == 'Deleted document "Onboarding Guide"'
    assert activities[0]["document"] is None


def test_only_author_or_admin_can_modify(client):
    alice, _ = register(client, "alice@example.com")
    bob, _ = register(client, "bob@example.com")
    admin, admin_user = register(client, "admin@example.com")
    assert admin_user["role"] == "admin"

    document = create_document(client, alice)
    url = f"/api/documents/{document['id']}"

    forbidden = client.put(url, json={"content": "hijacked"}, headers=bob)
    assert forbidden.status_code == 403
    assert client.delete(url, headers=bob).status_code == 403

    by_admin = client.put(url, json={"content": "moderated"}, headers=admin)
    assert by_admin.status_code == 200
    assert by_admin.json()["version"] == 2
    assert by_admin.json()["author_id"] == document["author_id"]

    assert client.delete(url, headers=admin).status_code == 200


def test_update_conflict_and_missing(client):
    headers, _ = register(client, "alice@example.com")
    document = create_document(client, headers)
    url = f"/api/documents/{document['id']}"

    client.put(url, json={"content": "second"}, headers=headers)
    conflict = client.put(url, json={"content": "stale", "expected_version": 1}, headers=headers)
    assert conflict.status_code == 409

    missing = f"/api/documents/{uuid.uuid4()}"
    assert client.put(missing, json={"content": "x"}, headers=headers).status_code == 404
    assert client.delete(missing, headers=headers).status_code == 404


def test_update_validation(client):
    headers, _ = register(client, "alice@example.com")
    document = create_document(client, headers, summary="Short", tags=["beta"])
    url = f"/api/documents/{document['id']}"

    assert client.put(url, json={"title": None}, headers=headers).status_code == 400
    assert client.put(url, json={"title": "   "}, headers=headers).status_code == 400

    cleared = client.put(url, json={"summary": None, "tags": None}, headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["summary"] is None
    assert cleared.json()["tags"] == []
    assert cleared.json()["title"] == "Release Notes"


def test_create_validation(client):
    headers, _ = register(client, "alice@example.com")

    response = client.post("/api/documents", json={"content": "no title"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input"


def test_text_search(client):
    headers, _ = register(client, "alice@example.com")
    notes = create_document(client, headers, tags=["beta"])
    create_document(client, headers, title="Lunch", content="Tacos")

    response = client.get("/api/search", params={"q": "BETA"}, headers=headers)

    assert response.status_code == 200
    assert [(hit["id"], hit["relevance"]) for hit in response.json()] == [(notes["id"], None)]
    assert client.get("/api/search", params={"q": "gamma"}, headers=headers).json() == []
    assert client.get("/api/search", headers=headers).status_code == 400
    assert client.get("/api/search", params={"q": "  "}, headers=headers).status_code == 400


def test_semantic_search(client, generator):
    headers, _ = register(client, "alice@example.com")
    notes = create_document(client, headers)
    generator.responses.append('[{"index": 0, "relevance": 88}]')

    response = client.get("/api/search", params={"q": "upcoming features", "type": "semantic"}, headers=headers)

    assert response.status_code == 200
    assert [(hit["id"], hit["relevance"]) for hit in response.json()] == [(notes["id"], 88)]


def test_semantic_search_falls_back(client, generator):
    headers, _ = register(client, "alice@example.com")
    notes = create_document(client, headers)
    generator.error = UpstreamError("unavailable")

    response = client.get("/api/search", params={"q": "shipping", "type": "semantic"}, headers=headers)

    assert response.status_code == 200
    assert [hit["id"] for hit in response.json()] == [notes["id"]]


def test_ai_endpoints(client, generator):
    headers, _ = register(client, "alice@example.com")
    create_document(client, headers, title="Deploy guide", content="Run the pipeline")
    generator.responses.extend(["A guide to deploys.", '["ops", "ci"]', "Run the pipeline (Deploy guide)."])
    payload = {"title": "Deploy guide", "content": "Run the pipeline"}

    summary = client.post("/api/ai/summarize", json=payload, headers=headers)
    assert summary.json() == {"summary": "A guide to deploys."}

    tags = client.post("/api/ai/generate-tags", json=payload, headers=headers)
    assert tags.json() == {"tags": ["ops", "ci"]}

    answer = client.post("/api/ai/qa", json={"question": "How do I deploy?"}, headers=headers)
    assert answer.json() == {"answer": "Run the pipeline (Deploy guide)."}
    assert "Document: Deploy guide" in generator.calls[-1]["prompt"]


def test_ai_failure_is_bad_gateway(client, generator):
    headers, _ = register(client, "alice@example.com")
    generator.error = RuntimeError("quota exceeded")

    response = client.post("/api/ai/summarize", json={"title": "T", "content": "C"}, headers=headers)

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to generate summary"


def test_activities_limit(client):
    headers, _ = register(client, "alice@example.com")
    for n in range(12):
        create_document(client, headers, title=f"Doc {n}")

    default = client.get("/api/activities", headers=headers).json()
    assert len(default) == 10
    assert default[0]["description"] == 'Created document "Doc 11"'
    assert default[0]["user"]["email"] == "alice@example.com"
    assert default[0]["document"]["title"] == "Doc 11"

    assert len(client.get("/api/activities", params={"limit": 3}, headers=headers).json()) == 3
    assert client.get("/api/activities", params={"limit": 0}, headers=headers).status_code == 400


def test_sql_backend_end_to_end(settings):
    sql_settings = settings.model_copy(update={"storage_backend": "sql"})
    app = create_app(sql_settings, backend=SqlBackend(sql_settings, clock=TickingClock()), generator=FakeGenerator())

    with TestClient(app) as client:
        assert client.get("/health").json()["storage"] == "sql"
        headers, _ = register(client, "alice@example.com")
        document = create_document(client, headers, tags=["beta"])

        updated = client.put(f"/api/documents/{document['id']}", json={"content": "v2"}, headers=headers)
        assert updated.json()["version"] == 2

        hits = client.get("/api/search", params={"q": "beta"}, headers=headers).json()
        assert [hit["id"] for hit in hits] == [document["id"]]

        assert client.delete(f"/api/documents/{document['id']}", headers=headers).status_code == 200
        assert client.get(f"/api/documents/{document['id']}", headers=headers).status_code == 404
