from fastapi.testclient import TestClient
from emojilens.main import app

client = TestClient(app)


def _sign_in(username="alice"):
    r = client.post("/api/v1/auth/simple", json={"username": username})
    assert r.status_code == 200
    return r.json()["user"]


def _analyze(user_id, title="Greeting", content="Hi there 😊😊😊😊 sad 😢"):
    r = client.post(
        "/api/v1/analyze-emoji",
        json={"user_id": user_id, "title": title, "content": content},
    )
    assert r.status_code == 200
    return r.json()


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_simple_auth_creates_then_reuses_user():
    user = _sign_in("  alice  ")
    assert user["username"] == "alice"
    assert "access_token" not in user

    again = _sign_in("alice")
    assert again["id"] == user["id"]

    r = client.get(f"/api/v1/user/{user['id']}")
    assert r.status_code == 200
    assert r.json()["username"] == "alice"


def test_simple_auth_requires_username():
    r = client.post("/api/v1/auth/simple", json={"username": "   "})
    assert r.status_code == 400
    assert r.json()["detail"] == "Username is required"


def test_get_unknown_user():
    r = client.get("/api/v1/user/nope")
    assert r.status_code == 404


def test_analyze_emoji():
    user = _sign_in()
    data = _analyze(user["id"], content="  Hi   there\t😊😊😊😊 sad 😢  ")

    record = data["emoji_text"]
    assert record["user_id"] == user["id"]
    assert record["content"] == "Hi there 😊😊😊😊 sad 😢"
    assert record["emoji_counts"] == {"😊": 4, "😢": 1}
    assert record["total_emojis"] == 5

    stats = data["stats"]
    assert stats["total_emojis"] == 5
    assert stats["unique_emojis"] == 2
    assert stats["most_used"] == {"emoji": "😊", "count": 4, "percentage": 80}

    assert data["sentiment"]["sentiment"] == "positive"
    assert data["sentiment"]["confidence"] == 0.95
    assert len(data["insights"]) == 4


def test_analyze_without_emojis():
    user = _sign_in()
    data = _analyze(user["id"], content="plain words")
    assert data["stats"]["most_used"] is None
    assert data["stats"]["emoji_counts"] == []
    assert data["sentiment"] == {"sentiment": "neutral", "score": 0.0, "confidence": 0.0}
    assert len(data["insights"]) == 1


def test_analyze_rejects_invalid_body():
    r = client.post("/api/v1/analyze-emoji", json={"title": "missing user and content"})
    assert r.status_code == 422


def test_list_and_get_emoji_texts():
    alice = _sign_in("alice")
    bob = _sign_in("bob")
    first = _analyze(alice["id"], title="one")["emoji_text"]
    _analyze(alice["id"], title="two")
    _analyze(bob["id"], title="bob's")

    r = client.get(f"/api/v1/user/{alice['id']}/emoji-texts")
    assert r.status_code == 200
    assert [t["title"] for t in r.json()] == ["two", "one"]

    r = client.get(f"/api/v1/emoji-text/{first['id']}")
    assert r.status_code == 200
    assert r.json()["title"] == "one"

    r = client.get("/api/v1/emoji-text/missing")
    assert r.status_code == 404
    assert r.json()["detail"] == "Emoji text not found"


def test_update_content_recomputes_counts():
    user = _sign_in()
    record = _analyze(user["id"])["emoji_text"]

    r = client.put(f"/api/v1/emoji-text/{record['id']}", json={"content": "🎉 party  🎉 😢"})
    assert r.status_code == 200
    data = r.json()
    assert data["emoji_text"]["content"] == "🎉 party 🎉 😢"
    assert data["emoji_text"]["emoji_counts"] == {"🎉": 2, "😢": 1}
    assert data["emoji_text"]["total_emojis"] == 3
    assert data["emoji_text"]["title"] == "Greeting"
    assert data["stats"]["total_emojis"] == 3
    assert data["insights"]


def test_update_title_only_keeps_counts():
    user = _sign_in()
    record = _analyze(user["id"])["emoji_text"]

    r = client.put(f"/api/v1/emoji-text/{record['id']}", json={"title": "Renamed"})
    assert r.status_code == 200
    data = r.json()
    assert data["emoji_text"]["title"] == "Renamed"
    assert data["emoji_text"]["emoji_counts"] == record["emoji_counts"]
    assert data["emoji_text"]["total_emojis"] == record["total_emojis"]
    assert data["stats"] is None
    assert data["insights"] is None


def test_update_requires_title_or_content():
    user = _sign_in()
    record = _analyze(user["id"])["emoji_text"]
    r = client.put(f"/api/v1/emoji-text/{record['id']}", json={})
    assert r.status_code == 400
    assert r.json()["detail"] == "Title or content is required"


def test_update_unknown_record():
    r = client.put("/api/v1/emoji-text/missing", json={"title": "x"})
    assert r.status_code == 404


def test_delete_emoji_text():
    user = _sign_in()
    record = _analyze(user["id"])["emoji_text"]

    r = client.delete(f"/api/v1/emoji-text/{record['id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True}

    r = client.delete(f"/api/v1/emoji-text/{record['id']}")
    assert r.status_code == 404


def test_popular_emojis_and_categories():
    r = client.get("/api/v1/popular-emojis")
    assert r.status_code == 200
    assert len(r.json()) == 160

    r = client.get("/api/v1/emoji-categories")
    assert r.status_code == 200
    assert "Hearts & Love" in r.json()
