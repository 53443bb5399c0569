from emojilens.services.storage import MemStorage


def test_analysis_lifecycle():
    store = MemStorage()
    record = store.create_analysis("u1", "title", "hi 😊", {"😊": 1}, 1)
    assert store.get_analysis(record.id) == record

    updated = store.update_analysis(record.id, title="renamed")
    assert updated.title == "renamed"
    assert updated.content == "hi 😊"
    assert updated.emoji_counts == {"😊": 1}
    assert updated.updated_at >= record.updated_at
    # the stored record is replaced, the old object is left untouched
    assert record.title == "title"

    assert store.delete_analysis(record.id) is True
    assert store.delete_analysis(record.id) is False
    assert store.get_analysis(record.id) is None


def test_update_missing_analysis_returns_none():
    store = MemStorage()
    assert store.update_analysis("missing", title="x") is None


def test_analyses_filtered_by_owner():
    store = MemStorage()
    store.create_analysis("u1", "a", "", {}, 0)
    store.create_analysis("u2", "b", "", {}, 0)
    store.create_analysis("u1", "c", "", {}, 0)
    assert sorted(r.title for r in store.get_analyses_by_user("u1")) == ["a", "c"]
    assert store.get_analyses_by_user("nobody") == []


def test_stored_counts_are_copied():
    store = MemStorage()
    counts = {"😊": 1}
    record = store.create_analysis("u1", "a", "😊", counts, 1)
    counts["😊"] = 99
    assert store.get_analysis(record.id).emoji_counts == {"😊": 1}


def test_user_lookup_and_update():
    store = MemStorage()
    user = store.create_user("octocat", github_id=42, access_token="t1")
    assert store.get_user_by_username("octocat") == user
    assert store.get_user_by_github_id(42) == user

    updated = store.update_user(user.id, access_token="t2")
    assert updated.access_token == "t2"
    assert updated.username == "octocat"
    assert store.update_user("missing", email="x") is None


def test_generation_status_transitions():
    store = MemStorage()
    generation = store.create_generation("u1", "r1", ["a.py"], "pytest")
    assert generation.status == "generating"

    failed = store.update_generation(generation.id, status="failed", error="boom")
    assert failed.status == "failed"
    assert failed.error == "boom"
    assert store.get_generation(generation.id).status == "failed"


def test_repositories_by_user_keep_ids():
    store = MemStorage()
    listed = [{"github_id": 1, "name": "demo", "full_name": "octocat/demo", "private": False,
               "default_branch": "main"}]
    first = store.upsert_repositories("u1", listed)
    store.upsert_repositories("u2", listed)
    again = store.upsert_repositories("u1", listed)

    assert [r.id for r in again] == [r.id for r in first]
    owned = store.get_repositories_by_user("u1")
    assert [(r.id, r.full_name) for r in owned] == [(first[0].id, "octocat/demo")]
    assert store.get_repositories_by_user("nobody") == []


def test_analyses_listed_newest_first():
    store = MemStorage()
    titles = [str(i) for i in range(20)]
    for title in titles:
        store.create_analysis("u1", title, "", {}, 0)
    assert [r.title for r in store.get_analyses_by_user("u1")] == titles[::-1]
