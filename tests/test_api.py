import asyncio

import pytest
from fastapi.testclient import TestClient

from conftest import PUBLIC_URL
from db import LocalDatabase
from main import app
from models.fixtures import HOSTELS, MAKERERE_ID, SERVICES, UNIVERSITIES
from spotlight_routes import vote
from utils.local_storage import MemoryKeyValueStore
from utils.repositories import build_repositories, get_repositories
from utils.storage_service import get_storage_service

ABOUT = "Final year student who runs the campus coding club and mentors first years."


@pytest.fixture
def client(mock_repos, storage):
    app.dependency_overrides[get_repositories] = lambda: mock_repos
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def nomination(**overrides):
    form = {
        "full_name": "Amina Nakato",
        "university": MAKERERE_ID,
        "course": "Computer Science",
        "year_of_study": "3",
        "about": ABOUT,
        "extracurricular_activities": "Coding club, Netball",
        "nominee": "wcw",
    }
    form.update(overrides)
    return form


# ─────────────────────────────────────────────
# catalog
# ─────────────────────────────────────────────
def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "backend": "mock"}


def test_catalog(client):
    assert len(client.get("/universities").json()) == len(UNIVERSITIES)
    assert [s["id"] for s in client.get("/services").json()] == [s.id for s in SERVICES]


def test_service_providers(client):
    res = client.get("/services/food/providers", params={"university": "Makerere University"})
    assert res.status_code == 200
    assert res.json()[0]["id"] == "food-mak-1"

    assert client.get("/services/food/providers", params={"university": "Nowhere"}).status_code == 404
    assert client.get("/services/parking/providers", params={"university": "Makerere University"}).status_code == 404


# ─────────────────────────────────────────────
# collections
# ─────────────────────────────────────────────
def test_collection_crud(client):
    assert [h["id"] for h in client.get("/api/hostels").json()] == [h.id for h in HOSTELS]
    assert client.get("/api/hostels/1").json()["name"] == "Olympia Hostel"
    assert client.get("/api/hostels/nope").status_code == 404

    res = client.post("/api/hostels", json={
        "name": "Akamwesi Hostel",
        "location": "Kikoni",
        "price_range": "700,000 UGX",
        "image_url": "",
        "university_id": MAKERERE_ID,
    })
    assert res.status_code == 201
    new_id = res.json()["id"]
    assert new_id.startswith("hostels-")

    assert client.patch(f"/api/hostels/{new_id}", json={"rating": 4.4}).json() == {"status": "ok"}
    assert client.get(f"/api/hostels/{new_id}").json()["rating"] == 4.4

    replaced = {**HOSTELS[1].model_dump(), "name": "Nana Annex", "id": "ignored"}
    res = client.put("/api/hostels/2", json=replaced)
    assert res.status_code == 200
    assert res.json()["id"] == "2"
    assert client.get("/api/hostels/2").json()["name"] == "Nana Annex"

    assert client.delete(f"/api/hostels/{new_id}").status_code == 204
    assert client.get(f"/api/hostels/{new_id}").status_code == 404


def test_invalid_record_is_rejected(client):
    assert client.post("/api/jobs", json={"title": "No company"}).status_code == 422
    assert client.patch("/api/jobs/1", json={"type": "Gig"}).status_code == 422


def test_roommate_profiles_route(client):
    res = client.get("/api/roommate-profiles")
    assert [p["id"] for p in res.json()] == ["demo1"]


def test_database_failure_is_503():
    store = MemoryKeyValueStore()
    store.set("unistay_sqlite_db", "not base64 at all!")
    broken = LocalDatabase(store)
    app.dependency_overrides[get_repositories] = lambda: build_repositories("local", local_database=broken)
    try:
        res = TestClient(app).get("/api/hostels")
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 503
    assert "initialization failed" in res.json()["message"]


# ─────────────────────────────────────────────
# uploads
# ─────────────────────────────────────────────
def test_upload_and_delete(client, s3_client, make_image):
    image = make_image()
    res = client.post("/api/uploads/hostels", data={"folder": "olympia"},
                      files={"file": (image.filename, image.data, image.content_type)})
    assert res.status_code == 200
    url = res.json()["url"]
    assert url.startswith(f"{PUBLIC_URL}/uploads/hostels/olympia/")

    assert client.delete("/api/uploads/hostels", params={"url": url}).status_code == 204
    assert s3_client.objects == {}


def test_batch_upload(client, make_image):
    files = [("files", (f"p{i}.jpg", make_image().data, "image/jpeg")) for i in range(2)]
    res = client.post("/api/uploads/events/batch", files=files)
    assert res.status_code == 200
    assert len(res.json()["urls"]) == 2


def test_upload_errors(client, s3_client):
    res = client.post("/api/uploads/hostels", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert res.status_code == 400
    assert res.json()["detail"] == "File must be an image"

    res = client.post("/api/uploads/memes", files={"file": ("a.jpg", b"x", "image/jpeg")})
    assert res.status_code == 400

    s3_client.fail_put = True
    res = client.post("/api/uploads/jobs", files={"file": ("a.jpg", b"x", "image/jpeg")})
    assert res.status_code == 502

    res = client.delete("/api/uploads/hostels", params={"url": "https://elsewhere.test/a.jpg"})
    assert res.status_code == 400


# ─────────────────────────────────────────────
# spotlight
# ─────────────────────────────────────────────
def test_nomination_with_photo(client, s3_client, make_image):
    image = make_image()
    res = client.post("/api/spotlight/nominations", data=nomination(),
                      files={"image": (image.filename, image.data, image.content_type)})
    assert res.status_code == 201
    nominee = res.json()
    assert nominee["id"].startswith("student_spotlights-")
    assert nominee["gender"] == "female"
    assert nominee["votes"] == 0
    assert nominee["is_winner"] is False
    assert nominee["interests"] == ["Coding club", "Netball"]
    assert nominee["bio"] == f"{ABOUT}\n\nExtracurricular Activities: Coding club, Netball"

    call = s3_client.calls[0][1]
    assert call["Bucket"] == "news_uploads"
    assert call["Key"].startswith("spotlight-nominations/")
    assert nominee["image_url"] == f"{PUBLIC_URL}/news_uploads/{call['Key']}"


def test_nomination_validation(client, s3_client):
    res = client.post("/api/spotlight/nominations", data=nomination(about="Too short", course=""))
    assert res.status_code == 400
    detail = res.json()["detail"]
    assert set(detail) == {"about", "course", "image"}
    assert s3_client.calls == []

    res = client.post("/api/spotlight/nominations", data=nomination(nominee="mvp", image_url="/x.jpg"))
    assert res.status_code == 400


def test_vote_and_ranking(client):
    first = client.post("/api/spotlight/nominations", data=nomination(image_url="/a.jpg")).json()
    second = client.post("/api/spotlight/nominations",
                         data=nomination(full_name="Brian Okello", nominee="mcm", image_url="/b.jpg")).json()
    assert second["gender"] == "male"

    assert client.post(f"/api/spotlight/{second['id']}/vote").json() == {"status": "ok", "votes": 1}
    assert client.post(f"/api/spotlight/{second['id']}/vote").json()["votes"] == 2
    assert client.post("/api/spotlight/nobody/vote").status_code == 404

    ranking = client.get("/api/spotlight").json()
    assert [n["id"] for n in ranking] == [second["id"], first["id"]]


# ─────────────────────────────────────────────
# search and persistence
# ─────────────────────────────────────────────
def test_search(client):
    res = client.get("/api/search", params={"q": "olympia"})
    assert [(r["search_type"], r["item"]["id"]) for r in res.json()] == [("hostel", "1")]
    assert client.get("/api/search", params={"q": " "}).json() == []

    res = client.get("/api/search/hostels", params={"q": "hostel", "max_price": 900000})
    assert [h["id"] for h in res.json()] == ["2"]


def test_local_db_save(client, local_repos, kv_store):
    assert client.post("/api/local-db/save").status_code == 409

    app.dependency_overrides[get_repositories] = lambda: local_repos
    res = client.post("/api/local-db/save")
    assert res.status_code == 200
    assert kv_store.get("unistay_sqlite_db")


def test_concurrent_votes_are_all_counted(mock_repos):
    async def run():
        nominee = await mock_repos.spotlights.add({"name": "Amina Nakato"})
        mock_repos.spotlights.database.latency_scale = 0.01
        await asyncio.gather(vote(nominee.id, mock_repos), vote(nominee.id, mock_repos))
        return await mock_repos.spotlights.get(nominee.id)

    assert asyncio.run(run()).votes == 2


def test_stats(client):
    client.post("/api/contact", data=contact())
    assert client.get("/api/stats").json() == {
        "hostels": 2,
        "news": 1,
        "events": 1,
        "jobs": 1,
        "roommate_profiles": 1,
        "student_spotlights": 0,
        "contact_submissions": 1,
    }


# ─────────────────────────────────────────────
# contact
# ─────────────────────────────────────────────
def contact(**overrides):
    form = {
        "name": "  Peter Ssali ",
        "email": "peter@example.com",
        "phone": "+256 (700) 123-456",
        "subject": "Listing my hostel",
        "message": "How do I add my hostel to UniStay?",
    }
    form.update(overrides)
    return form


def test_contact_submission_lifecycle(client):
    res = client.post("/api/contact", data=contact())
    assert res.status_code == 201
    first = res.json()
    assert first["name"] == "Peter Ssali"
    assert first["read"] is False
    assert first["id"].startswith("contact_submissions-")
    assert first["timestamp"].endswith("Z")

    second = client.post("/api/contact", data=contact(subject="Second")).json()
    assert client.get("/api/contact/count").json() == {"count": 2}

    assert client.post(f"/api/contact/{first['id']}/read").json() == {"status": "ok"}
    by_id = {s["id"]: s for s in client.get("/api/contact").json()}
    assert by_id[first["id"]]["read"] is True
    assert by_id[second["id"]]["read"] is False
    assert client.post("/api/contact/missing/read").status_code == 404

    assert client.delete(f"/api/contact/{first['id']}").status_code == 204
    assert client.get("/api/contact/count").json() == {"count": 1}


def test_contact_list_is_newest_first(client, mock_repos):
    for stamp in ("2025-10-01T08:00:00.000Z", "2025-10-03T08:00:00.000Z", "2025-10-02T08:00:00.000Z"):
        asyncio.run(mock_repos.contact_submissions.add({
            "name": "n", "email": "e@x.io", "phone": "0700000000", "subject": stamp,
            "message": "m", "timestamp": stamp,
        }))
    assert [s["subject"][:10] for s in client.get("/api/contact").json()] == [
        "2025-10-03", "2025-10-02", "2025-10-01",
    ]


@pytest.mark.parametrize("overrides, message", [
    ({"subject": "   "}, "Please fill in all fields"),
    ({"email": "peter@example"}, "Please enter a valid email address"),
    ({"phone": "0700 12345"}, "Please enter a valid phone number"),
    ({"phone": "call 0700123456"}, "Please enter a valid phone number"),
])
def test_contact_validation(client, overrides, message):
    res = client.post("/api/contact", data=contact(**overrides))
    assert res.status_code == 400
    assert res.json()["detail"] == message
    assert client.get("/api/contact/count").json() == {"count": 0}


# ─────────────────────────────────────────────
# roommate matches
# ─────────────────────────────────────────────
def test_roommate_matches(client):
    demo = client.get("/api/roommate-profiles/demo1").json()
    for id_, budget in (("r-close", 750000), ("r-far", 200000)):
        client.put(f"/api/roommate-profiles/{id_}", json={**demo, "budget": budget})

    res = client.get("/api/roommate-profiles/demo1/matches")
    assert res.status_code == 200
    ranked = res.json()
    assert [m["profile"]["id"] for m in ranked] == ["r-close", "r-far"]
    assert ranked[0]["match_score"] > ranked[1]["match_score"]

    res = client.get("/api/roommate-profiles/demo1/matches", params={"sort_by": "budget-low"})
    assert [m["profile"]["id"] for m in res.json()] == ["r-far", "r-close"]

    res = client.get("/api/roommate-profiles/demo1/matches", params={"max_budget": 500000})
    assert [m["profile"]["id"] for m in res.json()] == ["r-far"]

    assert client.get("/api/roommate-profiles/demo1/matches", params={"sort_by": "name"}).status_code == 422
    assert client.get("/api/roommate-profiles/nobody/matches").status_code == 404
