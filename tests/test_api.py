from datetime import date

import pytest
from fastapi.testclient import TestClient

from talent_directory.app import create_app
from talent_directory.services.persistence import JsonFilePersistence
from talent_directory.services.record_store import RecordStore


class BrokenSaves(JsonFilePersistence):
    def save_profiles(self, profiles):
        raise OSError("read-only file system")


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as c:
        yield c


PROFILE = {
    "name": "Ada Lovelace",
    "title": "Principal Engineer",
    "department": "Engineering",
    "contact": {"email": "ada@example.com", "phone": "555-0100"},
    "skills": [{"name": "Python", "category": "Languages", "proficiency": "Expert"}],
    "hourlyRate": 95,
}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_profile_crud(client):
    resp = client.post("/api/profiles", json=PROFILE)
    assert resp.status_code == 201
    created = resp.json()
    assert created["id"]
    assert created["hourlyRate"] == 95
    assert created["availability"]["status"] == "Available"

    resp = client.get(f"/api/profiles/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created

    resp = client.patch(f"/api/profiles/{created['id']}", json={"title": "CTO"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "CTO"
    assert resp.json()["department"] == "Engineering"

    assert client.delete(f"/api/profiles/{created['id']}").json() == {"deleted": True, "id": created["id"]}
    assert client.delete(f"/api/profiles/{created['id']}").status_code == 404
    assert client.get(f"/api/profiles/{created['id']}").status_code == 404
    assert client.patch(f"/api/profiles/{created['id']}", json={"title": "x"}).status_code == 404


def test_invalid_profile_is_rejected(client):
    resp = client.post("/api/profiles", json={**PROFILE, "tags": ["a|b"]})
    assert resp.status_code == 422
    resp = client.post("/api/profiles", json={"name": "No contact"})
    assert resp.status_code == 422


def test_patch_that_breaks_a_profile_is_rejected(client):
    created = client.post("/api/profiles", json=PROFILE).json()
    resp = client.patch(f"/api/profiles/{created['id']}", json={"name": None})
    assert resp.status_code == 422
    assert client.get(f"/api/profiles/{created['id']}").json()["name"] == "Ada Lovelace"


def test_profile_search(client):
    client.post("/api/profiles", json=PROFILE)
    client.post("/api/profiles", json={**PROFILE, "name": "Grace Hopper", "department": "Navy", "skills": []})

    names = [p["name"] for p in client.get("/api/profiles", params={"q": "navy"}).json()]
    assert names == ["Grace Hopper"]
    assert len(client.get("/api/profiles").json()) == 2


def test_export_csv(client):
    ada = client.post("/api/profiles", json=PROFILE).json()
    client.post("/api/profiles", json={**PROFILE, "name": "Grace Hopper"})

    resp = client.get("/api/profiles/export", params={"ids": ada["id"]})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    expected = f'attachment; filename="talent-profiles-{date.today().isoformat()}.csv"'
    assert resp.headers["content-disposition"] == expected

    lines = resp.text.splitlines()
    assert lines[0].startswith("id,name,department,title,")
    assert len(lines) == 2
    assert lines[1].startswith(f"{ada['id']},Ada Lovelace,Engineering,Principal Engineer,")


def test_export_json(client):
    client.post("/api/profiles", json=PROFILE)
    resp = client.get("/api/profiles/export", params={"format": "json"})
    assert resp.status_code == 200
    assert resp.headers["content-disposition"].endswith('.json"')
    [profile] = resp.json()
    assert profile["name"] == "Ada Lovelace"

    assert client.get("/api/profiles/export", params={"format": "xml"}).status_code == 422


def test_skill_routes(client):
    resp = client.post("/api/skills", json={"name": "Figma", "category": "Design"})
    assert resp.status_code == 201
    figma = resp.json()

    again = client.post("/api/skills", json={"name": "Figma"}).json()
    assert again == figma

    sketch = client.post("/api/skills", json={"name": "Sketch"}).json()
    assert sketch["category"] == "Uncategorized"

    assert client.patch(f"/api/skills/{sketch['id']}", json={"name": "Figma"}).status_code == 409
    resp = client.patch(f"/api/skills/{sketch['id']}", json={"category": "Design"})
    assert resp.status_code == 200
    assert resp.json()["category"] == "Design"
    assert client.patch("/api/skills/missing", json={"name": "X"}).status_code == 404

    assert len(client.get("/api/skills").json()) == 2
    assert client.delete(f"/api/skills/{figma['id']}").status_code == 200
    assert client.delete(f"/api/skills/{figma['id']}").status_code == 404
    assert client.get(f"/api/skills/{figma['id']}").status_code == 404


def test_category_routes(client):
    assert client.post("/api/skills/categories", json={"name": "Design"}).status_code == 201
    assert client.post("/api/skills/categories", json={"name": "Design"}).status_code == 409
    assert client.post("/api/skills/categories", json={"name": "Uncategorized"}).status_code == 409
    figma = client.post("/api/skills", json={"name": "Figma", "category": "Design"}).json()

    resp = client.put("/api/skills/categories/Design", json={"name": "Product Design"})
    assert resp.status_code == 200
    assert client.get("/api/skills/categories").json() == ["Product Design"]
    assert client.get(f"/api/skills/{figma['id']}").json()["category"] == "Product Design"

    assert client.put("/api/skills/categories/Missing", json={"name": "X"}).status_code == 404
    assert client.put("/api/skills/categories/Uncategorized", json={"name": "X"}).status_code == 409
    assert client.delete("/api/skills/categories/Uncategorized").status_code == 409

    assert client.delete("/api/skills/categories/Product Design").status_code == 200
    assert client.delete("/api/skills/categories/Product Design").status_code == 404
    assert client.get(f"/api/skills/{figma['id']}").json()["category"] == "Uncategorized"
    assert client.get("/api/skills/categories").json() == []


def test_csv_import_route(client):
    text = (
        "name,department,title,email,phone,skills\r\n"
        "Ada Lovelace,Engineering,Principal,ada@example.com,555-0100,Python:Languages:Expert\r\n"
        ",Engineering,Nameless,x@example.com,555-0101,\r\n"
    )
    resp = client.post(
        "/api/import/csv",
        files={"file": ("people.csv", text.encode("utf-8"), "text/csv")},
    )
    assert resp.status_code == 200
    report = resp.json()
    assert report["total"] == 2
    assert report["imported"] == 1
    assert report["failed"] == 1
    assert report["errors"][0]["row"] == 2

    assert [p["name"] for p in client.get("/api/profiles").json()] == ["Ada Lovelace"]
    assert [s["name"] for s in client.get("/api/skills").json()] == ["Python"]


def test_csv_import_rejects_other_files(client):
    resp = client.post("/api/import/csv", files={"file": ("people.xlsx", b"PK", "application/octet-stream")})
    assert resp.status_code == 400


def test_storage_failure_returns_500(tmp_path):
    store = RecordStore(BrokenSaves(tmp_path / "data"))
    with TestClient(create_app(store)) as client:
        resp = client.post("/api/profiles", json=PROFILE)
        assert resp.status_code == 500
        assert client.get("/api/profiles").json() == []
