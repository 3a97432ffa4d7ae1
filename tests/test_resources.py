"""Generic /api/{collection_name} endpoints: binding, list-all, update-by-id."""

from bson import ObjectId

from config import Settings
from main import create_app
from fastapi.testclient import TestClient


def test_list_returns_every_document(client, lessons):
    res = client.get("/api/lessons")
    assert res.status_code == 200
    body = res.json()
    assert [d["title"] for d in body] == ["Math", "English", "Music", "Art"]
    assert all(isinstance(d["_id"], str) for d in body)


def test_list_unknown_collection_is_empty_not_error(client):
    res = client.get("/api/doesNotExist")
    assert res.status_code == 200
    assert res.json() == []


def test_collection_names_are_case_sensitive(client, lessons):
    res = client.get("/api/Lessons")
    assert res.status_code == 200
    assert res.json() == []


def test_invalid_collection_name_is_client_error(client):
    res = client.get("/api/bad$name")
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid collection name"}


def test_list_never_exposes_passwords(client):
    client.post("/api/signup", json={"firstName": "Ada", "lastName": "L", "email": "ada@example.com", "password": "pw"})
    res = client.get("/api/users")
    assert res.status_code == 200
    assert len(res.json()) == 1
    assert "password" not in res.json()[0]


def test_strict_mode_rejects_unknown_collection(store, lessons):
    settings = Settings(_env_file=None, strict_collections=True)
    client = TestClient(create_app(settings=settings, store=store), raise_server_exceptions=False)

    assert client.get("/api/lessons").status_code == 200
    res = client.get("/api/nothingHere")
    assert res.status_code == 404
    assert res.json() == {"error": "Collection 'nothingHere' not found"}


def test_store_not_connected_returns_generic_500(settings):
    client = TestClient(create_app(settings=settings, store=None), raise_server_exceptions=False)
    res = client.get("/api/lessons")
    assert res.status_code == 500
    assert res.json() == {"error": "An error occurred"}


def test_update_merges_fields(client, lessons):
    target = lessons.find_one({"title": "Math"})
    res = client.put(f"/api/lessons/{target['_id']}", json={"availableInventory": 4})
    assert res.status_code == 200
    assert res.json() == {"msg": "success"}

    updated = lessons.find_one({"_id": target["_id"]})
    assert updated["availableInventory"] == 4
    assert updated["title"] == "Math"
    assert updated["location"] == "London"


def test_update_can_add_new_fields(client, lessons):
    target = lessons.find_one({"title": "Art"})
    res = client.put(f"/api/lessons/{target['_id']}", json={"teacher": "Mr Smith"})
    assert res.json() == {"msg": "success"}
    assert lessons.find_one({"_id": target["_id"]})["teacher"] == "Mr Smith"


def test_update_unknown_id_reports_error(client, lessons):
    res = client.put(f"/api/lessons/{ObjectId()}", json={"price": 1})
    assert res.status_code == 200
    assert res.json() == {"msg": "error"}


def test_update_without_changes_reports_error(client, lessons):
    target = lessons.find_one({"title": "Math"})
    res = client.put(f"/api/lessons/{target['_id']}", json={"price": 100})
    assert res.json() == {"msg": "error"}


def test_update_with_empty_payload_reports_error(client, lessons):
    target = lessons.find_one({"title": "Math"})
    res = client.put(f"/api/lessons/{target['_id']}", json={})
    assert res.json() == {"msg": "error"}


def test_update_ignores_id_field(client, lessons):
    target = lessons.find_one({"title": "Math"})
    res = client.put(f"/api/lessons/{target['_id']}", json={"_id": str(ObjectId()), "price": 120})
    assert res.json() == {"msg": "success"}
    assert lessons.find_one({"_id": target["_id"]})["price"] == 120


def test_update_malformed_id_is_client_error(client, lessons):
    res = client.put("/api/lessons/not-an-object-id", json={"price": 1})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid id"}


def test_update_requires_object_body(client, lessons):
    target = lessons.find_one({"title": "Math"})
    res = client.put(f"/api/lessons/{target['_id']}", json=[1, 2, 3])
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request data"


def test_list_handles_bson_only_values(client, fake_db):
    from bson import Binary, Decimal128, Regex

    fake_db["prices"].insert_one(
        {"title": "Math", "price": Decimal128("99.99"), "blob": Binary(b"\x00\x01", 5), "pattern": Regex("^ma", "i")}
    )
    res = client.get("/api/prices")
    assert res.status_code == 200
    doc = res.json()[0]
    assert doc["price"] == "99.99"
    assert doc["title"] == "Math"
    assert isinstance(doc["blob"], str)
    assert isinstance(doc["pattern"], str)
