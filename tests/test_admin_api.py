"""Admin API tests."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from civicreports.schemas.admin import CategoryCreate, UserCreate


def test_list_and_search_users(client):
    assert len(client.get("/admin/users").json()) == 5
    admins = client.get("/admin/users", params={"role": "admin"}).json()
    assert [u["email"] for u in admins] == ["admin@example.com"]
    found = client.get("/admin/users", params={"q": "SUPERVISOR"}).json()
    assert [u["id"] for u in found] == ["user-2"]


def test_user_stats(client):
    stats = client.get("/admin/users/stats").json()
    assert stats == {"total": 5, "active": 4, "inactive": 1, "admins": 1, "supervisors": 1, "mobile": 2}


def test_create_user_never_returns_password(client):
    r = client.post(
        "/admin/users",
        headers={"X-Actor": "user-1"},
        json={"name": "Nueva Persona", "email": "Nueva@Example.com", "role": "mobile", "password": "secret123"},
    )
    assert r.status_code == 201
    user = r.json()
    assert user["email"] == "nueva@example.com"
    assert "password" not in user
    activity = client.get("/activities", params={"user_id": "user-1"}).json()[0]
    assert activity["type"] == "user_created"
    assert activity["related_item_id"] == user["id"]


def test_duplicate_email_is_rejected(client):
    r = client.post("/admin/users", json={"name": "Dup", "email": "admin@example.com"})
    assert r.status_code == 400


def test_update_and_deactivate_user(client):
    r = client.patch("/admin/users/user-3", json={"name": "Técnico Uno"})
    assert r.json()["name"] == "Técnico Uno"
    r = client.post("/admin/users/user-3/deactivate")
    assert r.json()["active"] is False
    types = [a["type"] for a in client.get("/activities", params={"user_id": "user-3"}).json()]
    assert types == ["user_deactivated", "user_updated"]
    assert client.get("/admin/users/nope").status_code == 404


def test_categories(client):
    r = client.post("/admin/categories", json={"name": "Lighting", "color": "#112233"})
    assert r.status_code == 201
    category_id = r.json()["id"]
    assert client.post("/admin/categories", json={"name": "lighting"}).status_code == 400
    assert client.post("/admin/categories", json={"name": "Bad", "color": "red"}).status_code == 422
    r = client.patch(f"/admin/categories/{category_id}", json={"active": False})
    assert r.json()["active"] is False
    active = client.get("/admin/categories", params={"active_only": True}).json()
    assert category_id not in [c["id"] for c in active]
    types = [a["type"] for a in client.get("/activities", params={"category_id": category_id}).json()]
    assert types == ["category_updated", "category_created"]


def test_category_reports(client):
    client.post(
        "/reports",
        json={"title": "Graffiti", "category": "Vandalism",
              "location": {"name": "Parque Lincoln", "lat": 19.4284, "lng": -99.2007}},
    )
    vandalism = next(c for c in client.get("/admin/categories").json() if c["name"] == "Vandalism")
    reports = client.get(f"/admin/categories/{vandalism['id']}/reports").json()
    assert [r["title"] for r in reports] == ["Graffiti"]


def test_zones(client):
    r = client.post("/admin/zones", json={"name": "Sur"})
    assert r.status_code == 201
    zone_id = r.json()["id"]
    r = client.patch(f"/admin/zones/{zone_id}", json={"description": "Southern districts"})
    assert r.json()["description"] == "Southern districts"
    assert len(client.get("/admin/zones").json()) == 3
    assert client.patch("/admin/zones/zone-99", json={"name": "X"}).status_code == 404


def test_settings(client):
    map_settings = client.get("/admin/settings", params={"group": "map"}).json()
    assert {s["key"] for s in map_settings} == {"map.initialZoom", "map.center"}
    r = client.put("/admin/settings/setting-2", json={"value": "15"})
    assert r.json()["value"] == "15"
    client.put("/admin/settings/setting-2", json={"value": "15"})
    activities = client.get("/activities").json()
    assert [a["type"] for a in activities] == ["setting_updated"]
    assert client.put("/admin/settings/nope", json={"value": "1"}).status_code == 404


@pytest.mark.parametrize("email", ["not-an-email", "", "@example.com", "user@"])
def test_update_rejects_malformed_email(client, email):
    r = client.patch("/admin/users/user-3", json={"email": email})
    assert r.status_code == 422
    assert client.get("/admin/users/user-3").json()["email"] == "movil@example.com"


def test_update_normalises_email_and_rejects_duplicates(client):
    r = client.patch("/admin/users/user-3", json={"email": " Tecnico@Example.com "})
    assert r.json()["email"] == "tecnico@example.com"
    r = client.patch("/admin/users/user-3", json={"email": "ADMIN@example.com"})
    assert r.status_code == 400


def test_rename_category_to_existing_name_is_rejected(client):
    first, second = client.get("/admin/categories").json()[:2]
    r = client.patch(f"/admin/categories/{second['id']}", json={"name": first["name"].upper()})
    assert r.status_code == 400
    names = [c["name"].lower() for c in client.get("/admin/categories").json()]
    assert len(names) == len(set(names))
    r = client.patch(f"/admin/categories/{first['id']}", json={"name": first["name"]})
    assert r.status_code == 200


def test_delete_user_keeps_assigned_reports(client):
    created = client.post(
        "/reports",
        json={"title": "Bache", "category": "Road", "assigned_to": "Usuario Móvil",
              "location": {"name": "Polanco", "lat": 19.4284, "lng": -99.1907}},
    ).json()
    r = client.delete("/admin/users/user-3", headers={"X-Actor": "user-1"})
    assert r.status_code == 204
    assert client.get("/admin/users/user-3").status_code == 404
    assert client.delete("/admin/users/user-3").status_code == 404
    report = client.get(f"/reports/{created['id']}").json()
    assert report["assigned_to"] == "Usuario Móvil"
    assigned = client.get("/reports", params={"assigned_to": "Usuario Móvil"}).json()
    assert [r["id"] for r in assigned] == [created["id"]]
    activity = client.get("/activities", params={"user_id": "user-1"}).json()[0]
    assert activity["type"] == "user_deleted"
    assert activity["related_item_id"] == "user-3"


def test_deleted_ids_are_not_reused(client):
    assert client.delete("/admin/users/user-5").status_code == 204
    r = client.post("/admin/users", json={"name": "Otra Persona", "email": "otra@example.com"})
    assert r.json()["id"] == "user-6"


def test_delete_category_and_zone(client):
    assert client.delete("/admin/categories/category-1").status_code == 204
    assert client.get("/admin/categories/category-1").status_code == 404
    assert client.delete("/admin/categories/category-1").status_code == 404
    assert client.delete("/admin/zones/zone-2").status_code == 204
    assert [z["id"] for z in client.get("/admin/zones").json()] == ["zone-1"]
    assert client.delete("/admin/zones/zone-2").status_code == 404
    types = [a["type"] for a in client.get("/activities").json()]
    assert types == ["zone_deleted", "category_deleted"]


def test_concurrent_creates_keep_emails_and_names_unique(catalog):
    def create_user(i):
        try:
            return catalog.create_user(UserCreate(name=f"Persona {i}", email="misma@example.com"))
        except ValueError:
            return None

    def create_category(i):
        try:
            return catalog.create_category(CategoryCreate(name="Alumbrado" if i % 2 else "ALUMBRADO"))
        except ValueError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        users = [u for u in pool.map(create_user, range(20)) if u is not None]
        categories = [c for c in pool.map(create_category, range(20)) if c is not None]
    assert len(users) == 1
    assert len(categories) == 1
    assert [u.email for u in catalog.list_users()].count("misma@example.com") == 1
