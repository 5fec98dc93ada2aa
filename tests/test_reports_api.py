"""Reports API tests."""

REPORT = {
    "title": "Pothole on Main Street",
    "description": "Deep hole near the crossing",
    "category": "Road",
    "priority": "high",
    "location": {"name": "Calle 16 de Septiembre", "lat": 19.4328, "lng": -99.1386},
    "tags": ["Urgent", "urgent"],
}


def _create(client, **overrides):
    body = {**REPORT, **overrides}
    r = client.post("/reports", json=body)
    assert r.status_code == 201
    return r.json()


def test_create_and_get(client):
    created = _create(client)
    assert created["status"] == "open"
    assert created["tags"] == ["urgent"]
    r = client.get(f"/reports/{created['id']}")
    assert r.status_code == 200
    assert r.json()["title"] == REPORT["title"]


def test_missing_location_is_rejected(client):
    body = {k: v for k, v in REPORT.items() if k != "location"}
    r = client.post("/reports", json=body)
    assert r.status_code == 422
    assert client.get("/reports").json() == []


def test_list_filters(client):
    _create(client, category="Road", assigned_to="Ana Mendoza")
    _create(client, category="Vandalism", status="resolved")
    assert len(client.get("/reports").json()) == 2
    assert [r["category"] for r in client.get("/reports", params={"category": "Vandalism"}).json()] == ["Vandalism"]
    assert len(client.get("/reports", params={"status": "resolved"}).json()) == 1
    assert len(client.get("/reports", params={"assigned_to": "Ana Mendoza"}).json()) == 1


def test_patch_logs_changes_once(client):
    created = _create(client)
    r = client.patch(f"/reports/{created['id']}", json={"status": "resolved"})
    assert r.status_code == 200
    assert r.json()["status"] == "resolved"
    client.patch(f"/reports/{created['id']}", json={"status": "resolved"})
    activities = client.get(f"/reports/{created['id']}/activities").json()
    assert [a["type"] for a in activities] == ["report_resolved", "report_created"]
    assert activities[0]["time"] == "Just now"


def test_patch_can_unassign(client):
    created = _create(client, assigned_to="Ana Mendoza")
    r = client.patch(f"/reports/{created['id']}", json={"assigned_to": None})
    assert r.json()["assigned_to"] is None


def test_unknown_report_is_404(client):
    assert client.get("/reports/999").status_code == 404
    assert client.patch("/reports/999", json={"status": "resolved"}).status_code == 404
    assert client.delete("/reports/999").status_code == 404


def test_delete(client):
    created = _create(client)
    assert client.delete(f"/reports/{created['id']}").status_code == 204
    assert client.get(f"/reports/{created['id']}").status_code == 404


def test_nearby(client):
    near = _create(client, location={"name": "Zócalo", "lat": 19.4326, "lng": -99.1332})
    _create(client, location={"name": "Seattle, WA", "lat": 47.6062, "lng": -122.3321})
    r = client.get("/reports/nearby", params={"lat": 19.43, "lng": -99.13, "radius_km": 10})
    assert r.status_code == 200
    body = r.json()
    assert [item["report"]["id"] for item in body] == [near["id"]]
    assert body[0]["distance_km"] < 1


def test_import_mock_records(client):
    records = [
        {"id": 1, "title": "Broken Street Light", "category": "Infrastructure", "status": "In Progress",
         "priority": "Medium", "location": "Av. Reforma 123", "assignedTo": "Unassigned",
         "createdAt": "2024-03-03T08:00:00Z"},
        {"title": "Graffiti", "category": "Vandalism", "status": "Open", "location": "19.43, -99.14 (Bellas Artes)"},
    ]
    r = client.post("/reports/import", params={"vocabulary": "mock"}, json=records)
    assert r.status_code == 201
    imported = r.json()
    assert [i["status"] for i in imported] == ["in_progress", "open"]
    assert imported[0]["assigned_to"] is None
    assert imported[0]["location"]["lat"] == 19.4326
    assert imported[1]["location"]["name"] == "Bellas Artes"
    assert len(client.get("/reports").json()) == 2


def test_import_unknown_status_is_rejected(client):
    records = [{"title": "X", "category": "Road", "status": "done", "location": "Polanco"}]
    r = client.post("/reports/import", params={"vocabulary": "geo"}, json=records)
    assert r.status_code == 400
    assert client.get("/reports").json() == []


def test_import_unknown_vocabulary(client):
    r = client.post("/reports/import", params={"vocabulary": "legacy"}, json=[])
    assert r.status_code == 400
