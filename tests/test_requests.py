from conftest import cargo_payload


def _create_request(client, headers, plan_id, **overrides):
    response = client.post("/api/v1/requests/", json=cargo_payload(plan_id, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_agent_submits_request(client, make_plan, agent_mumbai, mumbai_headers):
    plan = make_plan()
    created = _create_request(client, mumbai_headers, plan.id)

    assert created["status"] == "pending"
    assert created["agent_id"] == agent_mumbai.id
    assert created["plan_id"] == plan.id
    assert len(created["status_history"]) == 1
    assert created["status_history"][0]["status"] == "pending"
    assert created["status_history"][0]["updated_by"] == agent_mumbai.id


def test_submit_request_validation_errors(client, make_plan, mumbai_headers):
    plan = make_plan()
    payload = cargo_payload(plan.id, box_count=None, size="tiny", price=0)
    response = client.post("/api/v1/requests/", json=payload, headers=mumbai_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        "Box count is required",
        "Price must be a positive number",
        "Invalid size. Must be big, small, or unsized",
    ]


def test_submit_request_unknown_plan(client, mumbai_headers):
    response = client.post("/api/v1/requests/", json=cargo_payload(4242), headers=mumbai_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Plan not found"


def test_admin_cannot_submit_request(client, make_plan, admin_headers):
    plan = make_plan()
    response = client.post("/api/v1/requests/", json=cargo_payload(plan.id), headers=admin_headers)
    assert response.status_code == 403


def test_request_listing_by_role(client, make_plan, admin_headers, mumbai_headers, chennai_headers):
    plan = make_plan(route={"from": "Chennai", "to": "Mumbai"})
    mine = _create_request(client, mumbai_headers, plan.id)
    _create_request(client, chennai_headers, plan.id, price=700)

    all_requests = client.get("/api/v1/requests/", headers=admin_headers)
    assert all_requests.status_code == 200
    assert len(all_requests.json()) == 2
    assert all(r["plan"]["vehicle_number"] == "MH01AB1234" for r in all_requests.json())

    own = client.get("/api/v1/requests/my-requests", headers=mumbai_headers).json()
    assert [r["id"] for r in own] == [mine["id"]]

    assert client.get("/api/v1/requests/", headers=mumbai_headers).status_code == 403
    assert client.get("/api/v1/requests/my-requests", headers=admin_headers).status_code == 403


def test_approval_flow_updates_vehicle_ledger(client, make_plan, admin_headers, mumbai_headers):
    plan = make_plan()
    first = _create_request(client, mumbai_headers, plan.id, price=5000)
    second = _create_request(client, mumbai_headers, plan.id, price=3000)

    response = client.patch(f"/api/v1/requests/{first['id']}/status", json={"status": "approved"}, headers=admin_headers)
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "approved"
    assert [h["status"] for h in response.json()["status_history"]] == ["pending", "approved"]

    ledger = client.get("/api/v1/requests/vehicle-amounts", headers=admin_headers).json()
    assert len(ledger) == 1
    assert ledger[0]["vehicle_number"] == "MH01AB1234"
    assert ledger[0]["total_amount"] == 5000
    assert ledger[0]["approved_requests"][0]["request_id"] == first["id"]

    # The dashboard sends PUT
    response = client.put(f"/api/v1/requests/{second['id']}/status", json={"status": "approved"}, headers=admin_headers)
    assert response.status_code == 200

    ledger = client.get("/api/v1/requests/vehicle-amounts", headers=admin_headers).json()
    assert ledger[0]["total_amount"] == 8000
    assert len(ledger[0]["approved_requests"]) == 2
    entry = ledger[0]["approved_requests"][1]
    assert entry["request"]["price"] == 3000
    assert entry["request"]["plan"]["id"] == plan.id


def test_agent_cannot_change_status(client, make_plan, admin_headers, mumbai_headers):
    plan = make_plan()
    created = _create_request(client, mumbai_headers, plan.id)

    response = client.patch(f"/api/v1/requests/{created['id']}/status", json={"status": "approved"}, headers=mumbai_headers)
    assert response.status_code == 403

    stored = client.get("/api/v1/requests/", headers=admin_headers).json()[0]
    assert stored["status"] == "pending"
    assert client.get("/api/v1/requests/vehicle-amounts", headers=admin_headers).json() == []


def test_change_status_errors(client, make_plan, admin_headers, mumbai_headers):
    plan = make_plan()
    created = _create_request(client, mumbai_headers, plan.id)

    missing = client.patch(f"/api/v1/requests/{created['id']}/status", json={}, headers=admin_headers)
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Status is required"

    invalid = client.patch(f"/api/v1/requests/{created['id']}/status", json={"status": "lost"}, headers=admin_headers)
    assert invalid.status_code == 400

    unknown = client.patch("/api/v1/requests/999/status", json={"status": "approved"}, headers=admin_headers)
    assert unknown.status_code == 404


def test_vehicle_amounts_admin_only(client, mumbai_headers):
    assert client.get("/api/v1/requests/vehicle-amounts", headers=mumbai_headers).status_code == 403


def test_pending_count(client, make_plan, admin_headers, mumbai_headers, chennai_headers):
    plan = make_plan()
    first = _create_request(client, mumbai_headers, plan.id)
    _create_request(client, mumbai_headers, plan.id)
    _create_request(client, chennai_headers, plan.id)
    client.patch(f"/api/v1/requests/{first['id']}/status", json={"status": "rejected"}, headers=admin_headers)

    assert client.get("/api/v1/requests/count/pending", headers=admin_headers).json() == {"count": 2}
    assert client.get("/api/v1/requests/count/pending", headers=mumbai_headers).json() == {"count": 1}


def test_submit_request_mixed_type_and_range_errors(client, make_plan, mumbai_headers):
    plan = make_plan()
    payload = cargo_payload(plan.id, box_count="ten", weight=-1, price=0)
    response = client.post("/api/v1/requests/", json=payload, headers=mumbai_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == [
        "Box count must be a positive number",
        "Weight must be a positive number",
        "Price must be a positive number",
    ]


def test_submit_request_accepts_numeric_strings(client, make_plan, mumbai_headers):
    plan = make_plan()
    created = _create_request(client, mumbai_headers, str(plan.id), box_count="12", weight="250.5", price="4000")

    assert created["plan_id"] == plan.id
    assert created["box_count"] == 12
    assert created["weight"] == 250.5
    assert created["price"] == 4000


def test_submit_request_uncoercible_nested_field_is_a_400(client, make_plan, mumbai_headers):
    plan = make_plan()
    payload = cargo_payload(plan.id, dimensions={"length": "long"})
    response = client.post("/api/v1/requests/", json=payload, headers=mumbai_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed."
    assert body["errors"][0].startswith("dimensions.length:")
