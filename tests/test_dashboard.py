from conftest import cargo_payload


def test_kpis(client, make_plan, admin_headers, mumbai_headers):
    plan = make_plan()
    make_plan(vehicle_number="DL02CD5678", status="completed")
    ids = []
    for price in (5000, 3000, 1000):
        response = client.post("/api/v1/requests/", json=cargo_payload(plan.id, price=price), headers=mumbai_headers)
        ids.append(response.json()["id"])
    client.patch(f"/api/v1/requests/{ids[0]}/status", json={"status": "approved"}, headers=admin_headers)
    client.patch(f"/api/v1/requests/{ids[1]}/status", json={"status": "rejected"}, headers=admin_headers)

    response = client.get("/api/v1/dashboard-data/kpis", headers=admin_headers)
    assert response.status_code == 200

    kpis = response.json()
    assert kpis["total_plans"] == 2
    assert kpis["active_plans"] == 1
    assert kpis["total_requests"] == 3
    assert kpis["requests_by_status"]["pending"] == 1
    assert kpis["requests_by_status"]["approved"] == 1
    assert kpis["requests_by_status"]["rejected"] == 1
    assert kpis["requests_by_status"]["delivered"] == 0
    assert kpis["total_revenue"] == 5000
    assert kpis["vehicles_with_revenue"] == 1


def test_kpis_admin_only(client, mumbai_headers):
    assert client.get("/api/v1/dashboard-data/kpis", headers=mumbai_headers).status_code == 403
