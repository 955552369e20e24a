def test_health_reports_database_state(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "healthy"}


def test_health_is_503_when_database_is_down(client, container):
    container.conn.healthy = False

    resp = client.get("/health")

    assert resp.status_code == 503
    assert resp.get_json() == {"status": "unhealthy"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Route not found"}


def test_settings_are_admin_only_and_validated(client, auth_headers, admin, employee):
    assert client.get("/api/settings", headers=auth_headers(employee)).status_code == 403

    headers = auth_headers(admin)
    ok = client.put("/api/settings/location_radius_meters", headers=headers, json={"value": "250"})
    assert ok.status_code == 200
    assert ok.get_json()["settings"]["location_radius_meters"] == "250"

    bad = client.put("/api/settings", headers=headers, json={"settings": {"work_start_time": "9am"}})
    assert bad.status_code == 400

    listed = client.get("/api/settings", headers=headers).get_json()["settings"]
    assert listed == {"location_radius_meters": "250"}


def test_leave_flow_notifies_both_sides(client, auth_headers, admin, employee):
    emp, boss = auth_headers(employee), auth_headers(admin)

    created = client.post(
        "/api/leave",
        headers=emp,
        json={"type": "annual", "startDate": "2026-04-06", "endDate": "2026-04-08", "reason": "Trip"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["request"]["id"]
    assert client.get("/api/notifications/unread-count", headers=boss).get_json() == {"count": 1}

    own = client.get("/api/leave", headers=emp).get_json()["requests"]
    assert [r["id"] for r in own] == [request_id]

    forbidden = client.put(f"/api/leave/{request_id}/approve", headers=emp)
    assert forbidden.status_code == 403

    approved = client.put(f"/api/leave/{request_id}/approve", headers=boss)
    assert approved.status_code == 200
    assert approved.get_json()["request"]["status"] == "approved"

    assert client.put(f"/api/leave/{request_id}/cancel", headers=emp).status_code == 400

    notes = client.get("/api/notifications?unreadOnly=true", headers=emp).get_json()["notifications"]
    assert [n["title"] for n in notes] == ["Leave Request Approved"]

    read_all = client.put("/api/notifications/read-all", headers=emp)
    assert read_all.get_json()["updated"] == 1
    assert client.get("/api/notifications/unread-count", headers=emp).get_json() == {"count": 0}


def test_leave_rejects_unknown_type(client, auth_headers, employee):
    resp = client.post(
        "/api/leave",
        headers=auth_headers(employee),
        json={"type": "vacation", "startDate": "2026-04-06", "endDate": "2026-04-08"},
    )

    assert resp.status_code == 400


def test_chat_requires_message_or_action(client, auth_headers, employee):
    resp = client.post("/api/ai/chat", headers=auth_headers(employee), json={})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Message or action is required"


def test_chat_replies_with_success_envelope(client, auth_headers, employee):
    resp = client.post("/api/ai/chat", headers=auth_headers(employee), json={"message": "hello"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert "Eve" in body["message"]


def test_sentiment_endpoint(client, auth_headers, employee):
    resp = client.post("/api/ai/sentiment", headers=auth_headers(employee), json={"text": "Great job, thank you"})

    assert resp.get_json() == {"success": True, "sentiment": "positive", "confidence": 1.0}


def test_dashboard_stats_are_admin_only(client, auth_headers, employee):
    resp = client.get("/api/ai/dashboard-stats", headers=auth_headers(employee))

    assert resp.status_code == 403
