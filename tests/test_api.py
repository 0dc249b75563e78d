"""End-to-end tests through the HTTP API."""

import time
from datetime import timedelta

from app.utils.clock import utcnow

API = "/api/v1"


def register_user(client, username="student", role="student_staff"):
    resp = client.post(f"{API}/users", json={
        "username": username, "password": "password", "role": role,
        "fullName": f"{username.title()} User", "email": f"{username}@campus.edu",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


def register_vehicle(client, owner_id, plate="ABC-123"):
    resp = client.post(f"{API}/vehicles", json={
        "userId": owner_id, "licensePlate": plate, "make": "Toyota", "model": "Corolla", "color": "Silver",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()


def create_gate(client, name="Main Gate", status="online"):
    resp = client.post(f"{API}/gates", json={"name": name, "location": "North Entrance", "status": status})
    assert resp.status_code == 200, resp.text
    return resp.json()


def gate_by_id(client, gate_id):
    return next(g for g in client.get(f"{API}/gates").json() if g["id"] == gate_id)


class TestScanScenarios:
    def test_registered_vehicle_qr_opens_main_gate(self, client):
        gate = create_gate(client, "Main Gate")
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"], "ABC-123")

        resp = client.post(f"{API}/access/scan", json={"code": vehicle["qrCode"]})

        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "vehicle"
        assert body["authorized"] is True
        assert body["licensePlate"] == "ABC-123"
        assert body["gate"]["name"] == "Main Gate"
        assert gate_by_id(client, gate["id"])["isOpen"] is True

        logs = client.get(f"{API}/access-logs").json()
        assert len(logs) == 1
        assert logs[0]["action"] == "entry"
        assert logs[0]["status"] == "authorized"
        assert logs[0]["authMethod"] == "qr_code"
        assert logs[0]["vehicle"]["licensePlate"] == "ABC-123"
        assert logs[0]["gate"]["name"] == "Main Gate"

    def test_unknown_code_is_404_and_leaves_no_trace(self, client):
        gate = create_gate(client)
        before = gate_by_id(client, gate["id"])

        resp = client.post(f"{API}/access/scan", json={"code": "XYZ-000"})

        assert resp.status_code == 404
        assert resp.json() == {"error": "Invalid code"}
        assert client.get(f"{API}/access-logs").json() == []
        assert gate_by_id(client, gate["id"]) == before

    def test_expired_visitor_pass_is_403(self, client):
        create_gate(client)
        now = utcnow()
        visitor = client.post(f"{API}/visitors/register", json={
            "fullName": "Grace Guest", "email": "grace@example.com", "phoneNumber": "+2340000000000",
            "purpose": "Interview", "hostName": "Dr. Host", "hostContact": "host@campus.edu",
            "validFrom": (now - timedelta(hours=3)).isoformat(),
            "validUntil": (now - timedelta(hours=1)).isoformat(),
        }).json()

        resp = client.post(f"{API}/access/scan", json={"code": visitor["qrCode"]})

        assert resp.status_code == 403
        body = resp.json()
        assert body["type"] == "visitor"
        assert body["authorized"] is False
        assert "expired" in body["error"].lower()
        assert body["message"] == body["error"]
        assert body["reason"] == "visitor pass expired"
        [log] = client.get(f"{API}/access-logs").json()
        assert log["status"] == "denied"
        assert log["id"] == body["logId"]

    def test_gate_closes_after_auto_close_delay(self, client):
        gate = create_gate(client)
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"])

        client.post(f"{API}/access/scan", json={"code": vehicle["rfidTag"]})
        assert gate_by_id(client, gate["id"])["isOpen"] is True

        time.sleep(0.5)
        assert gate_by_id(client, gate["id"])["isOpen"] is False

    def test_missing_code_is_400(self, client):
        resp = client.post(f"{API}/access/scan", json={})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request data"


class TestOverrideEndpoint:
    def test_override_open_and_log(self, client):
        gate = create_gate(client)
        officer = register_user(client, "security", "security_officer")

        resp = client.post(f"{API}/gates/override", json={
            "gateId": gate["id"], "action": "open", "reason": "Fire truck", "userId": officer["id"],
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["gate"]["isOpen"] is True
        assert body["log"]["status"] == "manual_override"
        assert body["log"]["processedBy"] == officer["id"]

        [log] = client.get(f"{API}/access-logs").json()
        assert log["processedByUser"]["username"] == "security"

    def test_override_unknown_gate_is_404(self, client):
        resp = client.post(f"{API}/gates/override", json={
            "gateId": "nope", "action": "open", "reason": "Test", "userId": "u1",
        })
        assert resp.status_code == 404
        assert resp.json() == {"error": "Gate not found"}

    def test_override_by_unknown_officer_is_404(self, client):
        gate = create_gate(client)
        resp = client.post(f"{API}/gates/override", json={
            "gateId": gate["id"], "action": "open", "reason": "Delivery", "userId": "nobody",
        })
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}
        assert gate_by_id(client, gate["id"])["isOpen"] is False
        assert client.get(f"{API}/access-logs").json() == []

    def test_override_without_reason_is_400(self, client):
        gate = create_gate(client)
        resp = client.post(f"{API}/gates/override", json={
            "gateId": gate["id"], "action": "open", "reason": "  ", "userId": "u1",
        })
        assert resp.status_code == 400
        assert gate_by_id(client, gate["id"])["isOpen"] is False

    def test_taking_open_gate_offline_closes_it(self, client):
        gate = create_gate(client)
        officer = register_user(client, "security", "security_officer")
        opened = client.post(f"{API}/gates/override", json={
            "gateId": gate["id"], "action": "open", "reason": "Delivery", "userId": officer["id"],
        })
        assert opened.json()["gate"]["isOpen"] is True

        resp = client.patch(f"{API}/gates/{gate['id']}", json={"status": "maintenance"})

        assert resp.status_code == 200
        assert resp.json()["status"] == "maintenance"
        assert resp.json()["isOpen"] is False


class TestRegistration:
    def test_vehicle_validation_error_is_400(self, client):
        owner = register_user(client)
        resp = client.post(f"{API}/vehicles", json={"userId": owner["id"], "licensePlate": "ABC-123"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_duplicate_plate_is_409(self, client):
        owner = register_user(client)
        register_vehicle(client, owner["id"], "ABC-123")
        resp = client.post(f"{API}/vehicles", json={
            "userId": owner["id"], "licensePlate": "abc-123", "make": "Kia", "model": "Rio", "color": "Red",
        })
        assert resp.status_code == 409

    def test_patch_cannot_null_required_fields(self, client):
        gate = create_gate(client)
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"])

        for path, body in [
            (f"gates/{gate['id']}", {"name": None}),
            (f"vehicles/{vehicle['id']}", {"isActive": None}),
            (f"users/{owner['id']}", {"fullName": None}),
        ]:
            resp = client.patch(f"{API}/{path}", json=body)
            assert resp.status_code == 400, path
            assert resp.json()["error"] == "Invalid request data"

        assert gate_by_id(client, gate["id"])["name"] == "Main Gate"

    def test_patch_blank_plate_is_400(self, client):
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"], "ABC-123")

        resp = client.patch(f"{API}/vehicles/{vehicle['id']}", json={"licensePlate": "   "})

        assert resp.status_code == 400
        [stored] = client.get(f"{API}/vehicles").json()
        assert stored["licensePlate"] == "ABC-123"

    def test_patch_plate_is_normalised(self, client):
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"], "ABC-123")
        resp = client.patch(f"{API}/vehicles/{vehicle['id']}", json={"licensePlate": " xyz-9 "})
        assert resp.json()["licensePlate"] == "XYZ-9"

    def test_vehicle_for_unknown_owner_is_404(self, client):
        resp = client.post(f"{API}/vehicles", json={
            "userId": "ghost", "licensePlate": "GHO-001", "make": "Kia", "model": "Rio", "color": "Red",
        })
        assert resp.status_code == 404

    def test_visitor_window_must_be_ordered(self, client):
        now = utcnow()
        resp = client.post(f"{API}/visitors/register", json={
            "fullName": "Grace Guest", "email": "grace@example.com", "phoneNumber": "+234",
            "purpose": "Interview", "hostName": "Dr. Host", "hostContact": "host@campus.edu",
            "validFrom": now.isoformat(), "validUntil": (now - timedelta(minutes=1)).isoformat(),
        })
        assert resp.status_code == 400

    def test_my_vehicles_requires_user_id(self, client):
        resp = client.get(f"{API}/my-vehicles")
        assert resp.status_code == 400
        assert resp.json() == {"error": "User ID required"}

    def test_login_creates_then_returns_same_user(self, client):
        first = client.post(f"{API}/auth/login", json={"username": "security", "password": "anything"}).json()
        second = client.post(f"{API}/auth/login", json={"username": "security", "password": "other"}).json()
        assert first["role"] == "security_officer"
        assert first["id"] == second["id"]
        assert "password" not in first


class TestStats:
    def test_counters_follow_the_log(self, client):
        create_gate(client)
        owner = register_user(client)
        good = register_vehicle(client, owner["id"], "GOOD-1")
        bad = register_vehicle(client, owner["id"], "BAD-2")
        client.patch(f"{API}/vehicles/{bad['id']}", json={"isActive": False})

        client.post(f"{API}/access/scan", json={"code": good["qrCode"]})
        client.post(f"{API}/access/scan", json={"code": bad["qrCode"]})

        stats = client.get(f"{API}/stats").json()
        assert stats["totalVehicles"] == 2
        assert stats["activeVehicles"] == 1
        assert stats["todayAccess"] == 1
        assert stats["todayDenied"] == 1

        mine = client.get(f"{API}/my-stats", params={"userId": owner["id"]}).json()
        assert mine["totalAccess"] == 1
        assert mine["deniedAccess"] == 1
        assert mine["lastAccess"] is not None

        recent = client.get(f"{API}/access-logs/recent", params={"limit": 1}).json()
        assert len(recent) == 1

    def test_report_aggregates_real_traffic(self, client):
        gate = create_gate(client, "Hostel Gate")
        owner = register_user(client)
        vehicle = register_vehicle(client, owner["id"])
        client.post(f"{API}/access/scan", json={"code": vehicle["qrCode"]})

        report = client.get(f"{API}/reports", params={"period": "day"}).json()

        assert report["period"] == "day"
        assert len(report["hourlyTraffic"]) == 24
        assert sum(h["entries"] for h in report["hourlyTraffic"]) == 1
        assert report["dailyTraffic"][-1]["total"] == 1
        assert report["gateUsage"] == [{"gate": "Hostel Gate", "count": 1}]
        by_status = {s["status"]: s["count"] for s in report["statusDistribution"]}
        assert by_status == {"authorized": 1, "denied": 0, "manual_override": 0}


class TestHealth:
    def test_reports_database_and_gates(self, client):
        create_gate(client)
        create_gate(client, "Back Gate", status="maintenance")
        body = client.get(f"{API}/health").json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert body["gatesOnline"] == 1
        assert body["pendingAutoClose"] == 0
