from __future__ import annotations

import csv
import io

import pytest

ADMIN_ONLY = [
    ("GET", "/api/admins"),
    ("POST", "/api/admins"),
    ("POST", "/api/teachers"),
    ("DELETE", "/api/teachers/1"),
    ("POST", "/api/students"),
    ("PATCH", "/api/students/1"),
    ("DELETE", "/api/students/1"),
    ("POST", "/api/sessions"),
    ("PATCH", "/api/sessions/1"),
    ("DELETE", "/api/sessions/1"),
    ("POST", "/api/departments"),
    ("DELETE", "/api/attendance/1"),
]


@pytest.mark.parametrize(("method", "path"), ADMIN_ONLY)
@pytest.mark.parametrize("payload", [None, {}, {"name": "Valid", "grade": "10th"}, {"bogus": 1}])
def test_teacher_gets_403_on_admin_endpoints(client, login, world, method, path, payload):
    login(world.t1_identity)
    resp = client.open(path, method=method, json=payload)
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Admin access required"}


@pytest.mark.parametrize("path", ["/api/students", "/api/sessions", "/api/attendance", "/api/reports/teacher-work-hours"])
def test_anonymous_gets_401(client, world, path):
    resp = client.get(path)
    assert resp.status_code == 401
    assert "error" in resp.get_json()


def test_login_me_logout(client, world):
    resp = client.post(
        "/api/auth/login", json={"identifier": "sarah@school.edu", "password": "password123", "role": "teacher"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "teacher"

    me = client.get("/api/auth/me").get_json()["user"]
    assert me["id"] == world.t1.teacher_id
    assert "password_hash" not in me

    assert client.post("/api/auth/logout").get_json() == {"success": True}
    assert client.get("/api/auth/me").status_code == 401


def test_bad_credentials(client, world):
    resp = client.post(
        "/api/auth/login", json={"identifier": "sarah@school.edu", "password": "nope-nope", "role": "teacher"}
    )
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}


def test_mark_attendance_flow(client, login, world):
    login(world.t1_identity)
    body = {
        "date": "2024-01-15",
        "sessionId": world.algebra.session_id,
        "presentStudentIds": [world.s1.student_id],
        "durationHours": 99,
    }

    resp = client.post("/api/attendance", json=body)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["durationHours"] == 1.5
    assert created["teacherId"] == world.t1.teacher_id

    again = client.post("/api/attendance", json=body)
    assert again.status_code == 400
    assert again.get_json() == {"error": "Attendance already marked for this session on this date"}

    listed = client.get("/api/attendance", query_string={"sessionId": world.algebra.session_id}).get_json()
    assert [r["id"] for r in listed] == [created["id"]]


def test_mark_outside_range_is_400(client, login, world):
    login(world.t2_identity)
    resp = client.post("/api/attendance", json={"date": "2024-07-01", "sessionId": world.physics.session_id})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Cannot mark attendance outside session date range"}


def test_mark_with_actual_hhmm_times(client, login, world):
    login(world.t1_identity)
    resp = client.post(
        "/api/attendance",
        json={
            "date": "2024-01-16",
            "sessionId": world.algebra.session_id,
            "actualStartTime": "09:05",
            "actualEndTime": "10:35",
        },
    )
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["durationHours"] == 1.5
    assert data["actualStartTime"] == "2024-01-16T09:05:00"


def test_unknown_session_is_404(client, login, world):
    login(world.admin_identity)
    resp = client.post("/api/attendance", json={"date": "2024-01-15", "sessionId": 999})
    assert resp.status_code == 404


def test_session_crud_as_admin(client, login, world):
    login(world.admin_identity)
    resp = client.post(
        "/api/sessions",
        json={
            "name": "World History",
            "teacherId": world.t2.teacher_id,
            "startDate": "2024-01-01",
            "endDate": "2024-12-31",
            "startTime": "14:00",
            "endTime": "15:30",
            "studentIds": [world.s3.student_id, world.s3.student_id],
        },
    )
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["studentIds"] == [world.s3.student_id]

    patched = client.patch(f"/api/sessions/{created['id']}", json={"endTime": "16:00"}).get_json()
    assert patched["endTime"] == "16:00"

    missing = client.post("/api/sessions", json={"name": "Half"})
    assert missing.status_code == 400

    assert client.delete(f"/api/sessions/{created['id']}").get_json() == {"success": True}
    assert client.get(f"/api/sessions/{created['id']}").status_code == 404


def test_teacher_sees_only_own_sessions(client, login, world):
    login(world.t2_identity)
    names = [s["name"] for s in client.get("/api/sessions").get_json()]
    assert names == ["Physics Lab"]


def test_teacher_may_edit_own_profile_only(client, login, world):
    login(world.t1_identity)
    assert client.patch(f"/api/teachers/{world.t1.teacher_id}", json={"name": "Sarah W."}).status_code == 200
    assert client.patch(f"/api/teachers/{world.t2.teacher_id}", json={"name": "Nope"}).status_code == 403


def test_admin_cannot_delete_self_over_http(client, login, world):
    login(world.admin_identity)
    resp = client.delete(f"/api/admins/{world.admin.admin_id}")
    assert resp.status_code == 400


def test_reports(client, login, world):
    login(world.t1_identity)
    client.post(
        "/api/attendance",
        json={"date": "2024-01-02", "sessionId": world.algebra.session_id, "presentStudentIds": [world.s1.student_id]},
    )
    client.post("/api/attendance", json={"date": "2024-01-03", "sessionId": world.algebra.session_id})

    hours = client.get(
        "/api/reports/teacher-work-hours", query_string={"teacherId": world.t1.teacher_id}
    ).get_json()
    assert hours == {str(world.t1.teacher_id): 3.0}

    rows = client.get(
        "/api/reports/student-attendance", query_string={"studentId": world.s1.student_id}
    ).get_json()
    assert rows == [{"studentId": world.s1.student_id, "studentName": "Alex Johnson", "present": 1, "total": 2}]


def test_report_rejects_inverted_range(client, login, world):
    login(world.admin_identity)
    resp = client.get("/api/reports/teacher-work-hours", query_string={"startDate": "2024-02-01", "endDate": "2024-01-01"})
    assert resp.status_code == 400


def test_student_attendance_csv(client, login, world):
    login(world.admin_identity)
    resp = client.get("/api/reports/student-attendance.csv", query_string={"startDate": "2024-01-01"})

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "student_attendance_20240101_all.csv" in resp.headers["Content-Disposition"]

    text = resp.data.decode("utf-8-sig")
    rows = list(csv.DictReader(io.StringIO(text)))
    assert [r["student_name"] for r in rows] == ["Alex Johnson", "Bella Davis", "Charlie Brown"]
    assert rows[0]["rate"] == ""


def test_teacher_hours_csv(client, login, world):
    login(world.admin_identity)
    client.post("/api/attendance", json={"date": "2024-01-02", "sessionId": world.physics.session_id})

    text = client.get("/api/reports/teacher-work-hours.csv").data.decode("utf-8-sig")
    rows = list(csv.DictReader(io.StringIO(text)))
    assert [(r["teacher_name"], r["hours"]) for r in rows] == [("James Chen", "2.00"), ("Sarah Wilson", "0.00")]


def test_non_json_body_is_400(client, login, world):
    login(world.admin_identity)
    resp = client.post("/api/students", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object"}


def test_unknown_route_returns_json_error(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_mark_with_mixed_offset_timestamps(client, login, world):
    login(world.t1_identity)
    resp = client.post(
        "/api/attendance",
        json={
            "date": "2024-01-15",
            "sessionId": world.algebra.session_id,
            "actualStartTime": "2024-01-15T09:00:00+01:00",
            "actualEndTime": "2024-01-15T09:00:00Z",
        },
    )
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["durationHours"] == 1.0
    assert data["actualStartTime"] == "2024-01-15T08:00:00"
    assert data["actualEndTime"] == "2024-01-15T09:00:00"


def test_mark_with_window_spanning_months_is_400(client, login, world):
    login(world.t1_identity)
    resp = client.post(
        "/api/attendance",
        json={
            "date": "2024-01-15",
            "sessionId": world.algebra.session_id,
            "actualStartTime": "2024-01-15T09:00:00",
            "actualEndTime": "2024-03-15T09:00:00",
        },
    )
    assert resp.status_code == 400
    assert "error" in resp.get_json()
