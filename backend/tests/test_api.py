from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_routes_require_login(client):
    assert client.get("/students/").status_code == 401
    assert client.get("/communications/", headers={"Authorization": "Bearer wrong"}).status_code == 401


def test_login_failure(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "bad"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "invalid credentials"


def test_me_and_logout(client, auth_headers):
    me = client.get("/auth/me", headers=auth_headers)
    assert me.status_code == 200
    assert me.json()["email"] == ADMIN_EMAIL

    assert client.post("/auth/verify").json() == {"valid": True}
    client.post("/auth/logout")
    assert client.get("/auth/me", headers=auth_headers).status_code == 401
    assert client.post("/auth/verify").json() == {"valid": False}


def test_list_students_envelope(client, auth_headers):
    resp = client.get("/students/", params={"page_size": 5, "sort_by": "gpa", "sort_order": "desc"},
                      headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()

    assert set(body) == {"data", "total", "page", "page_size", "total_pages"}
    assert body["total"] == 20
    assert body["total_pages"] == 4
    assert len(body["data"]) == 5
    gpas = [s["gpa"] for s in body["data"]]
    assert gpas == sorted(gpas, reverse=True)


def test_list_students_ignores_bad_filters(client, auth_headers):
    resp = client.get("/students/", params={"status": "Graduated", "sort_by": "height"},
                      headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["total"] == 20


def test_list_falls_back_on_non_numeric_paging(client, auth_headers):
    resp = client.get("/students/", params={"page": "abc", "page_size": "x"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["page"] == 1
    assert body["page_size"] == 25

    resp = client.get("/communications/", params={"page": "2.5", "page_size": "0"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["page"] == 1
    assert resp.json()["page_size"] == 25


def test_student_crud(client, auth_headers):
    payload = {
        "name": "Priya Patel",
        "email": "priya.patel@example.com",
        "phone": "+1-555-222-3333",
        "country": "India",
        "grade": "Senior",
        "gpa": 3.95,
        "sat_english": 760,
        "sat_math": 790,
        "field_of_study": "Physics",
        "tuition_budget": 60000,
    }
    created = client.post("/students/", json=payload, headers=auth_headers)
    assert created.status_code == 201
    student_id = created.json()["id"]

    updated = client.put(f"/students/{student_id}", json={"application_status": "Applying"},
                         headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["application_status"] == "Applying"
    assert updated.json()["country"] == "India"

    assert client.get(f"/students/{student_id}", headers=auth_headers).status_code == 200
    deleted = client.delete(f"/students/{student_id}", headers=auth_headers)
    assert deleted.json()["success"] is True
    assert client.get(f"/students/{student_id}", headers=auth_headers).status_code == 404


def test_student_validation_errors(client, auth_headers):
    resp = client.post("/students/", json={"name": "X"}, headers=auth_headers)
    assert resp.status_code == 422

    student_id = client.get("/students/", headers=auth_headers).json()["data"][0]["id"]
    resp = client.put(f"/students/{student_id}", json={"gpa": 7}, headers=auth_headers)
    assert resp.status_code == 422


def test_update_missing_student_is_404(client, auth_headers):
    resp = client.put("/students/missing", json={"gpa": 3.1}, headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Student not found: missing"


def test_student_stats(client, auth_headers):
    body = client.get("/students/stats/summary", headers=auth_headers).json()
    assert body["total"] == 20
    assert set(body) == {"total", "active", "new_this_week", "status_breakdown"}


def test_communications_listing_and_stats(client, auth_headers):
    listing = client.get("/communications/", params={"page_size": 10}, headers=auth_headers).json()
    timestamps = [c["timestamp"] for c in listing["data"]]
    assert timestamps == sorted(timestamps, reverse=True)
    assert all("student_name" in c for c in listing["data"])

    stats = client.get("/communications/stats/summary", headers=auth_headers).json()
    assert stats["total"] == listing["total"]
    assert set(stats["by_type"]) == {"email", "sms", "call", "meeting"}
    assert len(stats["recent_activity"]) <= 10

    staff = client.get("/communications/staff-members", headers=auth_headers).json()["staff_members"]
    assert staff == sorted(staff)


def test_create_communication_for_missing_student(client, auth_headers):
    resp = client.post("/communications/", json={
        "student_id": "missing",
        "type": "email",
        "direction": "outbound",
        "content": "Welcome email sent with getting started guide",
        "staff_member": "Mike Chen",
    }, headers=auth_headers)
    assert resp.status_code == 404


def test_notes_and_activities_routes(client, auth_headers):
    student_id = client.get("/students/", headers=auth_headers).json()["data"][0]["id"]

    note = client.post(f"/students/{student_id}/notes/",
                       json={"content": "Prefers email", "author": "Mike Chen"},
                       headers=auth_headers)
    assert note.status_code == 201
    notes = client.get(f"/students/{student_id}/notes/", headers=auth_headers).json()
    assert notes[0]["id"] == note.json()["id"]

    activities = client.get(f"/students/{student_id}/activities/", params={"limit": 3},
                            headers=auth_headers)
    assert activities.status_code == 200
    assert len(activities.json()) == 3

    assert client.get("/students/missing/notes/", headers=auth_headers).status_code == 404


def test_login_returns_admin_session(client):
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    body = resp.json()
    assert body["user"]["role"] == "admin"
    assert body["token"] != body["refresh_token"]
