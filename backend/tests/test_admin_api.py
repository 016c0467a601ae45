"""
API tests for /api/admin/users: role gating, CRUD, conflicts, superadmin grants.
"""
import uuid


def _new_user_body(**overrides):
    body = {
        "username": "newfac",
        "email": "newfac@example.com",
        "password": "secret123",
        "firstName": "New",
        "lastName": "Faculty",
        "role": "faculty",
    }
    body.update(overrides)
    return body


def test_delete_as_student_is_403(client, make_user, headers):
    student = make_user("student")
    victim = make_user("faculty")
    r = client.delete(f"/api/admin/users/{victim.id}", headers=headers(student))
    assert r.status_code == 403
    assert "Access denied" in r.json()["message"]


def test_delete_unknown_as_admin_is_404(client, make_user, headers):
    admin = make_user("admin")
    r = client.delete(f"/api/admin/users/{uuid.uuid4()}", headers=headers(admin))
    assert r.status_code == 404


def test_password_reset_then_login(client, make_user, headers):
    admin = make_user("admin")
    target = make_user("faculty", username="resetme", password="oldpass123")
    r = client.put(f"/api/admin/users/{target.id}", json={"password": "newpass123"}, headers=headers(admin))
    assert r.status_code == 200
    assert "password" not in r.json()["user"]

    ok = client.post("/api/auth/login", json={"username": "resetme", "password": "newpass123"})
    assert ok.status_code == 200
    old = client.post("/api/auth/login", json={"username": "resetme", "password": "oldpass123"})
    assert old.status_code == 400


def test_create_list_get(client, make_user, headers):
    admin = make_user("admin")
    r = client.post("/api/admin/users", json=_new_user_body(), headers=headers(admin))
    assert r.status_code == 201
    created = r.json()["user"]
    assert created["role"] == "faculty"

    r = client.get("/api/admin/users", headers=headers(admin))
    assert r.status_code == 200
    users = r.json()
    assert {u["username"] for u in users} >= {"newfac", admin.username}
    assert all("password" not in u and "passwordHash" not in u for u in users)

    r = client.get("/api/admin/users", params={"role": "faculty"}, headers=headers(admin))
    assert [u["username"] for u in r.json()] == ["newfac"]

    r = client.get(f"/api/admin/users/{created['id']}", headers=headers(admin))
    assert r.status_code == 200
    assert r.json()["email"] == "newfac@example.com"


def test_duplicate_username_is_409(client, make_user, headers):
    admin = make_user("admin")
    assert client.post("/api/admin/users", json=_new_user_body(), headers=headers(admin)).status_code == 201
    r = client.post("/api/admin/users", json=_new_user_body(email="other@example.com"), headers=headers(admin))
    assert r.status_code == 409
    assert r.json()["message"] == "Username already exists"


def test_duplicate_email_is_409(client, make_user, headers):
    admin = make_user("admin")
    client.post("/api/admin/users", json=_new_user_body(), headers=headers(admin))
    r = client.post("/api/admin/users", json=_new_user_body(username="another"), headers=headers(admin))
    assert r.status_code == 409


def test_validation_lists_every_field(client, make_user, headers):
    admin = make_user("admin")
    r = client.post(
        "/api/admin/users",
        json=_new_user_body(username="ab", email="not-an-email", password="123", role="janitor"),
        headers=headers(admin),
    )
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"username", "email", "password", "role"} <= fields


def test_admin_cannot_create_superadmin_but_superadmin_can(client, make_user, headers):
    admin = make_user("admin")
    root = make_user("superadmin")
    r = client.post("/api/admin/users", json=_new_user_body(role="superadmin"), headers=headers(admin))
    assert r.status_code == 403
    r = client.post("/api/admin/users", json=_new_user_body(role="superadmin"), headers=headers(root))
    assert r.status_code == 201


def test_faculty_and_trainer_cannot_list(client, make_user, headers):
    for role in ("faculty", "trainer", "student"):
        user = make_user(role)
        assert client.get("/api/admin/users", headers=headers(user)).status_code == 403


def test_delete_user_then_token_is_rejected(client, make_user, headers):
    admin = make_user("admin")
    target = make_user("trainer")
    target_headers = headers(target)
    r = client.delete(f"/api/admin/users/{target.id}", headers=headers(admin))
    assert r.status_code == 200
    assert client.get("/api/auth/me", headers=target_headers).status_code == 401


def test_delete_faculty_with_students_is_409(client, make_user, make_student, headers):
    admin = make_user("admin")
    faculty = make_user("faculty")
    make_student(faculty)
    r = client.delete(f"/api/admin/users/{faculty.id}", headers=headers(admin))
    assert r.status_code == 409


def test_admin_cannot_take_over_superadmin(client, make_user, headers):
    admin = make_user("admin")
    root = make_user("superadmin", username="root")
    r = client.put(f"/api/admin/users/{root.id}", json={"password": "pwned123"}, headers=headers(admin))
    assert r.status_code == 403
    assert client.post("/api/auth/login", json={"username": "root", "password": "pwned123"}).status_code == 400
    r = client.put(f"/api/admin/users/{root.id}", json={"role": "admin"}, headers=headers(admin))
    assert r.status_code == 403
    assert client.delete(f"/api/admin/users/{root.id}", headers=headers(admin)).status_code == 403

    other_root = make_user("superadmin")
    r = client.put(f"/api/admin/users/{root.id}", json={"password": "rotated123"}, headers=headers(other_root))
    assert r.status_code == 200
    assert client.post("/api/auth/login", json={"username": "root", "password": "rotated123"}).status_code == 200


def test_demoting_faculty_with_students_is_400(client, make_user, make_student, headers):
    admin = make_user("admin")
    faculty = make_user("faculty")
    student = make_student(faculty)
    r = client.put(f"/api/admin/users/{faculty.id}", json={"role": "student"}, headers=headers(admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "role"
    r = client.put(f"/api/students/{student.id}", json={"semester": 8}, headers=headers(faculty))
    assert r.status_code == 200


def test_password_limit_counts_bytes(client, make_user, headers):
    admin = make_user("admin")
    r = client.post("/api/admin/users", json=_new_user_body(password="é" * 37), headers=headers(admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "password"

    r = client.post("/api/admin/users", json=_new_user_body(password="a" * 71 + "X"), headers=headers(admin))
    assert r.status_code == 201
    ok = client.post("/api/auth/login", json={"username": "newfac", "password": "a" * 71 + "X"})
    assert ok.status_code == 200
    near = client.post("/api/auth/login", json={"username": "newfac", "password": "a" * 71 + "Y"})
    assert near.status_code == 400
