"""
API tests for /api/students: scope-filtered listing, faculty self-assignment, reassignment rules.
"""


def _body(**overrides):
    body = {
        "rollNumber": "CS100",
        "firstName": "Meera",
        "lastName": "Nair",
        "email": "meera@students.example.com",
        "department": "CSE",
        "semester": 5,
        "academicYear": "2024-25",
    }
    body.update(overrides)
    return body


def test_faculty_create_is_self_assigned(client, make_user, headers):
    faculty = make_user("faculty")
    other = make_user("faculty")
    r = client.post("/api/students", json=_body(assignedFacultyId=str(other.id)), headers=headers(faculty))
    assert r.status_code == 201
    assert r.json()["assignedFacultyId"] == str(faculty.id)


def test_admin_must_name_faculty(client, make_user, headers):
    admin = make_user("admin")
    faculty = make_user("faculty")
    r = client.post("/api/students", json=_body(), headers=headers(admin))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "assignedFacultyId"

    r = client.post("/api/students", json=_body(assignedFacultyId=str(admin.id)), headers=headers(admin))
    assert r.status_code == 400

    r = client.post("/api/students", json=_body(assignedFacultyId=str(faculty.id)), headers=headers(admin))
    assert r.status_code == 201


def test_student_and_trainer_cannot_create(client, make_user, headers):
    for role in ("student", "trainer"):
        user = make_user(role)
        assert client.post("/api/students", json=_body(), headers=headers(user)).status_code == 403


def test_semester_out_of_range_is_400(client, make_user, headers):
    faculty = make_user("faculty")
    r = client.post("/api/students", json=_body(semester=9), headers=headers(faculty))
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "semester"


def test_duplicate_roll_number_is_409(client, make_user, headers):
    faculty = make_user("faculty")
    assert client.post("/api/students", json=_body(), headers=headers(faculty)).status_code == 201
    r = client.post("/api/students", json=_body(email="other@students.example.com"), headers=headers(faculty))
    assert r.status_code == 409
    assert r.json()["message"] == "Roll number already exists"


def test_listing_is_scoped(client, make_user, make_student, headers):
    f1, f2 = make_user("faculty"), make_user("faculty")
    admin = make_user("admin")
    login = make_user("student")
    mine = make_student(f1, "CS001", user=login)
    make_student(f2, "CS002")

    assert [s["rollNumber"] for s in client.get("/api/students", headers=headers(f1)).json()] == ["CS001"]
    assert [s["rollNumber"] for s in client.get("/api/students", headers=headers(f2)).json()] == ["CS002"]
    assert len(client.get("/api/students", headers=headers(admin)).json()) == 2
    own = client.get("/api/students", headers=headers(login)).json()
    assert [s["id"] for s in own] == [str(mine.id)]


def test_get_other_faculty_student_is_403(client, make_user, make_student, headers):
    f1, f2 = make_user("faculty"), make_user("faculty")
    student = make_student(f1)
    assert client.get(f"/api/students/{student.id}", headers=headers(f1)).status_code == 200
    assert client.get(f"/api/students/{student.id}", headers=headers(f2)).status_code == 403


def test_faculty_cannot_reassign(client, make_user, make_student, headers):
    f1, f2 = make_user("faculty"), make_user("faculty")
    admin = make_user("admin")
    student = make_student(f1)
    r = client.put(f"/api/students/{student.id}", json={"assignedFacultyId": str(f2.id)}, headers=headers(f1))
    assert r.status_code == 403
    r = client.put(f"/api/students/{student.id}", json={"semester": 6}, headers=headers(f1))
    assert r.status_code == 200
    assert r.json()["semester"] == 6
    r = client.put(f"/api/students/{student.id}", json={"assignedFacultyId": str(f2.id)}, headers=headers(admin))
    assert r.status_code == 200
    assert r.json()["assignedFacultyId"] == str(f2.id)


def test_delete_is_admin_only(client, make_user, make_student, headers):
    faculty = make_user("faculty")
    admin = make_user("admin")
    student = make_student(faculty)
    assert client.delete(f"/api/students/{student.id}", headers=headers(faculty)).status_code == 403
    assert client.delete(f"/api/students/{student.id}", headers=headers(admin)).status_code == 200
    assert client.get(f"/api/students/{student.id}", headers=headers(admin)).status_code == 404


def test_scope_follows_current_role(client, db, make_user, make_student, headers):
    faculty = make_user("faculty")
    student = make_student(faculty)
    # role changed outside the API; the old assignment must not grant anything
    faculty.role = "trainer"
    db.commit()
    assert client.get("/api/students", headers=headers(faculty)).json() == []
    assert client.get(f"/api/students/{student.id}", headers=headers(faculty)).status_code == 403
    r = client.put(f"/api/students/{student.id}", json={"semester": 8}, headers=headers(faculty))
    assert r.status_code == 403
