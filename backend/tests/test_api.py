import pytest

FLU = {"reason": "Flu", "start_date": "2025-01-10", "end_date": "2025-01-12"}


def submit_flu(client, headers, student_id):
    response = client.post("/api/medical-requests", json=FLU, headers=headers(student_id))
    assert response.status_code == 201, response.text
    return response.json()


def officer_approve(client, headers, university, request_id, comments="Verified"):
    response = client.post(
        f"/api/medical-requests/{request_id}/officer-decision",
        json={"decision": "approve", "comments": comments},
        headers=headers(university.officer_id),
    )
    assert response.status_code == 200, response.text
    return response.json()


def feed(client, headers, user_id):
    response = client.get("/api/notifications", headers=headers(user_id))
    assert response.status_code == 200, response.text
    return response.json()


def test_medical_request_walkthrough(client, headers, university):
    created = submit_flu(client, headers, university.student_id)
    request_id = created["id"]
    assert created["status"] == "pending"
    assert feed(client, headers, university.student_id) == []

    approved = officer_approve(client, headers, university, request_id)
    assert approved["status"] == "approved_by_officer"
    assert approved["officer_id"] == university.officer_id
    [item] = feed(client, headers, university.student_id)
    assert item["id"] == request_id
    assert item["type"] == "success"
    assert "Approved By Officer" in item["message"]
    assert item["message"].endswith("Message: Verified")

    suggestion = client.get(
        f"/api/medical-requests/{request_id}/routing-suggestion",
        headers=headers(university.officer_id),
    )
    assert suggestion.status_code == 200
    assert suggestion.json()["department_name"] == "Computer Science"
    assert suggestion.json()["assigned"] is True

    forwarded = client.post(
        f"/api/medical-requests/{request_id}/forward",
        json={"lecturer_id": university.ada_id},
        headers=headers(university.officer_id),
    )
    assert forwarded.status_code == 200, forwarded.text
    assert forwarded.json()["status"] == "forwarded_to_dept"
    [item] = feed(client, headers, university.student_id)
    assert item["id"] == request_id
    assert item["type"] == "info"
    [awaiting] = feed(client, headers, university.ada_id)
    assert awaiting["id"] == request_id
    assert awaiting["title"] == "Medical Request Awaiting Review"

    decided = client.post(
        f"/api/medical-requests/{request_id}/department-decision",
        json={"decision": "approve", "comments": "OK"},
        headers=headers(university.ada_id),
    )
    assert decided.status_code == 200, decided.text
    body = decided.json()
    assert body["status"] == "approved_by_dept"
    assert body["admin_comments"] == "OK"
    assert body["officer_comments"] == "Verified"
    assert body["reviewer_id"] == university.ada_id

    [item] = feed(client, headers, university.student_id)
    assert "Approved By Dept" in item["message"]
    assert item["message"].endswith("Message: OK")
    assert feed(client, headers, university.ada_id) == []


def test_medical_request_listing_is_scoped_by_role(client, headers, university):
    mine = submit_flu(client, headers, university.student_id)
    theirs = submit_flu(client, headers, university.unassigned_student_id)
    officer_approve(client, headers, university, mine["id"])
    client.post(
        f"/api/medical-requests/{mine['id']}/forward",
        json={"lecturer_id": university.ada_id},
        headers=headers(university.officer_id),
    )

    def listed(user_id, **params):
        response = client.get("/api/medical-requests", params=params, headers=headers(user_id))
        assert response.status_code == 200
        return [item["id"] for item in response.json()]

    assert listed(university.student_id) == [mine["id"]]
    assert listed(university.ada_id) == [mine["id"]]
    assert listed(university.grace_id) == []
    assert set(listed(university.officer_id)) == {mine["id"], theirs["id"]}
    assert listed(university.officer_id, status="pending") == [theirs["id"]]

    hidden = client.get(f"/api/medical-requests/{theirs['id']}", headers=headers(university.student_id))
    assert hidden.status_code == 404
    visible = client.get(f"/api/medical-requests/{mine['id']}", headers=headers(university.ada_id))
    assert visible.status_code == 200


@pytest.mark.parametrize("actor", ["student_id", "ada_id", "exam_admin_id"])
def test_officer_decision_requires_review_admin(client, headers, university, actor):
    request_id = submit_flu(client, headers, university.student_id)["id"]

    response = client.post(
        f"/api/medical-requests/{request_id}/officer-decision",
        json={"decision": "approve"},
        headers=headers(getattr(university, actor)),
    )

    assert response.status_code == 403


def test_super_admin_may_review(client, headers, university):
    request_id = submit_flu(client, headers, university.student_id)["id"]
    response = client.post(
        f"/api/medical-requests/{request_id}/officer-decision",
        json={"decision": "reject", "comments": "Certificate missing"},
        headers=headers(university.super_admin_id),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


def test_only_the_forwarded_lecturer_may_decide(client, headers, university):
    request_id = submit_flu(client, headers, university.student_id)["id"]
    officer_approve(client, headers, university, request_id)
    client.post(
        f"/api/medical-requests/{request_id}/forward",
        json={"lecturer_id": university.ada_id},
        headers=headers(university.officer_id),
    )

    response = client.post(
        f"/api/medical-requests/{request_id}/department-decision",
        json={"decision": "approve"},
        headers=headers(university.grace_id),
    )

    assert response.status_code == 403
    check = client.get(f"/api/medical-requests/{request_id}", headers=headers(university.officer_id))
    assert check.json()["status"] == "forwarded_to_dept"


def test_invalid_transition_uses_error_envelope(client, headers, university):
    request_id = submit_flu(client, headers, university.student_id)["id"]
    officer_approve(client, headers, university, request_id)

    response = client.post(
        f"/api/medical-requests/{request_id}/officer-decision",
        json={"decision": "reject", "comments": "Changed mind"},
        headers=headers(university.officer_id),
    )

    assert response.status_code == 409
    body = response.json()
    assert body["message"]
    assert body["details"]["current_status"] == "approved_by_officer"


def test_forward_to_unknown_lecturer_is_bad_request(client, headers, university):
    request_id = submit_flu(client, headers, university.student_id)["id"]
    officer_approve(client, headers, university, request_id)

    response = client.post(
        f"/api/medical-requests/{request_id}/forward",
        json={"lecturer_id": university.student_id},
        headers=headers(university.officer_id),
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"lecturer_id": university.student_id}


def test_submit_validation_and_missing_request(client, headers, university):
    inverted = dict(FLU, start_date="2025-01-13")
    response = client.post("/api/medical-requests", json=inverted, headers=headers(university.student_id))
    assert response.status_code == 422
    assert "message" in response.json()

    response = client.post("/api/medical-requests", json=FLU, headers=headers(university.officer_id))
    assert response.status_code == 403

    missing = client.get("/api/medical-requests/does-not-exist", headers=headers(university.officer_id))
    assert missing.status_code == 404
    assert missing.json()["message"] == "Medical request with id does-not-exist not found"


def test_requests_without_token_are_rejected(client, university):
    assert client.get("/api/notifications").status_code in {401, 403}
    response = client.get("/api/notifications", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_notification_endpoints(client, headers, university):
    first = submit_flu(client, headers, university.student_id)["id"]
    second = submit_flu(client, headers, university.student_id)["id"]
    officer_approve(client, headers, university, first)
    officer_approve(client, headers, university, second)

    read = client.post(f"/api/notifications/{first}/read", headers=headers(university.student_id))
    assert read.status_code == 200
    assert read.json() == {"id": first, "dismissed": False, "read": True}

    dismissed = client.post(f"/api/notifications/{second}/dismiss", headers=headers(university.student_id))
    assert dismissed.json()["dismissed"] is True
    again = client.post(f"/api/notifications/{second}/dismiss", headers=headers(university.student_id))
    assert again.status_code == 200

    items = feed(client, headers, university.student_id)
    assert [(item["id"], item["read"]) for item in items] == [(first, True)]

    read_all = client.post("/api/notifications/read-all", headers=headers(university.student_id))
    assert read_all.json() == {"updated": 0}

    unknown = client.post("/api/notifications/made-up-id/dismiss", headers=headers(university.student_id))
    assert unknown.status_code == 404
    foreign = client.post(f"/api/notifications/{first}/read", headers=headers(university.unassigned_student_id))
    assert foreign.status_code == 404


def test_bulk_enrollment_endpoint(client, headers, university):
    payload = {
        "pairs": [
            {"student_id": university.student_id, "module_id": university.algorithms_id},
            {"student_id": university.student_id, "module_id": "ghost-module"},
        ]
    }

    first = client.post("/api/enrollments/bulk", json=payload, headers=headers(university.super_admin_id))
    assert first.status_code == 200, first.text
    assert (first.json()["inserted"], first.json()["skipped"], first.json()["failed"]) == (1, 0, 1)

    second = client.post("/api/enrollments/bulk", json=payload, headers=headers(university.super_admin_id))
    assert (second.json()["inserted"], second.json()["skipped"], second.json()["failed"]) == (0, 1, 1)

    denied = client.post("/api/enrollments/bulk", json=payload, headers=headers(university.student_id))
    assert denied.status_code == 403

    own = client.get(f"/api/students/{university.student_id}/enrollments", headers=headers(university.student_id))
    assert [item["module_id"] for item in own.json()] == [university.algorithms_id]
    other = client.get(
        f"/api/students/{university.student_id}/enrollments",
        headers=headers(university.unassigned_student_id),
    )
    assert other.status_code == 403


def test_auto_enrollment_endpoint(client, headers, university):
    response = client.post(
        "/api/enrollments/auto",
        json={"student_id": university.student_id},
        headers=headers(university.exam_admin_id),
    )
    assert response.status_code == 200
    assert response.json()["inserted"] == 2

    no_degree = client.post(
        "/api/enrollments/auto",
        json={"student_id": university.unassigned_student_id},
        headers=headers(university.exam_admin_id),
    )
    assert no_degree.status_code == 422


def test_module_leader_posts_notice_to_enrolled_students(client, headers, university):
    client.post(
        "/api/enrollments/batch",
        json={"student_ids": [university.student_id], "module_ids": [university.algorithms_id]},
        headers=headers(university.super_admin_id),
    )

    created = client.post(
        "/api/notices",
        json={"module_id": university.algorithms_id, "title": "Quiz moved", "content": "Now on Friday"},
        headers=headers(university.ada_id),
    )
    assert created.status_code == 201, created.text
    assert created.json()["module_code"] == "CS201"

    not_leader = client.post(
        "/api/notices",
        json={"module_id": university.calculus_id, "title": "Hi", "content": "Hello"},
        headers=headers(university.ada_id),
    )
    assert not_leader.status_code == 403
    by_student = client.post(
        "/api/notices",
        json={"module_id": university.algorithms_id, "title": "Hi", "content": "Hello"},
        headers=headers(university.student_id),
    )
    assert by_student.status_code == 403

    [item] = feed(client, headers, university.student_id)
    assert item["id"] == created.json()["id"]
    assert item["title"] == "CS201: Quiz moved"
    assert item["type"] == "notice"
    assert feed(client, headers, university.unassigned_student_id) == []


def test_lecturer_candidates_endpoint(client, headers, university):
    response = client.get(
        "/api/lecturers",
        params={"department_id": university.computer_science_id},
        headers=headers(university.officer_id),
    )
    assert response.status_code == 200
    [ada] = response.json()
    assert ada["id"] == university.ada_id
    assert ada["faculty_name"] == "Faculty of Computing"
    assert [module["code"] for module in ada["modules"]] == ["CS201", "CS202"]

    searched = client.get("/api/lecturers", params={"search": "hopper"}, headers=headers(university.officer_id))
    assert [item["id"] for item in searched.json()] == [university.grace_id]

    denied = client.get("/api/lecturers", headers=headers(university.ada_id))
    assert denied.status_code == 403


def test_list_notices_filters_by_module(client, headers, university):
    for module_id, title in [(university.algorithms_id, "Lab open"), (university.databases_id, "SQL quiz")]:
        response = client.post(
            "/api/notices",
            json={"module_id": module_id, "title": title, "content": "Details"},
            headers=headers(university.ada_id),
        )
        assert response.status_code == 201

    everything = client.get("/api/notices", headers=headers(university.student_id))
    assert {item["title"] for item in everything.json()} == {"Lab open", "SQL quiz"}

    filtered = client.get(
        "/api/notices",
        params={"module_id": university.databases_id},
        headers=headers(university.student_id),
    )
    assert [item["title"] for item in filtered.json()] == ["SQL quiz"]
