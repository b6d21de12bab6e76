"""
가입 신청 API 통합 테스트.
- GUEST 가입 → OTP 인증 → 신청서 제출 → 관리자 승인 → MEMBER 프로필 조회,
  거절 후 재제출, 권한 / 입력 검증 오류 응답을 HTTP 레벨에서 검증한다.
"""

import uuid

from tests.helpers import (
    application_payload,
    auth_header,
    create_admin_in_db,
    create_user_in_db,
    login,
    seed_catalog,
)


def test_register_verify_apply_approve_flow(client, db_session, mailer):
    catalog = seed_catalog(db_session)
    admin = create_admin_in_db(db_session)
    admin_token = login(client, admin.email)

    # 회원가입(GUEST, 미인증)
    reg = client.post(
        "/auth/register",
        json={
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "Jane.Doe@Test.com",
            "password": "UserPassw0rd!",
        },
    )
    assert reg.status_code == 201, reg.text
    assert reg.json()["data"]["role"] == "GUEST"
    assert reg.json()["data"]["is_verified"] is False

    user_token = login(client, "jane.doe@test.com", "UserPassw0rd!")

    # 인증 전 신청 불가
    early = client.post("/members/applications", json=application_payload(catalog), headers=auth_header(user_token))
    assert early.status_code == 400, early.text
    assert early.json()["detail"] == "Please verify your email before applying"

    # OTP 인증
    assert client.post("/otp/send", json={"email": "jane.doe@test.com"}).status_code == 200
    otp = mailer.last_otp("jane.doe@test.com")
    verify = client.post("/otp/verify", json={"email": "jane.doe@test.com", "otp": otp})
    assert verify.status_code == 200, verify.text

    # 신청서 제출
    submit = client.post(
        "/members/applications",
        json=application_payload(catalog, student_id="2024-CSE-017"),
        headers=auth_header(user_token),
    )
    assert submit.status_code == 201, submit.text
    application = submit.json()["data"]
    assert application["status"] == "PENDING"

    mine = client.get("/members/applications/me", headers=auth_header(user_token))
    assert mine.status_code == 200
    assert mine.json()["data"]["id"] == application["id"]

    # 관리자 목록 조회
    listing = client.get(
        "/members/applications",
        params={"search_term": "jane", "status": "PENDING"},
        headers=auth_header(admin_token),
    )
    assert listing.status_code == 200, listing.text
    body = listing.json()
    assert body["meta"] == {"page": 1, "limit": 10, "total": 1}
    assert body["data"][0]["user"]["email"] == "jane.doe@test.com"

    # 승인
    approve = client.patch(f"/members/applications/{application['id']}/approve", headers=auth_header(admin_token))
    assert approve.status_code == 200, approve.text
    assert approve.json()["data"]["status"] == "APPROVED"

    again = client.patch(f"/members/applications/{application['id']}/approve", headers=auth_header(admin_token))
    assert again.status_code == 409
    assert again.json()["detail"] == "Application already reviewed"

    # 승인 후 MEMBER 프로필
    me = client.get("/users/me", headers=auth_header(user_token))
    assert me.status_code == 200
    data = me.json()["data"]
    assert data["role"] == "MEMBER"
    assert data["profile"]["student_id"] == "2024-CSE-017"


def test_reject_then_resubmit(client, db_session):
    catalog = seed_catalog(db_session)
    admin = create_admin_in_db(db_session)
    user = create_user_in_db(db_session)
    admin_token = login(client, admin.email)
    user_token = login(client, user.email)

    submit = client.post("/members/applications", json=application_payload(catalog), headers=auth_header(user_token))
    app_id = submit.json()["data"]["id"]

    duplicate = client.post("/members/applications", json=application_payload(catalog), headers=auth_header(user_token))
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Your application is under review"

    blank = client.patch(
        f"/members/applications/{app_id}/reject",
        json={"review_comment": "  "},
        headers=auth_header(admin_token),
    )
    assert blank.status_code == 400
    assert blank.json()["detail"] == "Review comment is required"

    reject = client.patch(
        f"/members/applications/{app_id}/reject",
        json={"review_comment": "Please add a motivation"},
        headers=auth_header(admin_token),
    )
    assert reject.status_code == 200, reject.text
    assert reject.json()["data"]["status"] == "REJECTED"
    assert reject.json()["data"]["review_comment"] == "Please add a motivation"

    resubmit = client.post(
        "/members/applications",
        json=application_payload(catalog, motivation="Updated"),
        headers=auth_header(user_token),
    )
    assert resubmit.status_code == 201, resubmit.text
    assert resubmit.json()["data"]["id"] == app_id
    assert resubmit.json()["data"]["status"] == "PENDING"
    assert resubmit.json()["data"]["review_comment"] is None


def test_application_endpoints_require_admin(client, db_session):
    user = create_user_in_db(db_session)
    token = login(client, user.email)

    assert client.get("/members/applications").status_code == 401
    assert client.get("/members/applications", headers=auth_header(token)).status_code == 403
    res = client.patch(f"/members/applications/{uuid.uuid4()}/approve", headers=auth_header(token))
    assert res.status_code == 403


def test_submit_rejects_unknown_fields_and_missing_references(client, db_session):
    catalog = seed_catalog(db_session)
    user = create_user_in_db(db_session)
    token = login(client, user.email)

    extra = client.post(
        "/members/applications",
        json=application_payload(catalog, role="ADMIN"),
        headers=auth_header(token),
    )
    assert extra.status_code == 422

    missing = client.post(
        "/members/applications",
        json=application_payload(catalog, department_id=str(uuid.uuid4())),
        headers=auth_header(token),
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Department not found"


def test_approve_unknown_application_is_404(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    res = client.patch(f"/members/applications/{uuid.uuid4()}/approve", headers=auth_header(token))
    assert res.status_code == 404
    assert res.json()["detail"] == "Application not found"


def test_list_applications_rejects_bad_sort(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    res = client.get("/members/applications", params={"sort_by": "motivation"}, headers=auth_header(token))
    assert res.status_code == 400
