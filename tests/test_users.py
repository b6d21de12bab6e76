"""
사용자 관리 API 테스트.
- 본인 정보 + 역할별 프로필, 역할 기반 계정 생성(판별 유니온),
  관리자 목록 검색 / 필터, Soft Delete 제한 조건과 관리자 로그를 검증한다.
"""

from sqlalchemy import select

from app.models.admin_log import AdminAction, AdminActionLog
from app.models.user import Role

from tests.helpers import auth_header, create_admin_in_db, create_user_in_db, get_user, login, seed_catalog


def test_me_for_guest_has_no_profile(client, db_session):
    user = create_user_in_db(db_session, first_name="Guest")
    token = login(client, user.email)

    res = client.get("/users/me", headers=auth_header(token))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["first_name"] == "Guest"
    assert data["role"] == "GUEST"
    assert data["profile"] is None
    assert "password_hash" not in data


def test_superadmin_creates_admin_with_profile(client, db_session):
    root = create_admin_in_db(db_session, role=Role.SUPER_ADMIN)
    token = login(client, root.email)

    res = client.post(
        "/users/role-based",
        json={
            "role": "ADMIN",
            "first_name": "New",
            "last_name": "Admin",
            "email": "new.admin@test.com",
            "password": "AdminPassw0rd!",
            "profile": {"designation": "Treasurer"},
        },
        headers=auth_header(token),
    )
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    assert data["role"] == "ADMIN"
    assert data["is_verified"] is True
    assert data["profile"]["designation"] == "Treasurer"

    admin_token = login(client, "new.admin@test.com", "AdminPassw0rd!")
    me = client.get("/users/me", headers=auth_header(admin_token))
    assert me.json()["data"]["profile"]["designation"] == "Treasurer"

    log = db_session.scalar(select(AdminActionLog).where(AdminActionLog.action == AdminAction.CREATE_USER))
    assert log.after_role == "ADMIN"


def test_admin_cannot_create_admin(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    res = client.post(
        "/users/role-based",
        json={
            "role": "ADMIN",
            "first_name": "X",
            "last_name": "Y",
            "email": "x@test.com",
            "password": "AdminPassw0rd!",
        },
        headers=auth_header(token),
    )
    assert res.status_code == 403


def test_admin_creates_member_and_mentor(client, db_session):
    catalog = seed_catalog(db_session)
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    member = client.post(
        "/users/role-based",
        json={
            "role": "MEMBER",
            "first_name": "Mem",
            "last_name": "Ber",
            "email": "member@test.com",
            "password": "MemberPassw0rd!",
            "profile": {
                "student_id": "2023-001",
                "department_id": str(catalog["department_id"]),
                "session_id": str(catalog["session_id"]),
            },
        },
        headers=auth_header(token),
    )
    assert member.status_code == 201, member.text
    assert member.json()["data"]["profile"]["student_id"] == "2023-001"

    mentor = client.post(
        "/users/role-based",
        json={
            "role": "MENTOR",
            "first_name": "Men",
            "last_name": "Tor",
            "email": "mentor@test.com",
            "password": "MentorPassw0rd!",
            "profile": {"expertise": "Backend", "learning_track_id": str(catalog["learning_track_id"])},
        },
        headers=auth_header(token),
    )
    assert mentor.status_code == 201, mentor.text
    assert mentor.json()["data"]["profile"]["expertise"] == "Backend"


def test_role_based_create_validates_profile_shape(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    # MENTOR 는 expertise 필수
    res = client.post(
        "/users/role-based",
        json={
            "role": "MENTOR",
            "first_name": "Men",
            "last_name": "Tor",
            "email": "mentor@test.com",
            "password": "MentorPassw0rd!",
            "profile": {"bio": "hello"},
        },
        headers=auth_header(token),
    )
    assert res.status_code == 422

    guest = client.post(
        "/users/role-based",
        json={
            "role": "GUEST",
            "first_name": "G",
            "last_name": "U",
            "email": "guest@test.com",
            "password": "GuestPassw0rd!",
        },
        headers=auth_header(token),
    )
    assert guest.status_code == 422


def test_duplicate_email_is_conflict(client, db_session):
    admin = create_admin_in_db(db_session)
    create_user_in_db(db_session, email="taken@test.com")
    token = login(client, admin.email)

    res = client.post(
        "/users/role-based",
        json={
            "role": "MODERATOR",
            "first_name": "Mo",
            "last_name": "De",
            "email": "Taken@test.com",
            "password": "ModPassw0rd!",
        },
        headers=auth_header(token),
    )
    assert res.status_code == 409


def test_list_users_search_and_filter(client, db_session):
    admin = create_admin_in_db(db_session)
    create_user_in_db(db_session, first_name="Zelda", email="zelda@test.com")
    create_user_in_db(db_session, first_name="Link", email="link@test.com", is_verified=False)
    token = login(client, admin.email)

    res = client.get("/users", params={"search_term": "zel"}, headers=auth_header(token))
    assert res.status_code == 200, res.text
    assert [u["email"] for u in res.json()["data"]] == ["zelda@test.com"]

    res = client.get("/users", params={"is_verified": "false"}, headers=auth_header(token))
    assert [u["email"] for u in res.json()["data"]] == ["link@test.com"]

    res = client.get("/users", params={"role": "ADMIN"}, headers=auth_header(token))
    assert res.json()["meta"]["total"] == 1

    # %, _ 는 문자 그대로 검색
    res = client.get("/users", params={"search_term": "%"}, headers=auth_header(token))
    assert res.json()["meta"]["total"] == 0
    res = client.get("/users", params={"search_term": "zeld_"}, headers=auth_header(token))
    assert res.json()["meta"]["total"] == 0


def test_soft_delete_user(client, db_session):
    admin = create_admin_in_db(db_session)
    root = create_admin_in_db(db_session, role=Role.SUPER_ADMIN)
    user = create_user_in_db(db_session)
    token = login(client, admin.email)
    user_token = login(client, user.email)

    assert client.patch(f"/users/{admin.id}/soft-delete", headers=auth_header(token)).status_code == 403
    assert client.patch(f"/users/{root.id}/soft-delete", headers=auth_header(token)).status_code == 403

    res = client.patch(f"/users/{user.id}/soft-delete", headers=auth_header(token))
    assert res.status_code == 200, res.text

    deleted = get_user(db_session, user.id)
    assert deleted.is_deleted is True
    assert deleted.is_active is False
    assert deleted.deleted_at is not None

    # 삭제된 사용자의 토큰 / 로그인 차단
    assert client.get("/users/me", headers=auth_header(user_token)).status_code == 401
    relogin = client.post("/auth/login", json={"email": user.email, "password": "Passw0rd!123"})
    assert relogin.status_code == 401

    listing = client.get("/users", headers=auth_header(token))
    assert user.email not in [u["email"] for u in listing.json()["data"]]


def test_member_cannot_list_users(client, db_session):
    member = create_user_in_db(db_session, role=Role.MEMBER)
    token = login(client, member.email)

    assert client.get("/users", headers=auth_header(token)).status_code == 403


def test_admin_logs_newest_first(client, db_session):
    admin = create_admin_in_db(db_session)
    first = create_user_in_db(db_session)
    second = create_user_in_db(db_session)
    token = login(client, admin.email)

    client.patch(f"/users/{first.id}/soft-delete", headers=auth_header(token))
    client.patch(f"/users/{second.id}/soft-delete", headers=auth_header(token))

    res = client.get("/admin/logs", params={"limit": 1}, headers=auth_header(token))
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["meta"] == {"limit": 1, "count": 1}
    log = body["data"][0]
    assert log["action"] == "DELETE_USER"
    assert log["actor"]["email"] == admin.email
    assert log["target"]["id"] == str(second.id)

    assert client.get("/admin/logs", params={"limit": 500}, headers=auth_header(token)).status_code == 422
