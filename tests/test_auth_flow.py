"""
인증 기본 플로우 통합 테스트.
- 회원가입(GUEST, 미인증) → 로그인, 중복 가입 / 잘못된 비밀번호 / 비활성 계정 차단,
  Refresh Token 회전 및 재사용 차단, 로그아웃 후 토큰 무효화를 검증한다.
"""

from tests.helpers import auth_header, create_user_in_db, login


def test_register_and_login(client):
    reg = client.post(
        "/auth/register",
        json={"first_name": "Kim", "last_name": "Lee", "email": "Kim@Test.com", "password": "UserPassw0rd!"},
    )
    assert reg.status_code == 201, reg.text
    data = reg.json()["data"]
    assert data["email"] == "kim@test.com"
    assert data["role"] == "GUEST"
    assert data["is_verified"] is False

    dup = client.post(
        "/auth/register",
        json={"first_name": "Kim", "last_name": "Lee", "email": "kim@test.com", "password": "UserPassw0rd!"},
    )
    assert dup.status_code == 409

    res = client.post("/auth/login", json={"email": "kim@test.com", "password": "UserPassw0rd!"})
    assert res.status_code == 200, res.text
    body = res.json()["data"]
    assert body["access_token"]
    assert body["user"]["role"] == "GUEST"
    assert "refresh_token" in client.cookies


def test_register_rejects_short_password(client):
    res = client.post(
        "/auth/register",
        json={"first_name": "A", "last_name": "B", "email": "short@test.com", "password": "short"},
    )
    assert res.status_code == 422


def test_login_failures(client, db_session):
    create_user_in_db(db_session, email="active@test.com")
    create_user_in_db(db_session, email="disabled@test.com", is_active=False)

    wrong = client.post("/auth/login", json={"email": "active@test.com", "password": "WrongPassw0rd!"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid credentials"

    unknown = client.post("/auth/login", json={"email": "ghost@test.com", "password": "WrongPassw0rd!"})
    assert unknown.status_code == 401

    disabled = client.post("/auth/login", json={"email": "disabled@test.com", "password": "Passw0rd!123"})
    assert disabled.status_code == 403
    assert disabled.json()["detail"] == "Account is disabled"


def test_refresh_token_rotation_and_revocation(client, db_session):
    user = create_user_in_db(db_session)
    login(client, user.email)

    refresh1 = client.cookies.get("refresh_token")
    assert refresh1

    r1 = client.post("/auth/refresh")
    assert r1.status_code == 200, r1.text
    access2 = r1.json()["data"]["access_token"]
    assert access2

    refresh2 = client.cookies.get("refresh_token")
    assert refresh2 and refresh2 != refresh1

    # 회전 전 토큰 재사용 차단
    client.cookies.clear()
    client.cookies.set("refresh_token", refresh1)
    r_old = client.post("/auth/refresh")
    assert r_old.status_code == 401
    assert r_old.json()["detail"] == "Refresh token revoked"

    client.cookies.clear()
    client.cookies.set("refresh_token", refresh2)
    logout = client.post("/auth/logout", headers=auth_header(access2))
    assert logout.status_code == 204

    client.cookies.clear()
    client.cookies.set("refresh_token", refresh2)
    after = client.post("/auth/refresh")
    assert after.status_code == 401


def test_refresh_without_cookie_is_401(client):
    res = client.post("/auth/refresh")
    assert res.status_code == 401
    assert res.json()["detail"] == "Missing refresh token"


def test_invalid_bearer_token_is_401(client):
    res = client.get("/users/me", headers=auth_header("not-a-jwt"))
    assert res.status_code == 401
