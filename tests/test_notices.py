"""
공지사항 API 테스트.
- 작성(비공개) → 공개 → 공개 목록 노출, 수정 / 삭제, 관리자 목록 필터를 검증한다.
"""

from tests.helpers import auth_header, create_admin_in_db, create_user_in_db, login


def test_notice_lifecycle(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    created = client.post(
        "/notices",
        json={"title": "Welcome", "content": "Orientation on Friday"},
        headers=auth_header(token),
    )
    assert created.status_code == 201, created.text
    notice = created.json()["data"]
    assert notice["published"] is False
    assert notice["created_by"]["email"] == admin.email

    # 공개 전에는 공개 목록에 없음
    assert client.get("/notices").json()["meta"]["total"] == 0

    published = client.patch(f"/notices/{notice['id']}/publish", headers=auth_header(token))
    assert published.status_code == 200
    assert published.json()["data"]["published_at"] is not None

    public = client.get("/notices", params={"title": "welc"})
    assert [n["title"] for n in public.json()["data"]] == ["Welcome"]

    short = client.patch(f"/notices/{notice['id']}", json={"title": "Hi"}, headers=auth_header(token))
    assert short.status_code == 422

    updated = client.patch(f"/notices/{notice['id']}", json={"content": "Moved to Monday"}, headers=auth_header(token))
    assert updated.status_code == 200, updated.text
    assert updated.json()["data"]["title"] == "Welcome"
    assert updated.json()["data"]["content"] == "Moved to Monday"

    assert client.get(f"/notices/{notice['id']}").status_code == 200
    assert client.delete(f"/notices/{notice['id']}", headers=auth_header(token)).status_code == 200
    assert client.get(f"/notices/{notice['id']}").status_code == 404
    assert client.get("/notices").json()["data"] == []


def test_admin_list_filters_by_published(client, db_session):
    admin = create_admin_in_db(db_session)
    token = login(client, admin.email)

    first = client.post("/notices", json={"title": "Draft"}, headers=auth_header(token)).json()["data"]
    second = client.post("/notices", json={"title": "Live"}, headers=auth_header(token)).json()["data"]
    client.patch(f"/notices/{second['id']}/publish", headers=auth_header(token))

    drafts = client.get("/notices/admin", params={"published": "false"}, headers=auth_header(token))
    assert [n["id"] for n in drafts.json()["data"]] == [first["id"]]

    everything = client.get("/notices/admin", headers=auth_header(token))
    assert everything.json()["meta"]["total"] == 2


def test_notice_write_requires_admin(client, db_session):
    user = create_user_in_db(db_session)
    token = login(client, user.email)

    assert client.post("/notices", json={"title": "Nope"}, headers=auth_header(token)).status_code == 403
    assert client.get("/notices/admin", headers=auth_header(token)).status_code == 403
