"""Administrator session, roster and metrics endpoints."""
from __future__ import annotations

from checkin.models.admin_session import AdminSession
from checkin.models.checkin import CheckIn
from checkin.services.admin_sessions import create_session
from tests.conftest import ADMIN_PASS, ADMIN_USER, check_in_payload

COOKIE = "checkin_sid"


def _seed(client):
    client.post(
        "/api/login",
        json=check_in_payload(deviceId="d1", firstName="Ali", lastName="Said", company="OQ", ts="2024-05-01 08:00"),
    )
    client.post(
        "/api/login",
        json=check_in_payload(deviceId="d2", firstName="Maryam", lastName="Khalili", company="OQ", ts="2024-05-01 09:15"),
    )
    client.post(
        "/api/login",
        json=check_in_payload(
            deviceId="d3",
            firstName="John",
            lastName="Smith",
            company="PDO",
            area="South",
            cluster="Cluster S1",
            plant="Plant S1-B",
            ts="2024-05-02 07:45",
        ),
    )


def test_admin_login_sets_session_cookie(client, db):
    response = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": ADMIN_PASS})

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    set_cookie = response.headers["set-cookie"].lower()
    assert COOKIE in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert db.query(AdminSession).count() == 1
    # only the hash of the cookie value is stored
    assert db.query(AdminSession).one().token_hash != client.cookies.get(COOKIE)


def test_admin_login_wrong_password(client, db):
    response = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "bad_creds"}
    assert db.query(AdminSession).count() == 0


def test_admin_login_unknown_user_looks_the_same(client):
    response = client.post("/api/admin/login", json={"username": "root", "password": ADMIN_PASS})

    assert response.status_code == 401
    assert response.json() == {"error": "bad_creds"}


def test_admin_login_without_body_fields(client):
    response = client.post("/api/admin/login", json={})

    assert response.status_code == 401
    assert response.json() == {"error": "bad_creds"}


def test_me_reports_authentication_state(client):
    assert client.get("/api/admin/me").json() == {"authed": False}

    client.post("/api/admin/login", json={"username": ADMIN_USER, "password": ADMIN_PASS})

    assert client.get("/api/admin/me").json() == {"authed": True}


def test_roster_requires_admin(client):
    response = client.get("/api/admin/logins")

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}


def test_metrics_and_delete_require_admin(client):
    assert client.get("/api/admin/metrics").status_code == 401
    assert client.delete("/api/admin/login/1").status_code == 401


def test_logout_invalidates_session(admin_client, db):
    token = admin_client.cookies.get(COOKIE)

    response = admin_client.post("/api/admin/logout")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert db.query(AdminSession).count() == 0

    admin_client.cookies.set(COOKIE, token)
    assert admin_client.get("/api/admin/logins").status_code == 401
    assert admin_client.get("/api/admin/me").json() == {"authed": False}


def test_logout_without_session_is_ok(client):
    response = client.post("/api/admin/logout")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_expired_session_is_rejected(client, db):
    token = create_session(db, lifetime_minutes=-5)
    db.commit()
    client.cookies.set(COOKIE, token)

    assert client.get("/api/admin/logins").status_code == 401
    assert client.get("/api/admin/me").json() == {"authed": False}


def test_forged_cookie_is_rejected(client):
    client.cookies.set(COOKIE, "not-a-real-token")

    assert client.get("/api/admin/logins").json() == {"error": "unauthorized"}


def test_relogin_replaces_previous_session(admin_client, db):
    first = admin_client.cookies.get(COOKIE)

    admin_client.post("/api/admin/login", json={"username": ADMIN_USER, "password": ADMIN_PASS})

    assert admin_client.cookies.get(COOKIE) != first
    assert db.query(AdminSession).count() == 1


def test_roster_lists_newest_first(admin_client):
    _seed(admin_client)

    response = admin_client.get("/api/admin/logins")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [row["first_name"] for row in body["rows"]] == ["John", "Maryam", "Ali"]
    assert set(body["rows"][0]) == {
        "id",
        "first_name",
        "last_name",
        "job_id",
        "phone",
        "company",
        "area",
        "cluster",
        "plant",
        "ts",
    }
    assert response.headers["cache-control"] == "no-store"


def test_roster_filters_by_company_and_name(admin_client):
    _seed(admin_client)

    by_company = admin_client.get("/api/admin/logins", params={"company": "OQ"}).json()
    by_both = admin_client.get("/api/admin/logins", params={"company": "OQ", "name": "ALI"}).json()
    by_last_name = admin_client.get("/api/admin/logins", params={"name": "smi"}).json()

    assert by_company["count"] == 2
    # "ALI" matches Ali (first name) and Khalili (last name), case-insensitively
    assert {row["first_name"] for row in by_both["rows"]} == {"Ali", "Maryam"}
    assert [row["first_name"] for row in by_last_name["rows"]] == ["John"]


def test_roster_location_filters_and_blank_values(admin_client):
    _seed(admin_client)

    south = admin_client.get("/api/admin/logins", params={"area": "South", "plant": "Plant S1-B"}).json()
    blank = admin_client.get("/api/admin/logins", params={"area": "", "company": "", "name": "  "}).json()

    assert [row["first_name"] for row in south["rows"]] == ["John"]
    assert blank["count"] == 3


def test_roster_name_wildcards_are_literal(admin_client):
    _seed(admin_client)

    response = admin_client.get("/api/admin/logins", params={"name": "%"})

    assert response.json() == {"count": 0, "rows": []}


def test_delete_check_in(admin_client, db):
    _seed(admin_client)
    login_id = db.query(CheckIn).filter(CheckIn.device_id == "d1").one().id

    response = admin_client.delete(f"/api/admin/login/{login_id}")
    again = admin_client.delete(f"/api/admin/login/{login_id}")

    assert response.json() == {"ok": True, "deleted": 1}
    assert again.json() == {"ok": True, "deleted": 0}
    assert db.query(CheckIn).count() == 2
    assert admin_client.get("/api/status", params={"deviceId": "d1"}).json() == {"loggedIn": False}


def test_delete_with_non_numeric_id(admin_client):
    response = admin_client.delete("/api/admin/login/abc")

    assert response.status_code == 400
    assert response.json() == {"error": "invalid_request"}


def test_metrics_single_day(admin_client):
    admin_client.post("/api/login", json=check_in_payload(ts="2024-05-01 08:00"))

    response = admin_client.get(
        "/api/admin/metrics",
        params={"start": "2024-05-01", "end": "2024-05-01", "area": "North"},
    )

    assert response.status_code == 200
    assert response.json() == [{"date": "2024-05-01", "count": 1}]


def test_metrics_sum_across_locations_and_skip_gaps(admin_client):
    admin_client.post("/api/login", json=check_in_payload(deviceId="a", ts="2024-05-01 08:00"))
    admin_client.post("/api/login", json=check_in_payload(deviceId="b", plant="Plant N1-B", ts="2024-05-01 10:00"))
    admin_client.post("/api/login", json=check_in_payload(deviceId="a", ts="2024-05-03 08:00"))
    admin_client.post("/api/logout", json={"deviceId": "a"})

    all_days = admin_client.get("/api/admin/metrics").json()
    one_plant = admin_client.get("/api/admin/metrics", params={"plant": "Plant N1-B"}).json()

    assert all_days == [{"date": "2024-05-01", "count": 2}, {"date": "2024-05-03", "count": 1}]
    assert one_plant == [{"date": "2024-05-01", "count": 1}]


def test_metrics_empty_range(admin_client):
    admin_client.post("/api/login", json=check_in_payload(ts="2024-05-01 08:00"))

    response = admin_client.get("/api/admin/metrics", params={"start": "2024-06-01", "end": "2024-06-30"})

    assert response.json() == []


def test_metrics_blank_bounds_mean_unbounded(admin_client):
    admin_client.post("/api/login", json=check_in_payload(ts="2024-05-01 08:00"))

    response = admin_client.get("/api/admin/metrics", params={"start": "", "end": ""})

    assert response.json() == [{"date": "2024-05-01", "count": 1}]


def test_metrics_bad_date(admin_client):
    response = admin_client.get("/api/admin/metrics", params={"start": "May 1st"})

    assert response.status_code == 400
    assert response.json() == {"error": "invalid_request"}


def test_admin_login_password_with_nul_byte(client, db):
    response = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": "a\u0000b"})

    assert response.status_code == 401
    assert response.json() == {"error": "bad_creds"}
    assert response.headers["cache-control"] == "no-store"
    assert db.query(AdminSession).count() == 0


def test_admin_login_non_string_credentials(client):
    as_list = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": [ADMIN_PASS]})
    as_object = client.post("/api/admin/login", json={"username": {"name": ADMIN_USER}, "password": ADMIN_PASS})
    as_bool = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": True})

    for response in (as_list, as_object, as_bool):
        assert response.status_code == 401
        assert response.json() == {"error": "bad_creds"}
