"""HTTP tests for the ``/users`` endpoints and the app-wide behaviors."""

from __future__ import annotations

import io

import pytest

from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.factories.video import VideoFactory, WatchHistoryEntryFactory


def _register_form(**overrides):
    form = {
        "fullName": "Fox Mulder",
        "email": "fox@example.com",
        "username": "FoxM",
        "password": "iwanttobelieve",
        "avatar": (io.BytesIO(b"avatar-bytes"), "avatar.png"),
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


def _login(client, **payload):
    payload.setdefault("password", DEFAULT_PASSWORD)
    return client.post("/users/login", json=payload)


def _cookies(resp) -> dict[str, str]:
    jar = {}
    for header in resp.headers.getlist("Set-Cookie"):
        name, _, rest = header.partition("=")
        jar[name] = rest.split(";", 1)[0]
    return jar


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def logged_in(client):
    """Log in a fresh account and return ``(user, tokens)``.

    ``tokens`` maps cookie names to values; the refresh token is only
    delivered as a cookie.
    """
    user = UserFactory(username="scully")
    return user, _cookies(_login(client, username="scully"))


class TestRegister:
    def test_register_returns_public_account(self, client, upload_dir):
        resp = client.post(
            "/users/register", data=_register_form(), content_type="multipart/form-data"
        )
        body = resp.get_json()

        assert resp.status_code == 201
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["username"] == "foxm"
        assert body["data"]["avatar"].startswith("memory://media/")
        assert "password" not in body["data"]
        assert "refreshToken" not in body["data"]
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_uploads_do_not_leak_into_the_next_test(self, app):
        # Runs right after a registration that uploaded without asking for the store.
        store = app.extensions["media_store"]
        assert store.uploads == []
        assert store.fail is False

    def test_register_without_avatar(self, client):
        resp = client.post(
            "/users/register",
            data=_register_form(avatar=None),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Avatar file is required"

    def test_register_duplicate(self, client):
        UserFactory(username="foxm")
        resp = client.post(
            "/users/register", data=_register_form(), content_type="multipart/form-data"
        )
        assert resp.status_code == 409
        assert resp.get_json()["message"] == "User with email or username already exists"

    def test_register_missing_fields(self, client):
        resp = client.post(
            "/users/register",
            data=_register_form(fullName="  ", email=None),
            content_type="multipart/form-data",
        )
        body = resp.get_json()
        assert resp.status_code == 400
        assert body["message"] == "Validation failed"
        assert "email" in body["errors"]

    def test_upload_failure_is_bad_gateway(self, client, media_store, upload_dir):
        media_store.fail = True
        resp = client.post(
            "/users/register", data=_register_form(), content_type="multipart/form-data"
        )
        assert resp.status_code == 502
        assert resp.get_json()["message"] == "Error while uploading file"
        assert list(upload_dir.iterdir()) == []


class TestSession:
    def test_login_sets_cookies_and_body(self, client):
        UserFactory(username="skinner")
        resp = _login(client, username="SKINNER")
        body = resp.get_json()

        assert resp.status_code == 200
        assert body["message"] == "User logged in successfully"
        assert body["data"]["user"]["username"] == "skinner"
        assert set(body["data"]) == {"user", "accessToken"}
        cookies = resp.headers.getlist("Set-Cookie")
        assert len(cookies) == 2
        for header in cookies:
            assert "HttpOnly" in header
            assert "Secure" in header
        jar = _cookies(resp)
        assert jar["accessToken"] == body["data"]["accessToken"]
        assert jar["refreshToken"]
        assert jar["refreshToken"] not in resp.get_data(as_text=True)

    def test_login_by_email(self, client):
        user = UserFactory()
        assert _login(client, email=user.email.upper()).status_code == 200

    def test_login_wrong_password(self, client):
        UserFactory(username="krycek")
        resp = _login(client, username="krycek", password="wrong")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid user credentials"
        assert resp.headers.getlist("Set-Cookie") == []

    def test_login_unknown_user(self, client):
        resp = _login(client, username="nobody")
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "User does not exist"

    def test_login_requires_identifier(self, client):
        resp = client.post("/users/login", json={"password": "x"})
        assert resp.status_code == 400

    def test_refresh_via_cookie(self, client, logged_in):
        _, tokens = logged_in
        resp = client.post(
            "/users/refresh-token", headers={"Cookie": f"refreshToken={tokens['refreshToken']}"}
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["message"] == "Access token refreshed"
        assert set(body["data"]) == {"accessToken"}
        assert _cookies(resp)["refreshToken"] != tokens["refreshToken"]

    def test_refresh_via_body_and_replay(self, client, logged_in):
        _, tokens = logged_in
        first = client.post("/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert first.status_code == 200
        assert "refreshToken" not in first.get_json()["data"]
        assert _cookies(first)["refreshToken"] not in first.get_data(as_text=True)

        replay = client.post("/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert replay.status_code == 401
        assert replay.get_json()["message"] == "Refresh token is expired or used"

    def test_new_login_supersedes_old_refresh_token(self, client, logged_in):
        _, tokens = logged_in
        assert _login(client, username="scully").status_code == 200

        resp = client.post("/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert resp.status_code == 401

    def test_refresh_without_token(self, client):
        resp = client.post("/users/refresh-token")
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Unauthorized request"

    @pytest.mark.parametrize("payload", [{"refreshToken": 12345}, {"refreshToken": None}, ["x"]])
    def test_refresh_with_non_string_token(self, client, payload):
        resp = client.post("/users/refresh-token", json=payload)
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Unauthorized request"

    def test_logout_revokes_refresh(self, client, logged_in):
        _, tokens = logged_in
        resp = client.post(
            "/users/logout", headers={"Cookie": f"accessToken={tokens['accessToken']}"}
        )
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "User logged out"
        assert all("Expires=Thu, 01 Jan 1970" in h for h in resp.headers.getlist("Set-Cookie"))

        again = client.post("/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
        assert again.status_code == 401


class TestAuthenticatedRoutes:
    def test_requires_token(self, client):
        resp = client.get("/users/current-user")
        body = resp.get_json()
        assert resp.status_code == 401
        assert body == {
            "statusCode": 401,
            "message": "Unauthorized request",
            "success": False,
            "request_id": resp.headers["X-Request-ID"],
        }

    def test_rejects_garbage_token(self, client):
        resp = client.get("/users/current-user", headers=_auth("not-a-jwt"))
        assert resp.status_code == 401
        assert resp.get_json()["message"] == "Invalid access token"

    def test_rejects_refresh_token_as_access(self, client, logged_in):
        _, tokens = logged_in
        resp = client.get("/users/current-user", headers=_auth(tokens["refreshToken"]))
        assert resp.status_code == 401

    def test_current_user(self, client, logged_in):
        user, tokens = logged_in
        resp = client.get("/users/current-user", headers=_auth(tokens["accessToken"]))
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["data"]["_id"] == user.id
        assert body["data"]["username"] == "scully"

    def test_change_password(self, client, logged_in):
        _, tokens = logged_in
        resp = client.post(
            "/users/change-password",
            json={"oldPassword": DEFAULT_PASSWORD, "newPassword": "n3w-pass"},
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 200
        assert _login(client, username="scully", password="n3w-pass").status_code == 200

    def test_change_password_wrong_old(self, client, logged_in):
        _, tokens = logged_in
        resp = client.post(
            "/users/change-password",
            json={"oldPassword": "nope", "newPassword": "n3w-pass"},
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid old password"

    def test_update_account(self, client, logged_in):
        _, tokens = logged_in
        resp = client.patch(
            "/users/update-account",
            json={"fullName": "Dana K. Scully", "email": "dana@fbi.gov"},
            headers=_auth(tokens["accessToken"]),
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["data"]["fullName"] == "Dana K. Scully"
        assert body["data"]["email"] == "dana@fbi.gov"

    def test_update_account_requires_both_fields(self, client, logged_in):
        _, tokens = logged_in
        resp = client.patch(
            "/users/update-account",
            json={"fullName": "Only Name"},
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 400

    def test_update_avatar(self, client, logged_in, media_store):
        _, tokens = logged_in
        resp = client.patch(
            "/users/update-avatar",
            data={"avatar": (io.BytesIO(b"new-avatar"), "new.png")},
            content_type="multipart/form-data",
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["avatar"] == media_store.uploads[-1].url

    def test_update_avatar_without_file(self, client, logged_in):
        _, tokens = logged_in
        resp = client.patch(
            "/users/update-avatar",
            data={"note": "no file attached"},
            content_type="multipart/form-data",
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Avatar file is missing"

    def test_update_cover_image(self, client, logged_in):
        _, tokens = logged_in
        resp = client.patch(
            "/users/update-cover-image",
            data={"coverImage": (io.BytesIO(b"cover"), "cover.jpg")},
            content_type="multipart/form-data",
            headers=_auth(tokens["accessToken"]),
        )
        assert resp.status_code == 200
        assert resp.get_json()["data"]["coverImage"].endswith(".jpg")


class TestChannels:
    def test_channel_profile(self, client, logged_in):
        viewer, tokens = logged_in
        channel = UserFactory(username="lonegunmen")
        SubscriptionFactory(subscriber=viewer, channel=channel)

        resp = client.get("/users/c/LoneGunmen", headers=_auth(tokens["accessToken"]))
        data = resp.get_json()["data"]

        assert resp.status_code == 200
        assert resp.get_json()["message"] == "User channel fetched successfully"
        assert data["username"] == "lonegunmen"
        assert data["subscribersCount"] == 1
        assert data["channelsSubscribedToCount"] == 0
        assert data["isSubscribed"] is True

    def test_channel_not_found(self, client, logged_in):
        _, tokens = logged_in
        resp = client.get("/users/c/ghost", headers=_auth(tokens["accessToken"]))
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Channel does not exist"

    def test_channel_blank_username(self, client, logged_in):
        _, tokens = logged_in
        resp = client.get("/users/c/", headers=_auth(tokens["accessToken"]))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "username is missing"

    def test_watch_history(self, client, logged_in):
        viewer, tokens = logged_in
        owner = UserFactory(username="cigsmoker")
        video = VideoFactory(owner=owner, title="Pilot")
        WatchHistoryEntryFactory(user=viewer, video=video)

        resp = client.get("/users/history", headers=_auth(tokens["accessToken"]))
        data = resp.get_json()["data"]

        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Watch history fetched successfully"
        assert len(data) == 1
        assert data[0]["title"] == "Pilot"
        assert data[0]["owner"]["username"] == "cigsmoker"


class TestAppWide:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["db"] == "ok"

    def test_unknown_route_is_json(self, client):
        resp = client.get("/nope")
        body = resp.get_json()
        assert resp.status_code == 404
        assert body["message"] == "Route '/nope' not found"
        assert body["success"] is False

    def test_request_id_is_echoed(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert resp.headers["X-Request-ID"] == "req-42"
