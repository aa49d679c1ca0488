"""Account, session and channel endpoints under ``/users``."""

from __future__ import annotations

from contextlib import ExitStack

from flask import Blueprint, current_app, request

from channelhub.api.deps import (
    REFRESH_COOKIE,
    api_response,
    clear_token_cookies,
    get_media_store,
    get_token_provider,
    require_auth,
    set_token_cookies,
    timing,
)
from channelhub.core.extensions import limiter
from channelhub.infra.uploads import staged_upload
from channelhub.schemas import (
    AccountSchema,
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    WatchedVideoSchema,
)
from channelhub.services.accounts import AccountService, RegisterIn, UpdateDetailsIn
from channelhub.services.auth import AuthContext, AuthService, LoginIn
from channelhub.services.channels import ChannelService

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
account_schema = AccountSchema()
login_response_schema = LoginResponseSchema()
token_pair_schema = TokenPairSchema()
channel_schema = ChannelProfileSchema()
watched_video_schema = WatchedVideoSchema(many=True)


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _upload_dir() -> str:
    return str(current_app.config.get("UPLOAD_TEMP_DIR", "./public/temp"))


def _auth_service() -> AuthService:
    return AuthService(token_provider=get_token_provider())


def _account_service() -> AccountService:
    return AccountService(media_store=get_media_store())


# --------------------------------------------------------------------------- #
# Registration & sessions
# --------------------------------------------------------------------------- #


@bp.post("/register")
@timing
def register():
    """Create an account from a multipart form with an avatar file."""

    data = register_schema.load(request.form)
    with ExitStack() as stack:
        avatar = stack.enter_context(staged_upload(request.files.get("avatar"), _upload_dir()))
        cover = stack.enter_context(staged_upload(request.files.get("coverImage"), _upload_dir()))
        account = _account_service().register(RegisterIn(**data), avatar=avatar, cover_image=cover)
    return api_response(account_schema.dump(account), "User registered successfully", status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials; both tokens go in cookies, the access token also in the body."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = _auth_service().login(LoginIn(**data))
    response = api_response(login_response_schema.dump(result), "User logged in successfully")
    return set_token_cookies(
        response,
        access_token=result.tokens.access_token,
        refresh_token=result.tokens.refresh_token,
    )


@bp.post("/logout")
@require_auth
@timing
def logout(auth: AuthContext):
    _auth_service().end_session(auth.account.id)
    return clear_token_cookies(api_response({}, "User logged out"))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token read from the cookie, else the JSON body."""

    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        token = refresh_schema.load(payload)["refresh_token"]
    pair = _auth_service().refresh_session(token)
    response = api_response(token_pair_schema.dump(pair), "Access token refreshed")
    return set_token_cookies(
        response, access_token=pair.access_token, refresh_token=pair.refresh_token
    )


# --------------------------------------------------------------------------- #
# Current account
# --------------------------------------------------------------------------- #


@bp.post("/change-password")
@require_auth
@timing
def change_password(auth: AuthContext):
    data = change_password_schema.load(request.get_json(silent=True) or {})
    _account_service().change_password(
        auth.account.id,
        old_password=data["old_password"],
        new_password=data["new_password"],
    )
    return api_response({}, "Password changed successfully")


@bp.get("/current-user")
@require_auth
@timing
def current_user(auth: AuthContext):
    return api_response(account_schema.dump(auth.account), "Current user fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account(auth: AuthContext):
    data = update_account_schema.load(request.get_json(silent=True) or {})
    account = _account_service().update_details(auth.account.id, UpdateDetailsIn(**data))
    return api_response(account_schema.dump(account), "Account details updated successfully")


@bp.patch("/update-avatar")
@require_auth
@timing
def update_avatar(auth: AuthContext):
    with staged_upload(request.files.get("avatar"), _upload_dir()) as avatar:
        account = _account_service().update_avatar(auth.account.id, avatar)
    return api_response(account_schema.dump(account), "Avatar image updated successfully")


@bp.patch("/update-cover-image")
@require_auth
@timing
def update_cover_image(auth: AuthContext):
    with staged_upload(request.files.get("coverImage"), _upload_dir()) as cover:
        account = _account_service().update_cover_image(auth.account.id, cover)
    return api_response(account_schema.dump(account), "Cover image updated successfully")


# --------------------------------------------------------------------------- #
# Social graph
# --------------------------------------------------------------------------- #


@bp.get("/c/", defaults={"username": ""})
@bp.get("/c/<username>")
@require_auth
@timing
def channel_profile(username: str, auth: AuthContext):
    profile = ChannelService().get_channel_profile(username, viewer_id=auth.account.id)
    return api_response(channel_schema.dump(profile), "User channel fetched successfully")


@bp.get("/history")
@require_auth
@timing
def watch_history(auth: AuthContext):
    videos = ChannelService().get_watch_history(auth.account.id)
    return api_response(watched_video_schema.dump(videos), "Watch history fetched successfully")
