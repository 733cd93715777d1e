"""Session login/logout, password flows, and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import create_session_token, decode_session_token
from app.models import ROLE_ADMIN, ROLE_LEADER
from app.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    ForgotPasswordRequest,
    LoginRequest,
    MeResponse,
    ResetPasswordWithTokenRequest,
    SessionResponse,
    UserOut,
)
from app.schemas.common import MessageResponse
from app.services.access import AccessScope, scope_for
from app.services.accounts import (
    authenticate,
    change_password,
    get_user,
    resolve_province_context,
)
from app.services.notifier import EmailNotifier
from app.services.password_reset import redeem_token, request_password_reset

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Dependency: the Settings instance the app was built with."""
    return request.app.state.settings


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


def _session_token(
    request: Request,
    settings: Settings,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> CurrentUser:
    """
    Dependency: require a valid session (cookie or Bearer token) and return the caller.

    Role and home province come from the user record, not the token, so a changed
    account takes effect on the next request. Raises 401 if missing or invalid.
    """
    token = _session_token(request, settings, credentials)
    if not token:
        raise Unauthenticated()
    try:
        payload = decode_session_token(settings, token)
    except jwt.PyJWTError:
        raise Unauthenticated()
    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise Unauthenticated()
    user = get_user(db, sub)
    if user is None:
        raise Unauthenticated("Utilizador não encontrado")

    province_context = payload.get("province") or user.province_id
    if user.role == ROLE_LEADER:
        province_context = user.province_id
    return CurrentUser(
        id=user.id,
        username=user.username,
        role=user.role,
        province_id=user.province_id,
        province_context=province_context,
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != ROLE_ADMIN:
        raise Forbidden()
    return current_user


def get_scope(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> AccessScope:
    """Dependency: the caller's data-access scope."""
    return scope_for(current_user)


@router.post("/login", response_model=SessionResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SessionResponse:
    """
    Authenticate with username and password. The session token is set as an HttpOnly
    cookie and also returned for clients that prefer: Authorization: Bearer <accessToken>
    """
    user = authenticate(db, body.username, body.password)
    province_context = resolve_province_context(db, user, body.province_id)
    token = create_session_token(settings, user.id, user.role, province_context)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
    return SessionResponse(
        user=UserOut.model_validate(user),
        province_context=province_context,
        access_token=token,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> MessageResponse:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Sessão terminada")


@router.get("/me", response_model=MeResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MeResponse:
    user = get_user(db, current_user.id)
    return MeResponse(
        user=UserOut.model_validate(user),
        province_context=current_user.province_context,
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[EmailNotifier, Depends(get_notifier)],
) -> MessageResponse:
    """Change the caller's password; clears the provisional flag."""
    user = get_user(db, current_user.id)
    await change_password(db, notifier, user, body)
    return MessageResponse(message="Password alterada com sucesso")


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    body: ForgotPasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    notifier: Annotated[EmailNotifier, Depends(get_notifier)],
) -> MessageResponse:
    """Email a recovery token. The answer does not reveal whether the email is registered."""
    message = await request_password_reset(
        db, settings, notifier, str(body.email), body.province_id
    )
    return MessageResponse(message=message)


@router.post("/reset-password-token", response_model=MessageResponse)
def reset_password_with_token(
    body: ResetPasswordWithTokenRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    return MessageResponse(message=redeem_token(db, body))
