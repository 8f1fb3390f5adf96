"""FastAPI web application for teamstandup."""

import logging
import os
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, Cookie, Depends, FastAPI, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from teamstandup.api.auth_models import LoginRequest, RegisterRequest, UpdateProfileRequest
from teamstandup.api.cookies import clear_auth_cookies, set_auth_cookies
from teamstandup.api.errors import register_exception_handlers
from teamstandup.api.responses import (
    StandupEnvelope,
    StandupPageEnvelope,
    StandupPageResponse,
    StandupResponse,
    UserEnvelope,
    UserListEnvelope,
    UserResponse,
)
from teamstandup.auth.dependencies import AuthIdentity, get_current_identity
from teamstandup.database.database import get_db, init_db
from teamstandup.database.refresh_token_repository import RefreshTokenRepository
from teamstandup.database.standup_repository import StandupRepository
from teamstandup.database.user_repository import UserRepository
from teamstandup.models.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, REFRESH_COOKIE_NAME
from teamstandup.models.standup import SortField, SortOrder, StandupCreate, StandupQuery, StandupStatus, StandupUpdate
from teamstandup.services.auth_service import AuthService
from teamstandup.services.standup_service import StandupService
from teamstandup.services.user_service import UserService

load_dotenv()

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield


app = FastAPI(
    title="teamstandup API",
    description="Daily standups for small teams",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

router = APIRouter(prefix=API_PREFIX)


# Service wiring: one set of repositories per request-scoped session.
def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(db), RefreshTokenRepository(db))


def get_standup_service(db: Session = Depends(get_db)) -> StandupService:
    return StandupService(StandupRepository(db))


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db), RefreshTokenRepository(db))


def _client_info(request: Request) -> dict:
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": request.client.host if request.client else None,
    }


def _user_out(user) -> UserResponse:
    return UserResponse(**user.model_dump())


def _standup_out(standup) -> StandupResponse:
    return StandupResponse(**standup.model_dump())


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat()}


# ---------------------------------------------------------------- auth

@router.post("/auth/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    """Create an account and sign it in."""
    result = auth.register(
        payload.email,
        payload.password,
        payload.name,
        payload.timezone,
        payload.profile_image,
        **_client_info(request),
    )
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return UserEnvelope(status=201, message="User registered successfully", data=_user_out(result.user))


@router.post("/auth/login", response_model=UserEnvelope)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
):
    result = auth.login(payload.email, payload.password, **_client_info(request))
    set_auth_cookies(response, result.access_token, result.refresh_token)
    return UserEnvelope(status=200, message="Login successful", data=_user_out(result.user))


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    identity: AuthIdentity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """Revoke the current refresh token and clear cookies (idempotent)."""
    auth.logout(refresh_token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookies(response)
    return response


@router.post("/auth/logout-all", status_code=status.HTTP_204_NO_CONTENT)
def logout_all(
    identity: AuthIdentity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    """Revoke every refresh token of the caller."""
    auth.logout_all(identity.user_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookies(response)
    return response


@router.post("/auth/refresh-token", status_code=status.HTTP_204_NO_CONTENT)
def refresh_token(
    request: Request,
    refresh_token: Optional[str] = Cookie(default=None, alias=REFRESH_COOKIE_NAME),
    auth: AuthService = Depends(get_auth_service),
):
    """Rotate the refresh token cookie and issue a new access token cookie."""
    tokens = auth.refresh_token(refresh_token, **_client_info(request))
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return response


@router.get("/auth/me", response_model=UserEnvelope)
def me(
    identity: AuthIdentity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    user = auth.get_current_user(identity.user_id)
    return UserEnvelope(status=200, message="User retrieved successfully", data=_user_out(user))


# ---------------------------------------------------------------- standups

@router.post("/standups", response_model=StandupEnvelope, status_code=status.HTTP_201_CREATED)
def create_standup(
    payload: StandupCreate,
    identity: AuthIdentity = Depends(get_current_identity),
    standups: StandupService = Depends(get_standup_service),
):
    standup = standups.create_standup(identity.user_id, payload)
    return StandupEnvelope(status=201, message="Standup created successfully", data=_standup_out(standup))


@router.get("/standups", response_model=StandupPageEnvelope)
def list_standups(
    user_id: Optional[str] = Query(None, alias="userId"),
    day: Optional[date] = Query(None, alias="date"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    standup_status: Optional[StandupStatus] = Query(None, alias="status"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: SortField = Query("date"),
    order: SortOrder = Query("desc"),
    identity: AuthIdentity = Depends(get_current_identity),
    standups: StandupService = Depends(get_standup_service),
):
    """Team view (no filters: everyone's standups today) or history view (userId)."""
    query = StandupQuery(
        user_id=user_id,
        date=day,
        date_from=date_from,
        date_to=date_to,
        status=standup_status,
        page=page,
        limit=limit,
        sort=sort,
        order=order,
    )
    result = standups.get_standups(query)
    data = StandupPageResponse(
        data=[_standup_out(s) for s in result.data],
        pagination=result.pagination.model_dump(),
    )
    return StandupPageEnvelope(status=200, message="Standups retrieved successfully", data=data)


@router.get("/standups/{standup_id}", response_model=StandupEnvelope)
def get_standup(
    standup_id: str,
    identity: AuthIdentity = Depends(get_current_identity),
    standups: StandupService = Depends(get_standup_service),
):
    standup = standups.get_standup(standup_id)
    return StandupEnvelope(status=200, message="Standup retrieved successfully", data=_standup_out(standup))


@router.patch("/standups/{standup_id}", response_model=StandupEnvelope)
def update_standup(
    standup_id: str,
    payload: StandupUpdate,
    identity: AuthIdentity = Depends(get_current_identity),
    standups: StandupService = Depends(get_standup_service),
):
    standup = standups.update_standup(standup_id, identity.user_id, payload)
    return StandupEnvelope(status=200, message="Standup updated successfully", data=_standup_out(standup))


# ---------------------------------------------------------------- users

@router.get("/users", response_model=UserListEnvelope)
def list_users(
    identity: AuthIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    active = users.get_all_users()
    return UserListEnvelope(
        status=200,
        message="User profiles retrieved successfully",
        data=[_user_out(u) for u in active],
    )


@router.patch("/users/me", response_model=UserEnvelope)
def update_profile(
    payload: UpdateProfileRequest,
    identity: AuthIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    user = users.update_profile(identity.user_id, payload.model_dump(exclude_none=True))
    return UserEnvelope(status=200, message="Profile updated successfully", data=_user_out(user))


@router.delete("/users/me", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_account(
    identity: AuthIdentity = Depends(get_current_identity),
    users: UserService = Depends(get_user_service),
):
    users.deactivate(identity.user_id)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookies(response)
    return response


app.include_router(router)
