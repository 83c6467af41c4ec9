"""
HTTP routes for the content service API.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import RedirectResponse

from content_backend.auth import AuthClient, AuthError, AuthSession, RecoveryNotifier
from content_backend.config import get_settings
from content_backend.dependencies import (
    get_auth_client,
    get_content_service,
    get_recovery_notifier,
)
from content_backend.policy import ContentWriteError, ReadOnlySourceError
from content_backend.schemas import (
    BlogListResponse,
    BlogPostModel,
    DashboardStatsResponse,
    GroupListResponse,
    GroupOfferingModel,
    LoginRequest,
    PasswordResetRequest,
    PasswordUpdateRequest,
    RecoveryRequest,
    SessionResponse,
    SiteContentModel,
    StatusResponse,
)
from content_backend.service import ContentService
from shared.types import BlogPost, GroupOffering, SiteContent

logger = logging.getLogger(__name__)

router = APIRouter()


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_session(
    authorization: Optional[str] = Header(None),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthSession:
    session = auth.get_session(_bearer_token(authorization))
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def require_admin(
    session: AuthSession = Depends(current_session),
    auth: AuthClient = Depends(get_auth_client),
) -> AuthSession:
    if session.recovery or not auth.is_admin(session.user_id):
        raise HTTPException(status_code=403, detail="Admin access required")
    return session


def _write_failed(exc: ContentWriteError) -> HTTPException:
    if isinstance(exc, ReadOnlySourceError):
        return HTTPException(status_code=409, detail=str(exc))
    logger.error("Admin write failed: %s", exc)
    return HTTPException(status_code=502, detail=str(exc))


# Public reads


@router.get("/content", response_model=SiteContentModel)
def get_content(service: ContentService = Depends(get_content_service)):
    return SiteContentModel(**asdict(service.site_content.get_content()))


@router.get("/groups", response_model=GroupListResponse)
def list_groups(service: ContentService = Depends(get_content_service)):
    listing = service.groups.list_with_status()
    groups = [
        GroupOfferingModel(**asdict(group)) for group in listing.items if group.active
    ]
    return GroupListResponse(groups=groups, status=listing.status)


@router.get("/groups/{group_id}", response_model=GroupOfferingModel)
def get_group(group_id: str, service: ContentService = Depends(get_content_service)):
    group = service.groups.get_by_id(group_id)
    if group is None or not group.active:
        raise HTTPException(status_code=404, detail="Group not found")
    return GroupOfferingModel(**asdict(group))


@router.get("/posts", response_model=BlogListResponse)
def list_posts(service: ContentService = Depends(get_content_service)):
    listing = service.posts.list_with_status()
    posts = [BlogPostModel(**asdict(post)) for post in listing.items if post.published]
    return BlogListResponse(
        posts=posts,
        status=listing.status,
        external_blog_url=get_settings().external_blog_url,
        read_only=service.posts.read_only,
    )


@router.get(
    "/posts/{post_id:path}",
    response_model=BlogPostModel,
    responses={307: {"description": "Post lives on the external blog"}},
)
def get_post(post_id: str, service: ContentService = Depends(get_content_service)):
    post = service.posts.get_by_id(post_id)
    if post is None or not post.published:
        raise HTTPException(status_code=404, detail="Post not found")
    if post.external_link:
        return RedirectResponse(post.external_link, status_code=307)
    return BlogPostModel(**asdict(post))


# Authentication


def _session_response(session: AuthSession, auth: AuthClient) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        user_id=session.user_id,
        email=session.email,
        is_admin=auth.is_admin(session.user_id),
    )


@router.post("/auth/login", response_model=SessionResponse)
def login(payload: LoginRequest, auth: AuthClient = Depends(get_auth_client)):
    try:
        session = auth.sign_in_with_password(payload.email, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return _session_response(session, auth)


@router.post("/auth/logout", response_model=StatusResponse)
def logout(
    session: AuthSession = Depends(current_session),
    auth: AuthClient = Depends(get_auth_client),
):
    try:
        auth.sign_out(session.access_token)
    except AuthError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return StatusResponse(status="ok")


@router.get("/auth/session", response_model=SessionResponse)
def get_session(
    session: AuthSession = Depends(current_session),
    auth: AuthClient = Depends(get_auth_client),
):
    return _session_response(session, auth)


@router.post("/auth/password-reset", response_model=StatusResponse, status_code=202)
def request_password_reset(
    payload: PasswordResetRequest,
    auth: AuthClient = Depends(get_auth_client),
    notifier: RecoveryNotifier = Depends(get_recovery_notifier),
):
    # Same answer whether or not the account exists.
    try:
        token = auth.request_password_reset(payload.email)
    except AuthError as exc:
        logger.error("Password reset request failed: %s", exc)
        return StatusResponse(status="ok")
    if token:
        notifier.send(payload.email, token)
    return StatusResponse(status="ok")


@router.post("/auth/recover", response_model=SessionResponse)
def recover(payload: RecoveryRequest, auth: AuthClient = Depends(get_auth_client)):
    try:
        session = auth.verify_recovery(payload.token)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return _session_response(session, auth)


@router.post("/auth/password", response_model=StatusResponse)
def update_password(
    payload: PasswordUpdateRequest,
    session: AuthSession = Depends(current_session),
    auth: AuthClient = Depends(get_auth_client),
):
    try:
        auth.update_password(session.access_token, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return StatusResponse(status="ok")


# Admin console


@router.get("/admin/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    active_groups, posts = service.dashboard_stats()
    return DashboardStatsResponse(active_groups=active_groups, posts=posts)


@router.put("/admin/content", response_model=SiteContentModel)
def save_content(
    payload: SiteContentModel,
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    content = SiteContent(**payload.model_dump())
    try:
        service.site_content.save_content(content)
    except ContentWriteError as exc:
        raise _write_failed(exc)
    return SiteContentModel(**asdict(content))


@router.get("/admin/groups", response_model=GroupListResponse)
def admin_list_groups(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    listing = service.groups.list_with_status()
    return GroupListResponse(
        groups=[GroupOfferingModel(**asdict(group)) for group in listing.items],
        status=listing.status,
    )


@router.post("/admin/groups/draft", response_model=GroupOfferingModel)
def new_group_draft(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    return GroupOfferingModel(**asdict(service.groups.new_draft()))


@router.put("/admin/groups/{group_id}", response_model=GroupOfferingModel)
def save_group(
    group_id: str,
    payload: GroupOfferingModel,
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    if payload.id != group_id:
        raise HTTPException(status_code=400, detail="Group id does not match path")
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Group title is required")
    group = GroupOffering(**payload.model_dump())
    try:
        service.groups.upsert(group)
    except ContentWriteError as exc:
        raise _write_failed(exc)
    return payload


@router.delete("/admin/groups/{group_id}", response_model=StatusResponse)
def delete_group(
    group_id: str,
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    try:
        service.groups.remove(group_id)
    except ContentWriteError as exc:
        raise _write_failed(exc)
    return StatusResponse(status="ok")


@router.post("/admin/groups/restore-defaults", response_model=GroupListResponse)
def restore_default_groups(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    try:
        service.groups.restore_defaults()
    except ContentWriteError as exc:
        raise _write_failed(exc)
    listing = service.groups.list_with_status()
    return GroupListResponse(
        groups=[GroupOfferingModel(**asdict(group)) for group in listing.items],
        status=listing.status,
    )


@router.get("/admin/posts", response_model=BlogListResponse)
def admin_list_posts(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    listing = service.posts.list_with_status()
    return BlogListResponse(
        posts=[BlogPostModel(**asdict(post)) for post in listing.items],
        status=listing.status,
        external_blog_url=get_settings().external_blog_url,
        read_only=service.posts.read_only,
    )


@router.post("/admin/posts/draft", response_model=BlogPostModel)
def new_post_draft(
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    if service.posts.read_only:
        raise HTTPException(
            status_code=409, detail="Posts are managed on the external blog"
        )
    return BlogPostModel(**asdict(service.posts.new_draft()))


@router.put("/admin/posts/{post_id}", response_model=BlogPostModel)
def save_post(
    post_id: str,
    payload: BlogPostModel,
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    if payload.id != post_id:
        raise HTTPException(status_code=400, detail="Post id does not match path")
    if not payload.title.strip():
        raise HTTPException(status_code=400, detail="Post title is required")
    post = BlogPost(**payload.model_dump())
    try:
        service.posts.upsert(post)
    except ContentWriteError as exc:
        raise _write_failed(exc)
    return payload


@router.delete("/admin/posts/{post_id}", response_model=StatusResponse)
def delete_post(
    post_id: str,
    _: AuthSession = Depends(require_admin),
    service: ContentService = Depends(get_content_service),
):
    try:
        service.posts.remove(post_id)
    except ContentWriteError as exc:
        raise _write_failed(exc)
    return StatusResponse(status="ok")
