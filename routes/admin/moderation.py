# routes/admin/moderation.py
"""
Moderation endpoints: roles, content status, reports, warnings and announcements.
"""
from typing import List
from fastapi import APIRouter, Depends, status

from config.dependencies import get_admin
from config.security import require_admin
from model.user import Users
from schema.admin import RoleUpdate, StatusUpdate
from schema.notification import AnnouncementIn, WarningIn
from schema.social import CommentOut, PostOut, ReportOut
from schema.user import UserOut
from src.social.admin import AdminService
from src.social.content import to_post_out

router = APIRouter()


# ============================================================================
# Users
# ============================================================================

@router.patch("/users/{user_id}/role", response_model=UserOut)
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return admin.update_user_role(user_id, payload.role)


@router.post("/users/{user_id}/warn", status_code=status.HTTP_202_ACCEPTED)
def warn_user(
    user_id: int,
    payload: WarningIn,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    admin.warn_user(user_id, payload.reason)
    return {"success": True}


@router.post("/announcements", status_code=status.HTTP_202_ACCEPTED)
def announce(
    payload: AnnouncementIn,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return {"recipients": admin.announce(payload.message, payload.user_ids)}


# ============================================================================
# Content status
# ============================================================================

@router.patch("/posts/{post_id}/status", response_model=PostOut)
def update_post_status(
    post_id: int,
    payload: StatusUpdate,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return to_post_out(admin.update_post_status(post_id, payload.status, payload.reason))


@router.patch("/comments/{comment_id}/status", response_model=CommentOut)
def update_comment_status(
    comment_id: int,
    payload: StatusUpdate,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return admin.update_comment_status(comment_id, payload.status, payload.reason)


# ============================================================================
# Reports
# ============================================================================

@router.get("/posts/{post_id}/reports", response_model=List[ReportOut])
def post_reports(
    post_id: int,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return admin.get_post_reports(post_id)


@router.get("/comments/{comment_id}/reports", response_model=List[ReportOut])
def comment_reports(
    comment_id: int,
    _admin: Users = Depends(require_admin),
    admin: AdminService = Depends(get_admin),
):
    return admin.get_comment_reports(comment_id)
