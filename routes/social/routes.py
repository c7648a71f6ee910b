from fastapi import APIRouter, Depends, status
from typing import List, Optional

from config.dependencies import get_content
from config.security import get_current_user, is_admin
from model.user import Users
from schema.social import (
    CommentCreate,
    CommentOut,
    LikeOut,
    LikeStatusOut,
    PostCreate,
    PostOut,
    PostUpdate,
    ReportCreate,
    ReportOut,
)
from src.social.content import ContentService, to_post_out

router = APIRouter(
    prefix="/v1/social",
    tags=["Social"],
)

# --------------------------
# Posts
# --------------------------

@router.post("/posts", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    """Create a new post."""
    post = content.create_post(current_user.id, payload.title, payload.content, payload.image)
    return to_post_out(post)


@router.get("/posts/feed", response_model=List[PostOut])
def feed(search: Optional[str] = None, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    """Posts the caller may see, newest first."""
    return content.get_feed(current_user.id, search=search)


@router.get("/users/{user_id}/posts", response_model=List[PostOut])
def user_posts(user_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.get_user_posts(user_id, current_user.id)


@router.put("/posts/{post_id}", response_model=PostOut)
def update_post(post_id: int, payload: PostUpdate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    post = content.update_post(current_user.id, post_id, payload.model_dump(exclude_unset=True))
    return to_post_out(post)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    """Delete a post (owner or admin)."""
    content.delete_post(current_user.id, post_id, is_admin=is_admin(current_user))


# --------------------------
# Likes
# --------------------------

@router.post("/posts/{post_id}/like", response_model=LikeOut, status_code=status.HTTP_201_CREATED)
def like_post(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.like_post(current_user.id, post_id)


@router.delete("/posts/{post_id}/like", status_code=status.HTTP_204_NO_CONTENT)
def unlike_post(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    content.unlike_post(current_user.id, post_id)


@router.get("/posts/{post_id}/likes", response_model=List[LikeOut])
def list_likes(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.get_post_likes(post_id)


@router.get("/posts/{post_id}/like", response_model=LikeStatusOut)
def like_status(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    content.get_post(post_id)
    return LikeStatusOut(post_id=post_id, liked=content.has_liked(current_user.id, post_id))


# --------------------------
# Comments
# --------------------------

@router.get("/posts/{post_id}/comments", response_model=List[CommentOut])
def list_comments(post_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.get_post_comments(post_id)


@router.post("/posts/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(post_id: int, payload: CommentCreate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    """Comment on a post; the owner and any @mentioned users are notified."""
    return content.add_comment(current_user.id, post_id, payload.text)


@router.put("/comments/{comment_id}", response_model=CommentOut)
def update_comment(comment_id: int, payload: CommentCreate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.update_comment(current_user.id, comment_id, payload.text)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    content.delete_comment(current_user.id, comment_id, is_admin=is_admin(current_user))


# --------------------------
# Reports
# --------------------------

@router.post("/posts/{post_id}/report", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def report_post(post_id: int, payload: ReportCreate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.report_post(current_user.id, post_id, payload.reason)


@router.post("/comments/{comment_id}/report", response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def report_comment(comment_id: int, payload: ReportCreate, current_user: Users = Depends(get_current_user), content: ContentService = Depends(get_content)):
    return content.report_comment(current_user.id, comment_id, payload.reason)
