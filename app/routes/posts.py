"""
FastAPI routes for posts, the feed and likes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.config import MAX_SQL_INTEGER
from app.db import get_db
from app.schemas import LikeResponse, MessageResponse, PostCreate, PostOut, PostResponse, PostUpdate
from app.security import get_current_user_id, get_optional_user_id
from app.services import likes, posts

router = APIRouter(prefix="/api/posts", tags=["posts"])

# Pagination is taken as raw strings so bad values are clamped, not rejected
LIMIT_QUERY = Query(None, description="Page size (clamped to 1-100)")
OFFSET_QUERY = Query(None, description="Rows to skip (clamped to >= 0)")


@router.get("", response_model=List[PostOut])
def get_feed(
    limit: Optional[str] = LIMIT_QUERY,
    offset: Optional[str] = OFFSET_QUERY,
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """
    Reverse-chronological feed.

    Authenticated viewers see their own posts and posts from accounts they
    follow; anonymous viewers see every post.
    """
    return posts.get_feed(db, viewer_id=viewer_id, limit=limit, offset=offset)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    post = posts.create_post(db, user_id, payload.content, payload.image)
    return {"message": "Post created successfully", "post": post}


@router.get("/user/{user_id}", response_model=List[PostOut])
def get_user_posts(
    user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    limit: Optional[str] = LIMIT_QUERY,
    offset: Optional[str] = OFFSET_QUERY,
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """Posts authored by one user, newest first."""
    return posts.get_user_posts(db, user_id, viewer_id=viewer_id, limit=limit, offset=offset)


@router.get("/liked/{user_id}", response_model=List[PostOut])
def get_liked_posts(
    user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    limit: Optional[str] = LIMIT_QUERY,
    offset: Optional[str] = OFFSET_QUERY,
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """Posts one user has liked, most recently liked first."""
    return posts.get_liked_posts(db, user_id, viewer_id=viewer_id, limit=limit, offset=offset)


@router.get("/{post_id}", response_model=PostOut)
def get_post(
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    viewer_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    return posts.get_post(db, post_id, viewer_id=viewer_id)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    payload: PostUpdate,
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    post = posts.update_post(db, post_id, user_id, payload.content)
    return {"message": "Post updated successfully", "post": post}


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Owner-only delete; comments and likes are removed with the post."""
    posts.delete_post(db, post_id, user_id)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=LikeResponse)
def toggle_like(
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Like the post if the caller has not, otherwise remove the like."""
    is_liked, likes_count = likes.toggle_like(db, post_id, user_id)
    return {
        "message": "Post liked" if is_liked else "Post unliked",
        "is_liked": is_liked,
        "likes_count": likes_count,
    }


@router.put("/{post_id}/like", response_model=LikeResponse)
def like_post(
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Idempotent like."""
    is_liked, likes_count = likes.like_post(db, post_id, user_id)
    return {"message": "Post liked", "is_liked": is_liked, "likes_count": likes_count}


@router.delete("/{post_id}/like", response_model=LikeResponse)
def unlike_post(
    post_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Idempotent unlike."""
    is_liked, likes_count = likes.unlike_post(db, post_id, user_id)
    return {"message": "Post unliked", "is_liked": is_liked, "likes_count": likes_count}
