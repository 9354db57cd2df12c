# app/routes/comments.py
"""FastAPI routes for post comments."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.config import MAX_SQL_INTEGER
from app.db import get_db
from app.schemas import CommentCreate, CommentOut, CommentResponse, MessageResponse
from app.security import get_current_user_id
from app.services.comments import create_comment, delete_comment, list_comments

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/{post_id}", response_model=List[CommentOut])
def get_comments(
    post_id: int = Path(..., description="ID of the post", ge=1, le=MAX_SQL_INTEGER),
    limit: Optional[str] = Query(None, description="Page size (default 50)"),
    offset: Optional[str] = Query(None, description="Rows to skip"),
    db: Session = Depends(get_db),
):
    """
    List comments on a post, oldest first.

    A post that does not exist (or was deleted) has no comments, so this
    returns an empty list rather than 404.
    """
    return list_comments(db, post_id, limit=limit, offset=offset)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def add_comment(
    payload: CommentCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    comment = create_comment(db, payload.post_id, user_id, payload.content)
    return {"message": "Comment added successfully", "comment": comment}


@router.delete("/{comment_id}", response_model=MessageResponse)
def remove_comment(
    comment_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    delete_comment(db, comment_id, user_id)
    return {"message": "Comment deleted successfully"}
