# app/services/comments.py
"""Comment creation, listing and deletion with comments_count upkeep."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session, joinedload

from app.config import COMMENT_MAX_LENGTH, DEFAULT_COMMENT_LIMIT
from app.models import Comment, Post
from app.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from app.services.membership import refresh_comments_count
from app.services.pagination import clamp_pagination
from app.services.users import user_summary

log = logging.getLogger(__name__)


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "user_id": comment.user_id,
        "content": comment.content,
        "created_at": comment.created_at,
        "user": user_summary(comment.user),
    }


def clean_comment_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Comment content cannot be empty")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be {COMMENT_MAX_LENGTH} characters or less")
    return content


def create_comment(db: Session, post_id: int, user_id: int, content: str) -> Dict[str, Any]:
    """
    Add a comment to an existing post.

    The parent's comments_count is recounted in the same transaction.

    Raises:
        ValidationError: blank or oversized content
        NotFoundError: post does not exist
    """
    content = clean_comment_content(content)
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post not found")

    comment = Comment(post_id=post_id, user_id=user_id, content=content)
    db.add(comment)
    db.flush()
    refresh_comments_count(db, post_id)

    log.info("User %s commented on post %s", user_id, post_id)
    return comment_to_dict(comment)


def list_comments(db: Session, post_id: int, limit: Any = None, offset: Any = None) -> List[Dict[str, Any]]:
    """Comments for a post, oldest first. A missing post simply has none."""
    limit, offset = clamp_pagination(limit, offset, default_limit=DEFAULT_COMMENT_LIMIT)
    comments = (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return [comment_to_dict(c) for c in comments]


def comments_by_post(db: Session, post_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
    """Batch-load comments for several posts in one query."""
    grouped: Dict[int, List[Dict[str, Any]]] = {pid: [] for pid in post_ids}
    if not post_ids:
        return grouped
    comments = (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.post_id.in_(post_ids))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    for comment in comments:
        grouped[comment.post_id].append(comment_to_dict(comment))
    return grouped


def delete_comment(db: Session, comment_id: int, user_id: int) -> None:
    """
    Delete a comment owned by ``user_id``.

    Raises:
        NotFoundError: comment does not exist
        PermissionDeniedError: comment belongs to someone else
    """
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != user_id:
        raise PermissionDeniedError("Unauthorized to delete this comment")

    post_id = comment.post_id
    db.delete(comment)
    db.flush()
    refresh_comments_count(db, post_id)
    log.info("User %s deleted comment %s", user_id, comment_id)
