# app/services/posts.py
"""
Post storage and feed composition.

Every read returns plain dict records annotated for the viewer:
``is_liked`` (existence check against likes), the author summary, the
list of liker ids and the post's comments. Likes and comments for a
page of posts are fetched with one batched query each.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, exists, literal, or_, select
from sqlalchemy.orm import Query, Session, aliased, joinedload

from app.config import POST_MAX_LENGTH
from app.models import Follow, Like, Post
from app.services.comments import comments_by_post
from app.services.errors import NotFoundError, PermissionDeniedError, ValidationError
from app.services.likes import likers_by_post
from app.services.pagination import clamp_pagination
from app.services.users import get_user, user_summary

log = logging.getLogger(__name__)


def clean_post_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise ValidationError("Post content is required")
    if len(content) > POST_MAX_LENGTH:
        raise ValidationError(f"Post content must be {POST_MAX_LENGTH} characters or less")
    return content


def _posts_query(db: Session, viewer_id: Optional[int]) -> Query:
    """Posts with their author eagerly loaded and the viewer's like flag."""
    if viewer_id is None:
        is_liked = literal(False)
    else:
        is_liked = exists().where(and_(Like.post_id == Post.id, Like.user_id == viewer_id))
    return db.query(Post, is_liked.label("is_liked")).options(joinedload(Post.user))


def _newest_first(query: Query) -> Query:
    return query.order_by(Post.created_at.desc(), Post.id.desc())


def _to_records(db: Session, rows: List) -> List[Dict[str, Any]]:
    post_ids = [post.id for post, _ in rows]
    likes = likers_by_post(db, post_ids)
    comments = comments_by_post(db, post_ids)

    return [
        {
            "id": post.id,
            "user_id": post.user_id,
            "content": post.content,
            "image": post.image,
            "likes_count": post.likes_count,
            "comments_count": post.comments_count,
            "created_at": post.created_at,
            "updated_at": post.updated_at,
            "is_liked": bool(is_liked),
            "user": user_summary(post.user),
            "likes": likes[post.id],
            "comments": comments[post.id],
        }
        for post, is_liked in rows
    ]


def get_feed(
    db: Session,
    viewer_id: Optional[int] = None,
    limit: Any = None,
    offset: Any = None,
) -> List[Dict[str, Any]]:
    """
    Paginated reverse-chronological feed.

    With a viewer, only posts by the viewer or by accounts the viewer
    follows are returned; without one, every post is.

    Args:
        db: Database session
        viewer_id: Authenticated viewer, or None for anonymous
        limit: Page size; clamped to [1, MAX_PAGE_LIMIT]
        offset: Rows to skip; clamped to >= 0

    Returns:
        List of post records
    """
    limit, offset = clamp_pagination(limit, offset)
    query = _posts_query(db, viewer_id)

    if viewer_id is not None:
        followed = select(Follow.following_id).where(Follow.follower_id == viewer_id)
        query = query.filter(or_(Post.user_id == viewer_id, Post.user_id.in_(followed)))

    rows = _newest_first(query).limit(limit).offset(offset).all()
    return _to_records(db, rows)


def get_post(db: Session, post_id: int, viewer_id: Optional[int] = None) -> Dict[str, Any]:
    row = _posts_query(db, viewer_id).filter(Post.id == post_id).first()
    if row is None:
        raise NotFoundError("Post not found")
    return _to_records(db, [row])[0]


def get_user_posts(
    db: Session,
    user_id: int,
    viewer_id: Optional[int] = None,
    limit: Any = None,
    offset: Any = None,
) -> List[Dict[str, Any]]:
    """Posts authored by ``user_id``, newest first."""
    limit, offset = clamp_pagination(limit, offset)
    query = _posts_query(db, viewer_id).filter(Post.user_id == user_id)
    rows = _newest_first(query).limit(limit).offset(offset).all()
    return _to_records(db, rows)


def get_liked_posts(
    db: Session,
    user_id: int,
    viewer_id: Optional[int] = None,
    limit: Any = None,
    offset: Any = None,
) -> List[Dict[str, Any]]:
    """Posts liked by ``user_id``, most recently liked first."""
    limit, offset = clamp_pagination(limit, offset)
    # aliased so the viewer's is_liked subquery still correlates on posts only
    liked = aliased(Like)
    rows = (
        _posts_query(db, viewer_id)
        .join(liked, and_(liked.post_id == Post.id, liked.user_id == user_id))
        .order_by(liked.created_at.desc(), liked.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return _to_records(db, rows)


def create_post(db: Session, user_id: int, content: str, image: Optional[str] = None) -> Dict[str, Any]:
    get_user(db, user_id)
    post = Post(user_id=user_id, content=clean_post_content(content), image=image or None)
    db.add(post)
    db.flush()
    log.info("User %s created post %s", user_id, post.id)
    return get_post(db, post.id, viewer_id=user_id)


def _owned_post(db: Session, post_id: int, user_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.user_id != user_id:
        raise PermissionDeniedError("Unauthorized to modify this post")
    return post


def update_post(db: Session, post_id: int, user_id: int, content: str) -> Dict[str, Any]:
    post = _owned_post(db, post_id, user_id)
    post.content = clean_post_content(content)
    post.updated_at = datetime.utcnow()
    db.flush()
    return get_post(db, post_id, viewer_id=user_id)


def delete_post(db: Session, post_id: int, user_id: int) -> None:
    """
    Delete a post owned by ``user_id``; its comments and likes go with it.

    Raises:
        NotFoundError: post does not exist
        PermissionDeniedError: post belongs to someone else
    """
    post = _owned_post(db, post_id, user_id)
    db.delete(post)
    db.flush()
    log.info("User %s deleted post %s", user_id, post_id)
