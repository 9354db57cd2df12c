# app/services/likes.py
"""Like membership keyed by (post_id, user_id) with likes_count upkeep."""

import logging
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from app.models import Like, Post
from app.services.errors import NotFoundError
from app.services.membership import delete_if_present, insert_if_absent, refresh_likes_count

log = logging.getLogger(__name__)


def _require_post(db: Session, post_id: int) -> None:
    if db.get(Post, post_id) is None:
        raise NotFoundError("Post not found")


def like_post(db: Session, post_id: int, user_id: int) -> Tuple[bool, int]:
    """Idempotent like. Returns (is_liked, likes_count)."""
    _require_post(db, post_id)
    insert_if_absent(db, Like, post_id=post_id, user_id=user_id)
    return True, refresh_likes_count(db, post_id)


def unlike_post(db: Session, post_id: int, user_id: int) -> Tuple[bool, int]:
    """Idempotent unlike. Returns (is_liked, likes_count)."""
    _require_post(db, post_id)
    delete_if_present(db, Like, post_id=post_id, user_id=user_id)
    return False, refresh_likes_count(db, post_id)


def toggle_like(db: Session, post_id: int, user_id: int) -> Tuple[bool, int]:
    """
    Flip the viewer's like on a post.

    Membership change and counter recount share one transaction, so the
    stored likes_count always matches the likes table at commit.

    Returns:
        (is_liked, likes_count) after the toggle
    """
    _require_post(db, post_id)
    if delete_if_present(db, Like, post_id=post_id, user_id=user_id):
        is_liked = False
    else:
        insert_if_absent(db, Like, post_id=post_id, user_id=user_id)
        is_liked = True

    likes_count = refresh_likes_count(db, post_id)
    log.debug("User %s %s post %s", user_id, "liked" if is_liked else "unliked", post_id)
    return is_liked, likes_count


def likers_by_post(db: Session, post_ids: List[int]) -> Dict[int, List[int]]:
    """Batch-load liker ids for several posts, most recent like first."""
    grouped: Dict[int, List[int]] = {pid: [] for pid in post_ids}
    if not post_ids:
        return grouped
    rows = (
        db.query(Like.post_id, Like.user_id)
        .filter(Like.post_id.in_(post_ids))
        .order_by(Like.created_at.desc(), Like.id.desc())
        .all()
    )
    for post_id, user_id in rows:
        grouped[post_id].append(user_id)
    return grouped
