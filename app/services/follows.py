# app/services/follows.py
"""Directed follow edges between users."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.models import Follow, User
from app.services.errors import NotFoundError, ValidationError
from app.services.membership import delete_if_present, insert_if_absent
from app.services.users import user_summary

log = logging.getLogger(__name__)


def _check_edge(db: Session, follower_id: int, following_id: int) -> None:
    if follower_id == following_id:
        raise ValidationError("Cannot follow yourself")
    if db.get(User, following_id) is None:
        raise NotFoundError("User not found")


def is_following(db: Session, follower_id: int, following_id: int) -> bool:
    edge = (
        db.query(Follow.id)
        .filter(Follow.follower_id == follower_id, Follow.following_id == following_id)
        .first()
    )
    return edge is not None


def follow_user(db: Session, follower_id: int, following_id: int) -> bool:
    """Idempotent follow. Returns True if a new edge was created."""
    _check_edge(db, follower_id, following_id)
    created = insert_if_absent(db, Follow, follower_id=follower_id, following_id=following_id)
    if created:
        log.info("User %s followed %s", follower_id, following_id)
    return created


def unfollow_user(db: Session, follower_id: int, following_id: int) -> bool:
    """Idempotent unfollow. Returns True if an edge was removed."""
    removed = delete_if_present(db, Follow, follower_id=follower_id, following_id=following_id)
    if removed:
        log.info("User %s unfollowed %s", follower_id, following_id)
    return removed


def toggle_follow(db: Session, follower_id: int, following_id: int) -> bool:
    """
    Flip the follow edge and return the new state.

    Raises:
        ValidationError: follower and target are the same user
        NotFoundError: target user does not exist
    """
    _check_edge(db, follower_id, following_id)
    if unfollow_user(db, follower_id, following_id):
        return False
    follow_user(db, follower_id, following_id)
    return True


def get_followers(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Users following ``user_id``, most recent first."""
    users = (
        db.query(User)
        .join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
        .all()
    )
    return [user_summary(u) for u in users]


def get_following(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Users that ``user_id`` follows, most recent first."""
    users = (
        db.query(User)
        .join(Follow, Follow.following_id == User.id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
        .all()
    )
    return [user_summary(u) for u in users]
