# app/services/users.py
"""Account, profile and search operations."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import PASSWORD_MIN_LENGTH
from app.models import Comment, Follow, Like, Post, User
from app.security import hash_password, verify_password
from app.services.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.services.membership import refresh_comments_count, refresh_likes_count
from app.services.pagination import clamp_pagination

log = logging.getLogger(__name__)

PROFILE_FIELDS = ("full_name", "bio", "avatar", "cover_photo", "location", "website")


def user_summary(user: User) -> Dict[str, Any]:
    """Lightweight author/follower representation embedded in other records."""
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "avatar": user.avatar,
    }


def user_to_dict(user: User, include_email: bool = False) -> Dict[str, Any]:
    data = {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "bio": user.bio,
        "avatar": user.avatar,
        "cover_photo": user.cover_photo,
        "location": user.location,
        "website": user.website,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
    if include_email:
        data["email"] = user.email
    return data


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _existing_conflict(db: Session, username: str, email: str) -> Optional[str]:
    if db.query(User.id).filter(User.email == email).first():
        return "User with this email already exists"
    if db.query(User.id).filter(User.username == username).first():
        return "Username already taken"
    return None


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    full_name: Optional[str] = None,
) -> User:
    """
    Register a new account.

    Raises:
        ValidationError: missing fields or password too short
        ConflictError: username or email already registered
    """
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username or not email or not password:
        raise ValidationError("Username, email, and password are required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    conflict = _existing_conflict(db, username, email)
    if conflict:
        raise ConflictError(conflict)

    user = User(
        username=username,
        email=email,
        password=hash_password(password),
        full_name=full_name,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as e:
        # lost a race with a concurrent registration; the caller's unit of work rolls back
        if "email" in str(e.orig):
            raise ConflictError("User with this email already exists")
        raise ConflictError("Username already taken")

    log.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    email = (email or "").strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password or "", user.password):
        log.warning("Failed login attempt for %s", email)
        raise AuthenticationError("Invalid email or password")
    return user


def get_follow_counts(db: Session, user_id: int) -> Dict[str, int]:
    followers = db.query(func.count(Follow.id)).filter(Follow.following_id == user_id).scalar()
    following = db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar()
    return {"followers": followers, "following": following}


def get_user_profile(db: Session, user_id: int, include_email: bool = False) -> Dict[str, Any]:
    """Profile with follower/following/post counts computed on read."""
    user = get_user(db, user_id)
    counts = get_follow_counts(db, user_id)
    profile = user_to_dict(user, include_email=include_email)
    profile["followers_count"] = counts["followers"]
    profile["following_count"] = counts["following"]
    profile["posts_count"] = db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar()
    return profile


def update_profile(db: Session, user_id: int, **fields: Any) -> User:
    """Update only the profile fields that were supplied (None means unchanged)."""
    user = get_user(db, user_id)
    changed = False
    for name in PROFILE_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(user, name, value)
            changed = True
    if changed:
        user.updated_at = datetime.utcnow()
        db.flush()
    return user


def delete_user(db: Session, user_id: int) -> None:
    """
    Delete an account and everything it owns.

    Likes and comments the user left on other people's posts disappear
    with the account, so those posts' counters are recounted in the same
    transaction.
    """
    user = get_user(db, user_id)
    liked_posts = {pid for (pid,) in db.query(Like.post_id).filter(Like.user_id == user_id)}
    commented_posts = {pid for (pid,) in db.query(Comment.post_id).filter(Comment.user_id == user_id)}
    own_posts = {pid for (pid,) in db.query(Post.id).filter(Post.user_id == user_id)}

    db.delete(user)
    db.flush()

    for post_id in liked_posts - own_posts:
        refresh_likes_count(db, post_id)
    for post_id in commented_posts - own_posts:
        refresh_comments_count(db, post_id)
    log.info("Deleted user id=%s", user_id)


def search_users(db: Session, query: str, limit: Any = 10) -> List[Dict[str, Any]]:
    query = (query or "").strip()
    if not query:
        return []
    limit, _ = clamp_pagination(limit, 0, default_limit=10)
    term = f"%{query}%"
    users = (
        db.query(User)
        .filter(or_(User.username.ilike(term), User.full_name.ilike(term)))
        .order_by(User.username.asc())
        .limit(limit)
        .all()
    )
    return [dict(user_summary(u), bio=u.bio) for u in users]


def get_user_stats(db: Session, user_id: int) -> Dict[str, int]:
    get_user(db, user_id)
    posts = db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar()
    likes_received = (
        db.query(func.count(Like.id))
        .join(Post, Like.post_id == Post.id)
        .filter(Post.user_id == user_id)
        .scalar()
    )
    counts = get_follow_counts(db, user_id)
    return {
        "posts": posts,
        "likes_received": likes_received,
        "followers": counts["followers"],
        "following": counts["following"],
    }
