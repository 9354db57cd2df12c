"""
Unique-pair membership helpers (likes, follows) and post counter upkeep.

Inserts go through the dialect's ON CONFLICT DO NOTHING so a duplicate
request racing this one cannot create a second row or fail the request;
the unique constraint is the only guard.
"""

from typing import Type

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.models import Base, Comment, Like, Post

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_if_absent(db: Session, model: Type[Base], **values) -> bool:
    """Insert one membership row. Returns True if a row was created."""
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    if insert is None:
        exists = db.query(model.id).filter_by(**values).first()
        if exists:
            return False
        db.add(model(**values))
        db.flush()
        return True

    stmt = insert(model).values(**values).on_conflict_do_nothing(index_elements=list(values))
    result = db.execute(stmt)
    return result.rowcount > 0


def delete_if_present(db: Session, model: Type[Base], **values) -> bool:
    """Delete one membership row. Returns True if a row was removed."""
    deleted = db.query(model).filter_by(**values).delete(synchronize_session=False)
    return deleted > 0


def refresh_likes_count(db: Session, post_id: int) -> int:
    """Recount likes for a post inside the caller's transaction."""
    db.flush()
    count = db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar()
    db.query(Post).filter(Post.id == post_id).update(
        {Post.likes_count: count}, synchronize_session="evaluate"
    )
    return count


def refresh_comments_count(db: Session, post_id: int) -> int:
    """Recount comments for a post inside the caller's transaction."""
    db.flush()
    count = db.query(func.count(Comment.id)).filter(Comment.post_id == post_id).scalar()
    db.query(Post).filter(Post.id == post_id).update(
        {Post.comments_count: count}, synchronize_session="evaluate"
    )
    return count
