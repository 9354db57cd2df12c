"""
FastAPI routes for profiles, search and the follow graph.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.config import MAX_SQL_INTEGER
from app.db import get_db
from app.schemas import (
    FollowResponse,
    FollowStatus,
    MessageResponse,
    ProfileOut,
    ProfileResponse,
    ProfileUpdate,
    UserSearchResult,
    UserStats,
    UserSummary,
)
from app.security import get_current_user_id
from app.services import follows, users

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile/{user_id}", response_model=ProfileOut)
def get_profile(user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER), db: Session = Depends(get_db)):
    """Public profile with follower, following and post counts (no email)."""
    return users.get_user_profile(db, user_id)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    user = users.update_profile(db, user_id, **payload.model_dump(exclude_unset=True))
    return {"message": "Profile updated successfully", "user": users.user_to_dict(user, include_email=True)}


@router.delete("/me", response_model=MessageResponse)
def delete_account(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Delete the caller's account with all posts, comments, likes and follows."""
    users.delete_user(db, user_id)
    return {"message": "Account deleted successfully"}


@router.get("/search", response_model=List[UserSearchResult])
def search(
    q: str = Query("", description="Matches username or full name"),
    limit: Optional[str] = Query(None, description="Maximum results (1-100)"),
    db: Session = Depends(get_db),
):
    return users.search_users(db, q, limit=limit)


@router.get("/stats/{user_id}", response_model=UserStats)
def stats(user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER), db: Session = Depends(get_db)):
    return users.get_user_stats(db, user_id)


@router.post("/follow/{user_id}", response_model=FollowResponse)
def toggle_follow(
    user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    follower_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Follow the user if not yet following, otherwise unfollow. Self-follow is a 400."""
    is_following = follows.toggle_follow(db, follower_id, user_id)
    return {
        "message": "Followed successfully" if is_following else "Unfollowed successfully",
        "is_following": is_following,
    }


@router.get("/followers/{user_id}", response_model=List[UserSummary])
def get_followers(user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER), db: Session = Depends(get_db)):
    return follows.get_followers(db, user_id)


@router.get("/following/{user_id}", response_model=List[UserSummary])
def get_following(user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER), db: Session = Depends(get_db)):
    return follows.get_following(db, user_id)


@router.get("/is-following/{user_id}", response_model=FollowStatus)
def check_following(
    user_id: int = Path(..., ge=1, le=MAX_SQL_INTEGER),
    follower_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"is_following": follows.is_following(db, follower_id, user_id)}
