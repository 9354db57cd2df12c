from __future__ import annotations
import random
from datetime import datetime, timedelta
from typing import Sequence
from faker import Faker
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import User, Post, Comment, Like, Follow
from app.security import hash_password

SEED = 1337
DEMO_PASSWORD = "password123"

fake = Faker()


def seed_random_generators(seed: int = SEED) -> None:
    """Make seeded data reproducible across runs."""
    random.seed(seed)
    Faker.seed(seed)
    fake.seed_instance(seed)
    fake.unique.clear()


def make_users(db: Session, n_users: int) -> list[User]:
    # one bcrypt hash shared by every demo account; hashing per user is slow
    password = hash_password(DEMO_PASSWORD)
    users = []
    for _ in range(n_users):
        username = fake.unique.user_name()[:50]
        users.append(User(
            username=username,
            email=f"{username}@{fake.free_email_domain()}",
            password=password,
            full_name=fake.name(),
            bio=fake.sentence(nb_words=10),
            location=fake.city(),
        ))
    db.add_all(users); db.flush()
    return users


def make_follows(db: Session, users: Sequence[User], max_following: int = 15) -> int:
    """Each user follows a random handful of others (never themselves)."""
    n = 0
    for u in users:
        others = [o for o in users if o.id != u.id]
        k = random.randint(0, min(max_following, len(others)))
        for target in random.sample(others, k):
            db.add(Follow(follower_id=u.id, following_id=target.id))
            n += 1
    db.flush()
    return n


def make_posts(db: Session, users: Sequence[User], n_posts: int) -> list[Post]:
    posts: list[Post] = []
    for _ in range(n_posts):
        u = random.choice(users)
        created = fake.date_time_between(start_date="-60d", end_date="now")
        content = fake.sentence(nb_words=random.randint(8, 20))[:500]
        p = Post(user_id=u.id, content=content, created_at=created, updated_at=created)
        db.add(p); posts.append(p)
    db.flush()
    return posts


def make_likes(db: Session, posts: Sequence[Post], users: Sequence[User], max_likes: int = 25):
    now = datetime.utcnow()
    for p in posts:
        k = random.randint(0, min(max_likes, len(users)))
        for u in random.sample(list(users), k):
            when = min(p.created_at + timedelta(minutes=random.randint(0, 1000)), now)
            db.add(Like(post_id=p.id, user_id=u.id, created_at=when))
    db.flush()


def make_comments(db: Session, posts: Sequence[Post], users: Sequence[User],
                  frac_with_comments=0.6, max_comments=5):
    for p in posts:
        if random.random() >= frac_with_comments:
            continue
        for _ in range(random.randint(1, max_comments)):
            u = random.choice(users)
            db.add(Comment(
                post_id=p.id, user_id=u.id,
                content=fake.sentence()[:200],
                created_at=p.created_at + timedelta(minutes=random.randint(1, 600)),
            ))
    db.flush()


def refresh_all_counters(db: Session) -> None:
    """Bring every post's likes_count/comments_count in line with the tables."""
    likes = select(func.count(Like.id)).where(Like.post_id == Post.id).scalar_subquery()
    comments = select(func.count(Comment.id)).where(Comment.post_id == Post.id).scalar_subquery()
    db.query(Post).update(
        {Post.likes_count: likes, Post.comments_count: comments},
        synchronize_session=False,
    )
    db.flush()
