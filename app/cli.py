# app/cli.py
from typing import Optional

import typer

from app.db import get_session, init_db
from app.services import seeder
from app.services.errors import SocialError
from app.services.posts import get_feed
from app.services.users import get_user_stats

app = typer.Typer(help="Social network CLI with subcommands")


@app.command("init-db")
def init_db_cmd():
    """Create database tables if they do not exist."""
    init_db()
    typer.echo("Database initialized")


@app.command("seed")
def seed_cmd(
    users: int = typer.Option(100, help="Number of users", min=1),
    posts: int = typer.Option(1000, help="Number of posts", min=0),
    seed: int = typer.Option(seeder.SEED, help="Random seed for reproducible data"),
):
    """Populate the database with mock data."""
    seeder.seed_random_generators(seed)
    init_db()

    with get_session() as db:
        us = seeder.make_users(db, users)
        follows = seeder.make_follows(db, us)
        ps = seeder.make_posts(db, us, posts)
        seeder.make_likes(db, ps, us)
        seeder.make_comments(db, ps, us, frac_with_comments=0.6)
        seeder.refresh_all_counters(db)
    typer.echo(f"Seed complete: users={users}, posts={posts}, follows={follows}")
    typer.echo(f"All demo accounts use the password '{seeder.DEMO_PASSWORD}'")


@app.command("feed")
def feed_cmd(
    user: Optional[int] = typer.Option(None, "--user", "-u", help="Viewer ID (omit for the global feed)"),
    limit: int = typer.Option(20, "--limit", "-l", help="Number of posts (1-100)", min=1, max=100),
    offset: int = typer.Option(0, "--offset", "-o", help="Posts to skip", min=0),
):
    """Print a viewer's feed."""
    with get_session() as db:
        posts = get_feed(db, viewer_id=user, limit=limit, offset=offset)

        if not posts:
            typer.echo("No posts found")
            return

        title = f"Feed for user {user}" if user is not None else "Global feed"
        typer.echo(f"\n{title} ({len(posts)} posts):")
        typer.echo("─" * 70)
        for post in posts:
            liked = "♥" if post["is_liked"] else " "
            typer.echo(
                f"{liked} #{post['id']:<6} @{post['user']['username']:<20} "
                f"{post['created_at']:%Y-%m-%d %H:%M}  "
                f"likes={post['likes_count']:<4} comments={post['comments_count']}"
            )
            typer.echo(f"    {post['content'][:64]}")


@app.command("stats")
def stats_cmd(user_id: int = typer.Argument(..., help="User ID", min=1)):
    """Show post, like and follow statistics for a user."""
    try:
        with get_session() as db:
            stats = get_user_stats(db, user_id)
    except SocialError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\n📊 Stats for user {user_id}:")
    typer.echo("─" * 30)
    typer.echo(f"Posts:           {stats['posts']:,}")
    typer.echo(f"Likes received:  {stats['likes_received']:,}")
    typer.echo(f"Followers:       {stats['followers']:,}")
    typer.echo(f"Following:       {stats['following']:,}")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    app()
