"""Seed the Conduit database with users, follows, articles, comments and favorites."""
import asyncio
import argparse
import logging
import random
import time
from datetime import datetime, timezone, timedelta
from sqlalchemy import insert
from conduit.database import engine, async_session, Base
from conduit.models import User, Article, Comment, Tag, favorites, follows
from conduit.services.article_service import slugify

logger = logging.getLogger("conduit.seed")

TAGS = ["python", "fastapi", "postgresql", "docker", "kubernetes",
        "react", "typescript", "devops", "testing", "security",
        "graphql", "rest-api"]

async def seed(small: bool = False):
    num_users = 10 if small else 50
    num_articles = 100 if small else 5000
    max_comments = 2 if small else 5

    logger.info("Seeding: %d users, %d articles", num_users, num_articles)
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        tags = [Tag(name=name) for name in TAGS]
        session.add_all(tags)

        users = [
            User(
                username=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                bio=f"I am test user number {i}. I write about technology.",
            )
            for i in range(num_users)
        ]
        session.add_all(users)
        await session.flush()

        # Each user follows a handful of others.
        follow_rows = {
            (u.id, other.id)
            for u in users
            for other in random.sample(users, k=min(5, num_users))
            if other.id != u.id
        }
        await session.execute(
            insert(follows),
            [{"follower_id": a, "followed_id": b} for a, b in follow_rows],
        )
        logger.info("Created %d tags, %d users, %d follows", len(tags), len(users), len(follow_rows))

        articles = []
        for i in range(num_articles):
            created = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 365))
            title = f"Article {i}: shipping {random.choice(TAGS)} to production"
            article = Article(
                slug=slugify(title),
                title=title,
                description=f"Notes on running {random.choice(TAGS)} in production.",
                body=f"This is the full body of article {i}. " * 20,
                created_at=created,
                user_id=random.choice(users).id,
                tags=random.sample(tags, k=random.randint(1, 4)),
            )
            articles.append(article)
        session.add_all(articles)
        await session.flush()

        total_comments = 0
        for article in articles:
            for _ in range(random.randint(0, max_comments)):
                session.add(Comment(
                    body="Great article! Very helpful.",
                    author_id=random.choice(users).id,
                    article_id=article.id,
                ))
                total_comments += 1

        favorite_rows = {
            (random.choice(users).id, random.choice(articles).id)
            for _ in range(num_articles * 2)
        }
        await session.execute(
            insert(favorites),
            [{"user_id": u, "article_id": a} for u, a in favorite_rows],
        )
        await session.commit()

    logger.info(
        "Seeding complete in %.1fs: %d articles, %d comments, %d favorites",
        time.perf_counter() - start, num_articles, total_comments, len(favorite_rows),
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the Conduit database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (100 articles)")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
