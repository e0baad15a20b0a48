"""
Favorite service — a user's set of bookmarked articles.

Membership is checked before inserting, and ``favorites`` has a composite
primary key, so repeating a favorite never inflates ``favoritesCount``.
"""
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import favorites
from conduit.services.article_service import load_article, shape_articles
from conduit.services.user_service import require_user

logger = logging.getLogger(__name__)


async def favorite_article(db: AsyncSession, user_id: int, slug: str) -> dict:
    """Add the article at *slug* to *user_id*'s favorites (idempotent)."""
    await require_user(db, user_id)
    article = await load_article(db, slug)

    existing = await db.execute(
        select(favorites.c.article_id).where(
            favorites.c.user_id == user_id,
            favorites.c.article_id == article.id,
        )
    )
    if existing.first() is None:
        await db.execute(insert(favorites).values(user_id=user_id, article_id=article.id))
        logger.info("User %s favorited %r", user_id, slug)

    return (await shape_articles(db, user_id, [article]))[0]


async def unfavorite_article(db: AsyncSession, user_id: int, slug: str) -> dict:
    """Remove the article from the user's favorites; no-op if absent."""
    await require_user(db, user_id)
    article = await load_article(db, slug)

    result = await db.execute(
        delete(favorites).where(
            favorites.c.user_id == user_id,
            favorites.c.article_id == article.id,
        )
    )
    if result.rowcount:
        logger.info("User %s unfavorited %r", user_id, slug)

    return (await shape_articles(db, user_id, [article]))[0]
