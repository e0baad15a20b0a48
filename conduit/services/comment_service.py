"""
Comment service — comments scoped to an article.

Comments carry their author's public fields plus ``following``, which is
relative to the viewer (always ``False`` for anonymous readers).  Only
the author may delete a comment.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from conduit.exceptions import NotFoundError, UnauthorizedError
from conduit.models import Article, Comment
from conduit.schemas import CommentCreate
from conduit.services.profile_service import followed_ids
from conduit.services.response_shaper import shape_comment
from conduit.services.user_service import require_user

logger = logging.getLogger(__name__)


async def _get_article_id(db: AsyncSession, slug: str) -> int:
    result = await db.execute(select(Article.id).where(Article.slug == slug))
    article_id = result.scalar_one_or_none()
    if article_id is None:
        raise NotFoundError("Article", slug)
    return article_id


async def add_comment(
    db: AsyncSession,
    author_id: int,
    slug: str,
    data: CommentCreate,
) -> dict:
    """Attach a new comment by *author_id* to the article at *slug*."""
    article_id = await _get_article_id(db, slug)
    author = await require_user(db, author_id)

    comment = Comment(
        body=data.body,
        author_id=author.id,
        author=author,
        article_id=article_id,
    )
    db.add(comment)
    await db.flush()

    logger.info("Comment %s added to %r by user %s", comment.id, slug, author_id)
    following = author.id in await followed_ids(db, author_id, [author.id])
    return shape_comment(comment, following)


async def get_comments(db: AsyncSession, viewer_id: int | None, slug: str) -> list[dict]:
    """
    Return every comment on the article at *slug*, oldest first.

    No pagination: comment threads are expected to stay small.
    """
    article_id = await _get_article_id(db, slug)

    q = (
        select(Comment)
        .where(Comment.article_id == article_id)
        .options(joinedload(Comment.author))
        .order_by(Comment.created_at, Comment.id)
    )
    result = await db.execute(q)
    comments = result.unique().scalars().all()

    following = await followed_ids(db, viewer_id, {c.author_id for c in comments})
    return [shape_comment(c, c.author_id in following) for c in comments]


async def delete_comment(
    db: AsyncSession,
    actor_id: int,
    comment_id: int,
    slug: str | None = None,
) -> None:
    """
    Delete comment *comment_id*.

    When *slug* is given the comment must belong to that article,
    otherwise it is reported as not found.
    """
    comment = await db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment", comment_id)
    if slug is not None and comment.article_id != await _get_article_id(db, slug):
        raise NotFoundError("Comment", comment_id)
    if comment.author_id != actor_id:
        logger.warning("User %s denied delete of comment %s", actor_id, comment_id)
        raise UnauthorizedError("delete this comment")

    await db.delete(comment)
    await db.flush()
    logger.info("Comment %s deleted by user %s", comment_id, actor_id)
