"""
Article service — business logic for the Article aggregate.

Design notes
------------
- Relationships are ``lazy="noload"``; every read eager-loads exactly
  what the shaper needs (``joinedload`` for the author, ``selectinload``
  for tags).  ``unique()`` is required after a ``joinedload`` query.
- Favorite counts, the viewer's favorites and the viewer's follows are
  fetched with one aggregate query each per page, never per row.
- Ownership is checked before any mutation; a mismatch raises
  ``UnauthorizedError`` rather than pretending the article is missing.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging
import re
import unicodedata

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from conduit.config import settings
from conduit.exceptions import NotFoundError, UnauthorizedError
from conduit.models import Article, Tag, User, favorites, follows
from conduit.schemas import ArticleCreate, ArticleUpdate
from conduit.services.profile_service import followed_ids
from conduit.services.response_shaper import shape_article
from conduit.services.tag_service import resolve_tags
from conduit.services.user_service import require_user

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_SPACE_RE = re.compile(r"[\s_]+")
_SLUG_DASH_RE = re.compile(r"-+")

# Slugs that would be shadowed by fixed routes under /api/articles.
RESERVED_SLUGS = frozenset({"feed"})


def slugify(text: str) -> str:
    """Return a URL-safe, lowercase ASCII slug derived from *text*."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = _SLUG_STRIP_RE.sub("", text.lower().strip())
    text = _SLUG_SPACE_RE.sub("-", text)
    return _SLUG_DASH_RE.sub("-", text).strip("-")


async def _unique_slug(db: AsyncSession, title: str, exclude_id: int | None = None) -> str:
    """
    Slugify *title* and append ``-2``, ``-3``, ... until no other article
    uses it.  *exclude_id* lets an article keep its own slug on update.
    A slug in ``RESERVED_SLUGS`` is never returned.
    """
    base = slugify(title) or "article"
    slug = base
    suffix = 1
    while True:
        q = select(Article.id).where(Article.slug == slug)
        if exclude_id is not None:
            q = q.where(Article.id != exclude_id)
        if slug not in RESERVED_SLUGS and (await db.execute(q)).first() is None:
            return slug
        suffix += 1
        slug = f"{base}-{suffix}"


def _with_relations(q):
    return q.options(joinedload(Article.author), selectinload(Article.tags))


async def load_article(db: AsyncSession, slug: str) -> Article:
    """Return the article for *slug* with author and tags loaded."""
    result = await db.execute(_with_relations(select(Article).where(Article.slug == slug)))
    article = result.unique().scalar_one_or_none()
    if article is None:
        raise NotFoundError("Article", slug)
    return article


async def shape_articles(
    db: AsyncSession, viewer_id: int | None, articles: list[Article]
) -> list[dict]:
    """Shape *articles* with favorite counts and viewer-relative flags."""
    if not articles:
        return []
    ids = [a.id for a in articles]

    count_q = (
        select(favorites.c.article_id, func.count())
        .where(favorites.c.article_id.in_(ids))
        .group_by(favorites.c.article_id)
    )
    counts = dict((await db.execute(count_q)).all())

    favorited: set[int] = set()
    if viewer_id is not None:
        fav_q = select(favorites.c.article_id).where(
            favorites.c.user_id == viewer_id,
            favorites.c.article_id.in_(ids),
        )
        favorited = set((await db.execute(fav_q)).scalars().all())

    following = await followed_ids(db, viewer_id, {a.user_id for a in articles})

    return [
        shape_article(
            a,
            favorites_count=counts.get(a.id, 0),
            favorited=a.id in favorited,
            following=a.user_id in following,
        )
        for a in articles
    ]


async def _page(
    db: AsyncSession,
    viewer_id: int | None,
    conditions: list,
    limit: int,
    offset: int,
) -> dict:
    """Run the count + page query pair shared by the feed and the listing."""
    count_q = select(func.count()).select_from(Article).where(*conditions)
    total: int = (await db.execute(count_q)).scalar_one()

    limit = min(limit, settings.MAX_PAGE_SIZE)
    articles_q = _with_relations(
        select(Article)
        .where(*conditions)
        .order_by(Article.created_at.desc(), Article.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(articles_q)
    articles = list(result.unique().scalars().all())

    return {
        "articles": await shape_articles(db, viewer_id, articles),
        "articlesCount": total,
    }


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def feed_articles(
    db: AsyncSession,
    viewer_id: int,
    limit: int = 20,
    offset: int = 0,
) -> dict:
    """
    Articles written by users *viewer_id* follows directly, newest first.
    """
    await require_user(db, viewer_id)

    followed = select(follows.c.followed_id).where(follows.c.follower_id == viewer_id)
    return await _page(db, viewer_id, [Article.user_id.in_(followed)], limit, offset)


async def list_articles(
    db: AsyncSession,
    viewer_id: int | None = None,
    tag: str | None = None,
    author: str | None = None,
    favorited: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> dict:
    """
    List articles matching every supplied filter, newest first.

    - *tag*: articles carrying a tag with exactly that name.
    - *author*: articles whose author has that username.
    - *favorited*: articles in that user's favorites.

    Filters that name an unknown user or tag simply match nothing.
    """
    conditions = []
    if tag:
        conditions.append(Article.tags.any(Tag.name == tag))
    if author:
        conditions.append(Article.author.has(User.username == author))
    if favorited:
        favorited_by = (
            select(favorites.c.article_id)
            .join(User, User.id == favorites.c.user_id)
            .where(User.username == favorited)
        )
        conditions.append(Article.id.in_(favorited_by))

    return await _page(db, viewer_id, conditions, limit, offset)


async def get_article(db: AsyncSession, viewer_id: int | None, slug: str) -> dict:
    article = await load_article(db, slug)
    return (await shape_articles(db, viewer_id, [article]))[0]


async def create_article(db: AsyncSession, author_id: int, data: ArticleCreate) -> dict:
    """
    Create an article owned by *author_id* and return it shaped.

    Tags are resolved by name (existing ones reused, new ones inserted
    with the article).  Identical titles get a numbered slug suffix.
    """
    author = await require_user(db, author_id)

    article = Article(
        slug=await _unique_slug(db, data.title),
        title=data.title,
        description=data.description,
        body=data.body,
        user_id=author.id,
        author=author,
        tags=await resolve_tags(db, data.tags),
    )
    db.add(article)
    await db.flush()

    logger.info("Article %r created by user %s", article.slug, author_id)
    return (await shape_articles(db, author_id, [article]))[0]


async def update_article(
    db: AsyncSession, actor_id: int, slug: str, data: ArticleUpdate
) -> dict:
    """
    Partially update the article at *slug*.

    Only fields explicitly set (and not null) in *data* change.  A new
    title re-derives the slug; a ``tags`` list replaces the whole tag set.
    """
    article = await load_article(db, slug)
    if article.user_id != actor_id:
        logger.warning("User %s denied update of article %r", actor_id, slug)
        raise UnauthorizedError("update this article")

    update_data = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    tag_names: list[str] | None = update_data.pop("tags", None)

    for field, value in update_data.items():
        setattr(article, field, value)

    if "title" in update_data:
        article.slug = await _unique_slug(db, update_data["title"], exclude_id=article.id)

    if tag_names is not None:
        article.tags = await resolve_tags(db, tag_names)

    await db.flush()
    logger.info("Article %r updated by user %s", article.slug, actor_id)
    return (await shape_articles(db, actor_id, [article]))[0]


async def delete_article(db: AsyncSession, actor_id: int, slug: str) -> None:
    """
    Delete the article at *slug*.  Its comments, favorites and tag links
    go with it through ``ON DELETE CASCADE``.
    """
    article = await load_article(db, slug)
    if article.user_id != actor_id:
        logger.warning("User %s denied delete of article %r", actor_id, slug)
        raise UnauthorizedError("delete this article")

    await db.delete(article)
    await db.flush()
    logger.info("Article %r deleted by user %s", slug, actor_id)
