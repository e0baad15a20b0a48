from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from conduit.database import get_db
from conduit.dependencies import PaginationParams, get_viewer_id, require_viewer_id
from conduit.schemas import ArticleCreate, ArticleUpdate, CommentCreate
from conduit.services import article_service, comment_service, favorite_service

router = APIRouter(prefix="/api/articles", tags=["articles"])

@router.get("")
async def list_articles(
    tag: str | None = None,
    author: str | None = None,
    favorited: str | None = None,
    pagination: PaginationParams = Depends(),
    viewer_id: int | None = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.list_articles(
        db, viewer_id, tag=tag, author=author, favorited=favorited,
        limit=pagination.limit, offset=pagination.offset,
    )

@router.get("/feed")
async def feed_articles(
    pagination: PaginationParams = Depends(),
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await article_service.feed_articles(
        db, viewer_id, limit=pagination.limit, offset=pagination.offset
    )

@router.get("/{slug}")
async def get_article(
    slug: str,
    viewer_id: int | None = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await article_service.get_article(db, viewer_id, slug)}

@router.post("", status_code=201)
async def create_article(
    data: ArticleCreate,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await article_service.create_article(db, viewer_id, data)}

@router.put("/{slug}")
async def update_article(
    slug: str,
    data: ArticleUpdate,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await article_service.update_article(db, viewer_id, slug, data)}

@router.delete("/{slug}", status_code=204)
async def delete_article(
    slug: str,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    await article_service.delete_article(db, viewer_id, slug)

# --- Favorites ---

@router.post("/{slug}/favorite")
async def favorite_article(
    slug: str,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await favorite_service.favorite_article(db, viewer_id, slug)}

@router.delete("/{slug}/favorite")
async def unfavorite_article(
    slug: str,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"article": await favorite_service.unfavorite_article(db, viewer_id, slug)}

# --- Comments ---

@router.get("/{slug}/comments")
async def get_comments(
    slug: str,
    viewer_id: int | None = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"comments": await comment_service.get_comments(db, viewer_id, slug)}

@router.post("/{slug}/comments", status_code=201)
async def add_comment(
    slug: str,
    data: CommentCreate,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"comment": await comment_service.add_comment(db, viewer_id, slug, data)}

@router.delete("/{slug}/comments/{comment_id}", status_code=204)
async def delete_comment(
    slug: str,
    comment_id: int,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete_comment(db, viewer_id, comment_id, slug=slug)
