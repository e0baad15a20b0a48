"""
Tag service — name-to-record resolution and the global tag list.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import Tag


async def resolve_tags(db: AsyncSession, tag_names: list[str]) -> list[Tag]:
    """
    Return a Tag for each distinct name in *tag_names*, in order of first
    occurrence.  Names are stripped; blank ones are dropped.

    Existing tags are reused by exact name.  Missing ones are returned as
    new, unsaved ``Tag`` instances; they are inserted when the owning
    article is flushed (save-update cascade on ``Article.tags``), so a
    repeated name never yields two records.
    """
    unique_names = list(dict.fromkeys(
        stripped for stripped in (name.strip() for name in tag_names) if stripped
    ))
    if not unique_names:
        return []

    result = await db.execute(select(Tag).where(Tag.name.in_(unique_names)))
    existing = {tag.name: tag for tag in result.scalars().all()}

    return [existing.get(name) or Tag(name=name) for name in unique_names]


async def get_tags(db: AsyncSession) -> list[str]:
    """Return every tag name, alphabetically."""
    result = await db.execute(select(Tag.name).order_by(Tag.name))
    return list(result.scalars().all())
