"""
Profile service — public user profiles and the follow relation.

``followed_ids`` is also the single place the article and comment
services ask "does the viewer follow these authors?", so the rule for
anonymous viewers (never following anyone) lives here.
"""
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.exceptions import NotFoundError
from conduit.models import User, follows
from conduit.services.response_shaper import shape_profile
from conduit.services.user_service import require_user

logger = logging.getLogger(__name__)


async def followed_ids(
    db: AsyncSession, viewer_id: int | None, candidate_ids: list[int] | set[int]
) -> set[int]:
    """Return the subset of *candidate_ids* that *viewer_id* follows."""
    if viewer_id is None or not candidate_ids:
        return set()
    q = select(follows.c.followed_id).where(
        follows.c.follower_id == viewer_id,
        follows.c.followed_id.in_(set(candidate_ids)),
    )
    result = await db.execute(q)
    return set(result.scalars().all())


async def _get_user_by_username(db: AsyncSession, username: str) -> User:
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("Profile", username)
    return user


async def get_profile(db: AsyncSession, viewer_id: int | None, username: str) -> dict:
    user = await _get_user_by_username(db, username)
    following = user.id in await followed_ids(db, viewer_id, [user.id])
    return shape_profile(user, following)


async def follow_user(db: AsyncSession, viewer_id: int, username: str) -> dict:
    """
    Make *viewer_id* follow *username*.  Following twice is a no-op.
    Self-follows are not rejected.
    """
    await require_user(db, viewer_id)
    target = await _get_user_by_username(db, username)

    if target.id not in await followed_ids(db, viewer_id, [target.id]):
        await db.execute(insert(follows).values(follower_id=viewer_id, followed_id=target.id))
        logger.info("User %s now follows %s", viewer_id, username)
    return shape_profile(target, following=True)


async def unfollow_user(db: AsyncSession, viewer_id: int, username: str) -> dict:
    """Remove the follow edge, if any; unfollowing a stranger is a no-op."""
    await require_user(db, viewer_id)
    target = await _get_user_by_username(db, username)

    result = await db.execute(
        delete(follows).where(
            follows.c.follower_id == viewer_id,
            follows.c.followed_id == target.id,
        )
    )
    if result.rowcount:
        logger.info("User %s unfollowed %s", viewer_id, username)
    return shape_profile(target, following=False)
