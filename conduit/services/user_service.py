"""
User service — account records for the caller.

Password hashing and token issuing belong to the auth collaborator in
front of this API; here a user is just a row with a unique username and
email.  Uniqueness is enforced by the database, and the router maps the
resulting ``IntegrityError`` to 409.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from conduit.exceptions import NotFoundError
from conduit.models import User
from conduit.schemas import UserCreate, UserUpdate
from conduit.services.response_shaper import shape_user

logger = logging.getLogger(__name__)


async def require_user(db: AsyncSession, user_id: int) -> User:
    """Return the User for *user_id* or raise ``NotFoundError``."""
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    user = User(
        username=data.username,
        email=data.email,
        bio=data.bio,
        image=data.image,
    )
    db.add(user)
    await db.flush()
    logger.info("User %r registered with id %s", user.username, user.id)
    return shape_user(user)


async def get_user(db: AsyncSession, user_id: int) -> dict:
    return shape_user(await require_user(db, user_id))


async def update_user(db: AsyncSession, user_id: int, data: UserUpdate) -> dict:
    """Apply the fields explicitly set in *data*; nulls are ignored."""
    user = await require_user(db, user_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, field, value)
    await db.flush()
    return shape_user(user)
