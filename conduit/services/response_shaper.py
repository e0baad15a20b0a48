"""
Response shaping — turns ORM rows into the plain dicts returned to the
HTTP boundary.

Every shaper drops internal keys (primary keys of the article, the
author's ``id``/``email``/``password``) and adds the derived,
viewer-relative fields (``favorited``, ``favoritesCount``,
``following``).  Relationships are expected to be eager-loaded by the
caller; with ``lazy="noload"`` an unloaded relation would simply read as
empty.
"""
from datetime import datetime

from conduit.models import Article, Comment, User


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def shape_profile(user: User, following: bool = False) -> dict:
    """Public view of a user: no id, email or password."""
    return {
        "username": user.username,
        "bio": user.bio,
        "image": user.image,
        "following": following,
    }


def shape_user(user: User) -> dict:
    """The caller's own account view; includes email, never the password."""
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "bio": user.bio,
        "image": user.image,
    }


def shape_article(
    article: Article,
    favorites_count: int = 0,
    favorited: bool = False,
    following: bool = False,
) -> dict:
    """
    Shape *article* for the boundary.

    ``tagList`` keeps the stored tag order.  *favorited* and *following*
    are relative to the viewer and are always ``False`` for anonymous
    callers.
    """
    return {
        "slug": article.slug,
        "title": article.title,
        "description": article.description,
        "body": article.body,
        "tagList": [t.name for t in article.tags],
        "createdAt": _iso(article.created_at),
        "updatedAt": _iso(article.updated_at),
        "favorited": favorited,
        "favoritesCount": favorites_count,
        "author": shape_profile(article.author, following) if article.author else None,
    }


def shape_comment(comment: Comment, following: bool = False) -> dict:
    """Comment with its author limited to id, username, bio and image."""
    author = comment.author
    return {
        "id": comment.id,
        "body": comment.body,
        "createdAt": _iso(comment.created_at),
        "updatedAt": _iso(comment.updated_at),
        "author": {
            "id": author.id,
            "username": author.username,
            "bio": author.bio,
            "image": author.image,
            "following": following,
        },
    }
