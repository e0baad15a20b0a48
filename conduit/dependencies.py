from fastapi import Header, HTTPException, Query

from conduit.config import settings


def _parse_int(raw: str | None, default: int, minimum: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


class PaginationParams:
    """
    Reusable FastAPI dependency that parses ``limit`` / ``offset`` query
    parameters.

    Usage in a router::

        @router.get("/articles")
        async def list_articles(pagination: PaginationParams = Depends()):
            ...

    Attributes
    ----------
    limit:
        Maximum number of items returned, clamped to
        ``settings.MAX_PAGE_SIZE``.
    offset:
        Number of items skipped.

    Non-numeric or negative values fall back to the defaults instead of
    producing a 422.  A ``limit`` of 0 also means the default page size.
    """

    def __init__(
        self,
        limit: str | None = Query(None, description="Page size (default 20, max 100)."),
        offset: str | None = Query(None, description="Number of items to skip."),
    ) -> None:
        self.limit = min(
            _parse_int(limit, settings.DEFAULT_PAGE_SIZE, minimum=1),
            settings.MAX_PAGE_SIZE,
        )
        self.offset = _parse_int(offset, 0, minimum=0)


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------
# Token validation happens upstream; the gateway forwards the authenticated
# user id in ``X-User-Id``.

def get_viewer_id(x_user_id: str | None = Header(None)) -> int | None:
    """Viewer id for read endpoints; ``None`` for anonymous callers."""
    if x_user_id is None:
        return None
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid X-User-Id header")


def require_viewer_id(x_user_id: str | None = Header(None)) -> int:
    """Viewer id for write endpoints; 401 when the caller is anonymous."""
    viewer_id = get_viewer_id(x_user_id)
    if viewer_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return viewer_id
