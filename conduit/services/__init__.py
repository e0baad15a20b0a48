# Services package.
#
# Each module exposes a focused set of async functions for one concern:
#
#   article_service   — feed, filtered listing, article CRUD
#   comment_service   — comments scoped to an article
#   favorite_service  — favorite / unfavorite
#   profile_service   — public profiles and follows
#   tag_service       — tag resolution and the tag list
#   user_service      — the caller's own account record
#   response_shaper   — ORM row -> response dict
#
# Every service function takes an AsyncSession first so the router layer
# owns the transaction via ``get_db``, and raises ``conduit.exceptions``
# errors instead of returning None.
