from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from conduit.database import get_db
from conduit.dependencies import get_viewer_id, require_viewer_id
from conduit.schemas import ProfileResponse
from conduit.services import profile_service

router = APIRouter(prefix="/api/profiles", tags=["profiles"])

@router.get("/{username}", response_model=dict[str, ProfileResponse])
async def get_profile(
    username: str,
    viewer_id: int | None = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"profile": await profile_service.get_profile(db, viewer_id, username)}

@router.post("/{username}/follow", response_model=dict[str, ProfileResponse])
async def follow_user(
    username: str,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"profile": await profile_service.follow_user(db, viewer_id, username)}

@router.delete("/{username}/follow", response_model=dict[str, ProfileResponse])
async def unfollow_user(
    username: str,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return {"profile": await profile_service.unfollow_user(db, viewer_id, username)}
