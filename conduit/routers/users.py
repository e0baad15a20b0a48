from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from conduit.database import get_db
from conduit.dependencies import require_viewer_id
from conduit.schemas import UserCreate, UserResponse, UserUpdate
from conduit.services import user_service

router = APIRouter(prefix="/api", tags=["users"])

_CONFLICT_DETAIL = "A user with this username or email already exists"

@router.post("/users", status_code=201, response_model=UserResponse)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await user_service.create_user(db, data)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=_CONFLICT_DETAIL)

@router.get("/user", response_model=UserResponse)
async def get_current_user(
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_user(db, viewer_id)

@router.put("/user", response_model=UserResponse)
async def update_current_user(
    data: UserUpdate,
    viewer_id: int = Depends(require_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await user_service.update_user(db, viewer_id, data)
    except IntegrityError:
        raise HTTPException(status_code=409, detail=_CONFLICT_DETAIL)
