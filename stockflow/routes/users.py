"""User management routes (admin only)."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stockflow.auth import require_admin
from stockflow.database import get_db
from stockflow.models.user import User
from stockflow.schemas.user import UserActiveUpdate, UserCreate, UserResponse
from stockflow.services import users as user_service

router = APIRouter(prefix="/admin/users", tags=["Admin: Users"])


@router.get("/", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """List all users."""
    return user_service.list_users(db)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a new user."""
    return user_service.create_user(db, user_data)


@router.put("/{user_id}/toggle-active", response_model=UserResponse)
async def set_user_active(
    user_id: str,
    update: UserActiveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Activate or deactivate a user."""
    return user_service.set_user_active(db, user_id, update.is_active)
