"""User API routes."""
from fastapi import APIRouter, status

from sprintboard.auth.deps import CurrentUser, DbSession
from sprintboard.schemas.auth import PasswordChange, UserResponse, UserUpdate
from sprintboard.services import auth_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    return auth_service.user_to_response(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(data: UserUpdate, db: DbSession, user: CurrentUser):
    updated = await auth_service.update_user(db, user, data)
    return auth_service.user_to_response(updated)


@router.patch("/me/password")
async def change_password(data: PasswordChange, db: DbSession, user: CurrentUser):
    await auth_service.change_password(db, user, data)
    return {"success": True}


@router.get("", response_model=list[UserResponse])
async def search_users(db: DbSession, user: CurrentUser, email: str | None = None):
    """Look up users by email substring, used when adding project members."""
    users = await auth_service.search_users(db, email)
    return [auth_service.user_to_response(u) for u in users]


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: DbSession, user: CurrentUser):
    await auth_service.delete_user(db, user, user_id)
