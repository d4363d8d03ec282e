"""Auth API routes."""
from fastapi import APIRouter, HTTPException, status

from sprintboard.auth.deps import DbSession
from sprintboard.auth.tokens import issue_token
from sprintboard.models.user import User
from sprintboard.schemas.auth import Token, UserCreate, UserLogin
from sprintboard.services.auth_service import authenticate_user, create_user, user_to_response

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(user: User) -> Token:
    token, expires_at = issue_token(user.id)
    return Token(access_token=token, expires_at=expires_at, user=user_to_response(user))


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, db: DbSession):
    user = await create_user(db, data)
    return _token_for(user)


@router.post("/login", response_model=Token)
async def login(data: UserLogin, db: DbSession):
    user = await authenticate_user(db, data)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return _token_for(user)
