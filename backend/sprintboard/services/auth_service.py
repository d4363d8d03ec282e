"""Authentication and user account service."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from sprintboard.auth.rbac import can_delete_user
from sprintboard.auth.tokens import hash_password, password_matches
from sprintboard.errors import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from sprintboard.models.project import project_members
from sprintboard.models.user import User
from sprintboard.schemas.auth import PasswordChange, UserCreate, UserLogin, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


async def _email_taken(db: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return (await db.execute(query)).first() is not None


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    if await _email_taken(db, data.email):
        raise ConflictError("Email already registered")
    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        name=data.name,
        last_name=data.last_name,
    )
    db.add(user)
    await db.flush()
    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(db: AsyncSession, data: UserLogin) -> User | None:
    """Authenticate user by email and password."""
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if not user or not password_matches(data.password, user.hashed_password):
        return None
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFoundError("User does not exist")
    return user


async def update_user(db: AsyncSession, user: User, data: UserUpdate) -> User:
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in fields and await _email_taken(db, fields["email"], exclude_id=user.id):
        raise ConflictError("Email already registered")
    for key, value in fields.items():
        setattr(user, key, value)
    await db.flush()
    return user


async def change_password(db: AsyncSession, user: User, data: PasswordChange) -> None:
    if not password_matches(data.old_password, user.hashed_password):
        raise UnauthorizedError("Old password is incorrect")
    user.hashed_password = hash_password(data.new_password)
    await db.flush()


async def search_users(db: AsyncSession, email: str | None) -> list[User]:
    query = select(User).where(User.is_active.is_(True)).order_by(User.email)
    if email:
        query = query.where(User.email.contains(email))
    result = await db.execute(query)
    return list(result.scalars().all())


async def delete_user(db: AsyncSession, actor: User, user_id: int) -> None:
    if not can_delete_user(actor):
        raise ForbiddenError("Only admins can delete users")
    user = await get_user(db, user_id)
    await db.execute(delete(project_members).where(project_members.c.user_id == user.id))
    await db.delete(user)
    await db.flush()
    logger.info("User %s deleted by %s", user_id, actor.id)


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        last_name=user.last_name,
        role=user.role,
        is_active=user.is_active,
    )
