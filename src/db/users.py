from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from . import User


@dataclass(slots=True)
class UserProfile:
    """Planning-relevant view of a user."""

    user_id: int
    daily_study_minutes: Optional[int]


async def create_user(
    session: AsyncSession,
    name: Optional[str] = None,
    daily_study_minutes: Optional[int] = None,
) -> User:
    """Insert a new user and flush to obtain its identifier."""
    user = User(name=name, daily_study_minutes=daily_study_minutes)
    session.add(user)
    await session.flush()
    return user


async def get_user_profile(session: AsyncSession, user_id: int) -> Optional[UserProfile]:
    """Return the planning profile of a user, if present."""
    user = await session.get(User, user_id)
    if user is None:
        return None
    return UserProfile(user_id=user.id, daily_study_minutes=user.daily_study_minutes)
