import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from filevault.exceptions import Conflict, StorageError
from filevault.models.user import User

log = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def save(self, user: User) -> User:
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            # lost a race against a concurrent signup with the same name
            await self.session.rollback()
            raise Conflict("Username or email is already in use") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.exception("Failed to save user")
            raise StorageError("Failed to save user") from e
        await self.session.refresh(user)
        return user
