import logging

from filevault.core.security import hash_password, verify_password
from filevault.exceptions import Conflict, NotFound, Unauthorized
from filevault.models.user import User
from filevault.repositories.users import UserStore

log = logging.getLogger(__name__)


class UserService:
    def __init__(self, users: UserStore):
        self.users = users

    async def register(self, username: str, email: str, password: str) -> User:
        if await self.users.get_by_username(username):
            raise Conflict("Username is already taken")
        if await self.users.get_by_email(email):
            raise Conflict("Email is already in use")

        user = await self.users.save(User(
            username=username,
            email=email,
            hashed_password=hash_password(password),
        ))
        log.info(f"Registered user {user.username} ({user.id})")
        return user

    async def authenticate(self, principal: str, password: str) -> User:
        """Principal is a username, or an email when it contains '@'."""
        if "@" in principal:
            user = await self.users.get_by_email(principal)
        else:
            user = await self.users.get_by_username(principal)

        if not user or not verify_password(password, user.hashed_password):
            raise Unauthorized("Invalid username or password")
        return user

    async def get(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFound(f"User not found with ID: {user_id}")
        return user

    async def update_profile(
            self, user_id: str, username: str | None = None, email: str | None = None,
    ) -> User:
        user = await self.get(user_id)

        if username is not None and username != user.username:
            if await self.users.get_by_username(username):
                raise Conflict("Username is already taken")
            user.username = username
        if email is not None and email != user.email:
            if await self.users.get_by_email(email):
                raise Conflict("Email is already in use")
            user.email = email

        return await self.users.save(user)
