"""GraphQL Context - per-request handles shared by every resolver.

Invariants:
    - One DB session per GraphQL request (the same get_db dependency REST uses)
    - The current user is resolved from the tru-user cookie exactly like REST; None when
      anonymous
    - User rows are cached per request so nested AppAccount fields cost one query per address
    - Resolvers run concurrently but share one session: every DB access holds db_lock
"""

import asyncio

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from octopus.api.dependencies import get_chain, get_current_user, get_dispatcher
from octopus.config import Settings, get_settings
from octopus.core.errors import NotAuthenticatedError
from octopus.core.sessions import AuthenticatedUser
from octopus.infrastructure.chain_client import ChainClient
from octopus.infrastructure.database import get_db
from octopus.models.user import User
from octopus.services.notification_dispatcher import NotificationDispatcher
from octopus.services.users import get_user_by_address, translate_to_usernames


class GraphQLContext(BaseContext):
    def __init__(
        self,
        db: AsyncSession,
        chain: ChainClient,
        dispatcher: NotificationDispatcher,
        settings: Settings,
        user: AuthenticatedUser | None,
    ):
        super().__init__()
        self.db = db
        self.chain = chain
        self.dispatcher = dispatcher
        self.settings = settings
        self.user = user
        self.db_lock = asyncio.Lock()
        self._users: dict[str, User | None] = {}

    def require_user(self) -> AuthenticatedUser:
        if self.user is None:
            raise NotAuthenticatedError()
        return self.user

    async def user_by_address(self, address: str) -> User | None:
        async with self.db_lock:
            if address not in self._users:
                self._users[address] = await get_user_by_address(self.db, address)
        return self._users[address]

    async def with_usernames(self, body: str) -> str:
        """body with @address mentions rewritten as @username."""
        async with self.db_lock:
            return await translate_to_usernames(self.db, body)


async def get_context(
    db: AsyncSession = Depends(get_db),
    chain: ChainClient = Depends(get_chain),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_settings),
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> GraphQLContext:
    return GraphQLContext(db, chain, dispatcher, settings, user)
