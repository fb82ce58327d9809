"""User lookups shared by REST, GraphQL and the comment flow.

Invariants:
    - Username lookups are case-insensitive; maps are keyed by lowercased username
    - Translation helpers leave unknown mentions untouched
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.core.mentions import (
    COSMOS_MENTION,
    parse_username_mentions,
    translate_addresses_to_usernames,
    translate_usernames_to_addresses,
    unique,
)
from octopus.models.user import User


async def get_user_by_address(db: AsyncSession, address: str) -> User | None:
    result = await db.execute(select(User).where(User.address == address))
    return result.scalar_one_or_none()


async def addresses_by_username(
    db: AsyncSession, usernames: Iterable[str],
) -> dict[str, str]:
    lowered = unique(u.lower() for u in usernames)
    if not lowered:
        return {}
    result = await db.execute(
        select(User.username, User.address).where(
            func.lower(User.username).in_(lowered),
        )
    )
    return {username.lower(): address for username, address in result.all()}


async def usernames_by_address(
    db: AsyncSession, addresses: Iterable[str],
) -> dict[str, str]:
    wanted = unique(addresses)
    if not wanted:
        return {}
    result = await db.execute(
        select(User.address, User.username).where(User.address.in_(wanted)),
    )
    return dict(result.all())


async def translate_to_cosmos(db: AsyncSession, body: str) -> str:
    """Rewrite @username mentions in body as @address mentions."""
    mapping = await addresses_by_username(db, parse_username_mentions(body))
    return translate_usernames_to_addresses(body, mapping)


async def translate_to_usernames(db: AsyncSession, body: str) -> str:
    """Rewrite @address mentions in body as @username mentions."""
    mapping = await usernames_by_address(db, COSMOS_MENTION.findall(body))
    return translate_addresses_to_usernames(body, mapping)
