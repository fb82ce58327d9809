"""Account Claims - the claims an account created, argued on or agreed with.

Invariants:
    - Every list is unique by claim id and ordered newest first (descending id)
    - Claims or arguments that vanished from the chain are skipped with a warning
"""

import logging

from octopus.core.domain_types import StakeType
from octopus.core.mentions import unique
from octopus.infrastructure.chain_client import ChainClient
from octopus.schemas.chain import Claim

logger = logging.getLogger(__name__)


def _newest_first(claims: list[Claim]) -> list[Claim]:
    return sorted(claims, key=lambda c: c.id, reverse=True)


async def _claims_by_id(chain: ChainClient, claim_ids: list[int]) -> list[Claim]:
    claims = []
    for claim_id in unique(claim_ids):
        claim = await chain.claim(claim_id)
        if claim is None:
            logger.warning(f"Claim {claim_id} not found on chain")
            continue
        claims.append(claim)
    return _newest_first(claims)


async def claims_created(chain: ChainClient, address: str) -> list[Claim]:
    return _newest_first([c for c in await chain.claims() if c.creator == address])


async def claims_with_arguments(chain: ChainClient, address: str) -> list[Claim]:
    arguments = await chain.user_arguments(address)
    return await _claims_by_id(chain, [a.claim_id for a in arguments])


async def claims_with_agrees(chain: ChainClient, address: str) -> list[Claim]:
    """Claims holding an argument the account upvoted."""
    stakes = await chain.user_stakes(address)
    argument_ids = unique(s.argument_id for s in stakes if s.type is StakeType.UPVOTE)
    claim_ids = []
    for argument_id in argument_ids:
        argument = await chain.argument(argument_id)
        if argument is None:
            logger.warning(f"Argument {argument_id} not found on chain")
            continue
        claim_ids.append(argument.claim_id)
    return await _claims_by_id(chain, claim_ids)
