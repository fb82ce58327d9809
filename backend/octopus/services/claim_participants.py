"""Claim Participants - who has taken part in a claim's discussion.

Invariants:
    - participants are argument creators and stakers, unique, first-seen order
    - the claim creator is reported separately and never repeated in participants
    - a missing claim or argument yields None (callers log and skip)
"""

import logging

from octopus.core.mentions import unique
from octopus.infrastructure.chain_client import ChainClient
from octopus.schemas.chain import ClaimParticipants

logger = logging.getLogger(__name__)


async def get_claim_participants(
    chain: ChainClient, claim_id: int,
) -> ClaimParticipants | None:
    claim = await chain.claim(claim_id)
    if claim is None:
        return None

    addresses: list[str] = []
    for argument in await chain.claim_arguments(claim_id):
        addresses.append(argument.creator)
        for stake in await chain.argument_stakes(argument.id):
            addresses.append(stake.creator)

    return ClaimParticipants(
        claim_id=claim.id,
        creator=claim.creator,
        participants=[a for a in unique(addresses) if a != claim.creator],
    )


async def get_claim_participants_by_argument_id(
    chain: ChainClient, argument_id: int,
) -> ClaimParticipants | None:
    argument = await chain.argument(argument_id)
    if argument is None:
        logger.warning(f"Argument {argument_id} not found on chain")
        return None
    return await get_claim_participants(chain, argument.claim_id)
