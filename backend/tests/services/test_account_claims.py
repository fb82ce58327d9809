"""Account Claims - created, argued-on and agreed-with claims, newest first."""

from octopus.services.account_claims import (
    claims_created, claims_with_agrees, claims_with_arguments,
)
from tests.mock_chain import make_address

ALICE = make_address("a")
BOB = make_address("c")
CAROL = make_address("d")


async def test_claims_created_are_the_accounts_own(mock_chain, chain):
    mock_chain.add_claim(1, ALICE)
    mock_chain.add_claim(2, BOB)
    mock_chain.add_claim(3, ALICE, community_id="sports")

    claims = await claims_created(chain, ALICE)

    assert [c.id for c in claims] == [3, 1]


async def test_claims_with_arguments_are_unique(mock_chain, chain):
    mock_chain.add_claim(1, BOB)
    mock_chain.add_claim(2, BOB)
    mock_chain.add_argument(10, 1, ALICE)
    mock_chain.add_argument(11, 1, ALICE)
    mock_chain.add_argument(12, 2, ALICE)
    mock_chain.add_argument(13, 2, CAROL)

    claims = await claims_with_arguments(chain, ALICE)

    assert [c.id for c in claims] == [2, 1]


async def test_claims_with_agrees_follow_upvotes_only(mock_chain, chain):
    mock_chain.add_claim(1, BOB)
    mock_chain.add_claim(2, BOB)
    mock_chain.add_argument(10, 1, BOB)
    mock_chain.add_argument(20, 2, CAROL)
    mock_chain.add_stake(1, 10, ALICE, type="upvote")
    mock_chain.add_stake(2, 20, ALICE, type="backing")

    claims = await claims_with_agrees(chain, ALICE)

    assert [c.id for c in claims] == [1]


async def test_vanished_arguments_and_claims_are_skipped(mock_chain, chain):
    mock_chain.add_claim(1, BOB)
    mock_chain.add_argument(10, 1, BOB)
    mock_chain.add_argument(30, 99, BOB)
    mock_chain.add_stake(1, 10, ALICE, type="upvote")
    mock_chain.add_stake(2, 77, ALICE, type="upvote")
    mock_chain.add_stake(3, 30, ALICE, type="upvote")

    claims = await claims_with_agrees(chain, ALICE)

    assert [c.id for c in claims] == [1]
