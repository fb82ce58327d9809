"""Mentions - username <-> address translation and mention parsing."""

from octopus.core.mentions import (
    parse_cosmos_mentions,
    parse_username_mentions,
    translate_addresses_to_usernames,
    translate_usernames_to_addresses,
    unique,
)
from tests.mock_chain import make_address

ALICE = make_address("a")
BOB = make_address("c")


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_parse_cosmos_mentions_keeps_duplicates():
    body = f"hey @{ALICE} and @{BOB}, also @{ALICE}"
    _, addresses = parse_cosmos_mentions(body)
    assert addresses == [ALICE, BOB, ALICE]


def test_parse_cosmos_mentions_ignores_malformed_addresses():
    # 'b' is not in the bech32 alphabet
    _, addresses = parse_cosmos_mentions("@cosmos1" + "b" * 38)
    assert addresses == []


def test_parse_username_mentions_skips_address_tokens():
    body = f"@alice meet @{ALICE} and @bob_99"
    assert parse_username_mentions(body) == ["alice", "bob_99"]


def test_usernames_translate_to_addresses_case_insensitively():
    body = "thanks @Alice and @carol"
    out = translate_usernames_to_addresses(body, {"alice": ALICE})
    assert out == f"thanks @{ALICE} and @carol"


def test_addresses_translate_back_to_usernames():
    body = f"@{ALICE} agrees with @{BOB}"
    out = translate_addresses_to_usernames(body, {ALICE: "alice"})
    assert out == f"@alice agrees with @{BOB}"


def test_unknown_usernames_are_left_untouched():
    assert translate_usernames_to_addresses("mail me at me@alice.io", {}) == "mail me at me@alice.io"
