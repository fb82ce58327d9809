"""Mentions - translation between @username and @cosmos-address mentions.

Invariants:
    - Bodies are stored on chain / in the DB with address mentions (@cosmos1...)
    - Clients write and read username mentions (@alice)
    - Unknown usernames or addresses are left untouched
    - unique() keeps first-seen order (recipients are notified in mention order)
"""

import re
from collections.abc import Iterable, Mapping

COSMOS_MENTION = re.compile(r"@(cosmos1[02-9ac-hj-np-z]{38})")
USERNAME_MENTION = re.compile(r"@([A-Za-z0-9_]{3,20})\b")


def unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def parse_cosmos_mentions(body: str) -> tuple[str, list[str]]:
    """Return the body and every address mentioned in it (duplicates kept)."""
    return body, COSMOS_MENTION.findall(body)


def parse_username_mentions(body: str) -> list[str]:
    """Usernames mentioned in body, excluding address-shaped tokens."""
    return [
        name for name in USERNAME_MENTION.findall(body)
        if not name.startswith("cosmos1")
    ]


def translate_usernames_to_addresses(
    body: str, addresses_by_username: Mapping[str, str],
) -> str:
    """@alice -> @cosmos1... for every known username."""
    def _replace(match: re.Match) -> str:
        address = addresses_by_username.get(match.group(1).lower())
        return f"@{address}" if address else match.group(0)

    return USERNAME_MENTION.sub(_replace, body)


def translate_addresses_to_usernames(
    body: str, usernames_by_address: Mapping[str, str],
) -> str:
    """@cosmos1... -> @alice for every known address."""
    def _replace(match: re.Match) -> str:
        username = usernames_by_address.get(match.group(1))
        return f"@{username}" if username else match.group(0)

    return COSMOS_MENTION.sub(_replace, body)
