"""Domain Types - enums and constants shared by truapi, pushd and the actions.

Invariants:
    - NotificationType values are stored in the notification_events.type column: never renumber
    - All valid states encoded as Enums, no raw string matching
    - Coin amounts are integers in base units (STAKE_DENOM); 1 TRU = COIN_PRECISION base units

Design Decisions:
    - int Enum for NotificationType (persisted), str Enums for everything that travels as JSON
"""

from enum import Enum, IntEnum


# ─── Coins ───────────────────────────────────────────────────────

COIN_DISPLAY_NAME = "TRU"
STAKE_DENOM = "utru"
COIN_PRECISION = 10**9


# ─── Enums ───────────────────────────────────────────────────────

class NotificationType(IntEnum):
    """Kinds of notification events, persisted by value."""
    STORY_ACTION = 0
    COMMENT = 1
    INVITE = 2
    MENTION_ACTION = 3
    NEW_ARGUMENT = 4
    AGREE_RECEIVED = 5
    NOT_HELPFUL_RECEIVED = 6
    SLASHED = 7
    EARNED_STAKE = 8
    JAILED = 9
    COMMENT_ACTION = 10

    @property
    def title(self) -> str:
        return _NOTIFICATION_TITLES[self]


_NOTIFICATION_TITLES = {
    NotificationType.STORY_ACTION: "Story Update",
    NotificationType.COMMENT: "Comment",
    NotificationType.INVITE: "Invite",
    NotificationType.MENTION_ACTION: "Mention",
    NotificationType.NEW_ARGUMENT: "New Argument",
    NotificationType.AGREE_RECEIVED: "Agree Received",
    NotificationType.NOT_HELPFUL_RECEIVED: "Not Helpful Received",
    NotificationType.SLASHED: "Slashed",
    NotificationType.EARNED_STAKE: "Earned TRU",
    NotificationType.JAILED: "Jailed",
    NotificationType.COMMENT_ACTION: "New Comment",
}

NOTIFICATION_ICONS: dict[NotificationType, str] = {
    NotificationType.AGREE_RECEIVED: "agree.png",
    NotificationType.NOT_HELPFUL_RECEIVED: "not_helpful.png",
    NotificationType.SLASHED: "slashed.png",
    NotificationType.EARNED_STAKE: "earned_tru.png",
    NotificationType.JAILED: "jailed.png",
}


class MentionType(str, Enum):
    """Where a mention happened."""
    ARGUMENT = "argument"
    COMMENT = "comment"

    def __str__(self) -> str:
        return f"in {'an' if self is MentionType.ARGUMENT else 'a'} {self.value}"


class ReactionType(IntEnum):
    LIKE = 0


class ReactionableType(str, Enum):
    ARGUMENTS = "arguments"
    CLAIMS = "claims"
    COMMENTS = "comments"


class StakeType(str, Enum):
    BACKING = "backing"
    CHALLENGE = "challenge"
    UPVOTE = "upvote"


class PunishmentType(str, Enum):
    """Outcome of a slash for one account."""
    SLASHED = "slashed"
    JAILED = "jailed"
    CURATOR_REWARDED = "curator_rewarded"


class SlashReason(str, Enum):
    LOW_QUALITY = "low_quality"
    PLAGIARISM = "plagiarism"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value.replace("_", " ").title()


class DevicePlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"

    @property
    def gateway_code(self) -> int:
        """Platform code understood by the push gateway."""
        return 1 if self is DevicePlatform.IOS else 2
