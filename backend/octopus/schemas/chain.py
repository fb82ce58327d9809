"""Chain Schemas - Pydantic models for objects read from the chain REST and RPC endpoints.

Invariants:
    - Coin amounts are integers in base units; the chain sends them as strings
    - Addresses are bech32 strings (cosmos1...), never decoded here
    - Models ignore unknown fields: the chain adds fields between releases

Design Decisions:
    - Separate from the API request schemas: these mirror an external system, those are
      our own contract with the web/mobile clients
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from octopus.core.domain_types import (
    STAKE_DENOM, PunishmentType, SlashReason, StakeType,
)


class ChainModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Coin(ChainModel):
    amount: int = 0
    denom: str = STAKE_DENOM

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return int(v) if v not in (None, "") else 0


class Community(ChainModel):
    id: str
    name: str
    description: str = ""
    created_time: datetime | None = None


class Claim(ChainModel):
    id: int
    community_id: str
    body: str
    creator: str
    source: str = ""
    total_backed: Coin = Field(default_factory=Coin)
    total_challenged: Coin = Field(default_factory=Coin)
    total_stakers: int = 0
    created_time: datetime | None = None


class Argument(ChainModel):
    id: int
    creator: str
    claim_id: int
    summary: str
    body: str
    stake_type: StakeType = StakeType.BACKING
    upvoted_count: int = 0
    upvoted_stake: Coin = Field(default_factory=Coin)
    total_stake: Coin = Field(default_factory=Coin)
    unhelpful_count: int = 0
    is_unhelpful: bool = False
    created_time: datetime | None = None
    edited_time: datetime | None = None
    edited: bool = False


class Stake(ChainModel):
    id: int
    argument_id: int
    type: StakeType
    amount: Coin = Field(default_factory=Coin)
    creator: str
    created_time: datetime | None = None


class Slash(ChainModel):
    id: int
    argument_id: int
    creator: str
    reason: SlashReason = SlashReason.OTHER
    detailed_reason: str = ""
    created_time: datetime | None = None


class PunishmentResult(ChainModel):
    type: PunishmentType
    app_acc_address: str
    coin: Coin = Field(default_factory=Coin)


class AppAccount(ChainModel):
    address: str
    coins: list[Coin] = Field(default_factory=list)
    slash_count: int = 0
    is_jailed: bool = False
    jail_end_time: datetime | None = None

    def balance(self, denom: str = STAKE_DENOM) -> Coin:
        return Coin(
            amount=sum(c.amount for c in self.coins if c.denom == denom),
            denom=denom,
        )


class ClaimParticipants(ChainModel):
    """Everyone with a stake in a claim's discussion."""
    claim_id: int
    creator: str
    participants: list[str] = Field(default_factory=list)


class TxEvent(ChainModel):
    type: str
    attributes: dict[str, str] = Field(default_factory=dict)


class TxResult(ChainModel):
    """One delivered transaction, attributes already base64-decoded."""
    height: int
    index: int
    data: bytes = b""
    events: list[TxEvent] = Field(default_factory=list)

    def attribute(self, key: str, event_type: str | None = None) -> str | None:
        """First value of `key`, optionally restricted to one event type."""
        for event in self.events:
            if event_type not in (None, event.type):
                continue
            if key in event.attributes:
                return event.attributes[key]
        return None

    def actions(self) -> list[str]:
        return [
            e.attributes["action"] for e in self.events
            if e.type == "message" and "action" in e.attributes
        ]
