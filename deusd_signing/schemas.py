"""
Order schemas - Pydantic value records for mint/redeem orders and reward claims.

Field widths (u64, u128, 32-byte addresses) are enforced by the canonical
encoder at hash time so width violations surface as EncodingError with the
field name attached.
"""

from enum import IntEnum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OrderType(IntEnum):
    """Order kind, encoded as a single u8."""
    MINT = 0
    REDEEM = 1


class Order(BaseModel):
    """Signed mint or redeem request."""

    model_config = ConfigDict(frozen=True)

    kind: OrderType = Field(..., description="MINT (0) or REDEEM (1)")
    expiry: int = Field(..., description="Unix seconds after which the order is invalid")
    nonce: int = Field(..., description="Unique per benefactor")
    benefactor: str = Field(..., description="Address funds are taken from")
    beneficiary: str = Field(..., description="Address funds are sent to")
    collateral_type: str = Field(..., description='Collateral coin type, e.g. "0x2::sui::SUI"')
    collateral_amount: int = Field(..., description="Collateral in its native integer unit")
    deusd_amount: int = Field(..., description="deUSD in its native integer unit")


class RouteConfig(BaseModel):
    """Custodian route for minted collateral; ratios are basis points."""

    model_config = ConfigDict(frozen=True)

    addresses: List[str] = Field(..., min_length=1)
    ratios: List[int] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_lengths(self):
        if len(self.addresses) != len(self.ratios):
            raise ValueError(
                f"route addresses ({len(self.addresses)}) and ratios ({len(self.ratios)}) must have equal length"
            )
        return self


class MintingObjects(BaseModel):
    """Shared object ids the mint entry function takes."""

    model_config = ConfigDict(frozen=True)

    management_id: str
    locked_funds_management_id: str
    deusd_config_id: str
    global_config_id: str


class RewardClaimPayload(BaseModel):
    """Reward claim signed by a pool's controller."""

    model_config = ConfigDict(frozen=True)

    pool: str = Field(..., description="Reward pool object id")
    receiver: str = Field(..., description="Address receiving the reward")
    amount: int = Field(..., description="u64, claimant-visible unit")
    nonce: int = Field(..., description="u128, unique per pool")
