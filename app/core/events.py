from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

SplitType = Literal["equal", "exact", "percentage"]


class SplitShare(BaseModel):
    """One participant's share of an expense.

    ``value`` is integer minor units for ``exact`` splits and a percentage
    for ``percentage`` splits.
    """
    model_config = ConfigDict(frozen=True)

    member_id: str
    value: Decimal


class Expense(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    group_id: Optional[int] = None
    currency: str
    amount: int
    paid_by: str
    participants: List[str]
    split_type: SplitType = "equal"
    shares: List[SplitShare] = Field(default_factory=list)
    is_deleted: bool = False


class Settlement(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    group_id: Optional[int] = None
    currency: str
    amount: int
    payer: str
    payee: str
    is_deleted: bool = False
