from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal

class SplitInput(BaseModel):
    member_id: str
    # major units for exact splits, percent for percentage splits
    value: Decimal

class ExpenseUpdate(BaseModel):
    description : str | None = None
    amount : Decimal
    currency : str = Field(min_length=3, max_length=3)
    paid_by : str | None = None
    split_type : Literal["equal", "exact", "percentage"] = "equal"
    participants : List[str]
    splits : List[SplitInput] = []

class ExpenseCreate(ExpenseUpdate):
    group_id : int

class SplitOut(BaseModel):
    member_id: str
    amount: str
    amount_minor: int
    share_value: str | None = None

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    description: str | None = None
    amount: str
    amount_minor: int
    currency: str
    paid_by: str
    split_type: str
    splits : List[SplitOut]
    created_at: datetime | None = None
    is_deleted: bool = False

    model_config = ConfigDict(from_attributes=True)
