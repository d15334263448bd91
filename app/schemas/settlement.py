from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

class SettlementUpdate(BaseModel):
    payer: str | None = None
    payee: str
    amount: Decimal
    currency: str = Field(min_length=3, max_length=3)
    note: str | None = None

class SettlementCreate(SettlementUpdate):
    group_id: int

class SettlementOut(BaseModel):
    id: int
    group_id: int
    payer: str
    payee: str
    amount: str
    amount_minor: int
    currency: str
    note: str | None = None
    created_at: datetime | None = None
    is_deleted: bool = False

    model_config = ConfigDict(from_attributes=True)
