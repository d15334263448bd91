from pydantic import BaseModel
from typing import Dict, List

class DebtOut(BaseModel):
    from_id: str
    to_id: str
    amount: str
    amount_minor: int

class MemberBalanceOut(BaseModel):
    member_id: str
    net_balance: str
    net_balance_minor: int
    owes: Dict[str, str]
    owed_by: Dict[str, str]

class CurrencyBalanceOut(BaseModel):
    currency: str
    net: Dict[str, int]
    members: List[MemberBalanceOut]
    simplified_debts: List[DebtOut]

class GroupBalanceOut(BaseModel):
    group_id: int
    balances_by_currency: Dict[str, CurrencyBalanceOut]
