import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from app.core.errors import ImbalanceError, InvalidAmountError, InvalidParticipantsError
from app.core.events import Expense, Settlement
from app.core.money import normalize_currency
from app.core.splits import compute_splits

logger = logging.getLogger(__name__)


class SimplifiedDebt(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: int


class MemberBalance(BaseModel):
    member_id: str
    net_balance: int
    owes: Dict[str, int] = Field(default_factory=dict)
    owed_by: Dict[str, int] = Field(default_factory=dict)


class CurrencyBalances(BaseModel):
    currency: str
    net_balances: Dict[str, int]
    simplified_debts: List[SimplifiedDebt]

    def member_balances(self) -> Dict[str, MemberBalance]:
        """Per-member view with who owes whom after simplification."""
        view = {
            uid: MemberBalance(member_id=uid, net_balance=amt)
            for uid, amt in self.net_balances.items()
        }
        for debt in self.simplified_debts:
            view[debt.from_id].owes[debt.to_id] = debt.amount
            view[debt.to_id].owed_by[debt.from_id] = debt.amount
        return view


def simplify_debts(net_map: Dict[str, int]) -> List[SimplifiedDebt]:
    creditors = {uid: bal for uid, bal in net_map.items() if bal > 0}
    debtors = {uid: -bal for uid, bal in net_map.items() if bal < 0}

    transfers: List[SimplifiedDebt] = []

    while creditors and debtors:
        # largest outstanding amount first, member id ascending on ties
        debt_id = min(debtors, key=lambda uid: (-debtors[uid], uid))
        cred_id = min(creditors, key=lambda uid: (-creditors[uid], uid))

        pay_amt = min(debtors[debt_id], creditors[cred_id])
        transfers.append(SimplifiedDebt(from_id=debt_id, to_id=cred_id, amount=pay_amt))

        debtors[debt_id] -= pay_amt
        creditors[cred_id] -= pay_amt

        if debtors[debt_id] == 0:
            del debtors[debt_id]
        if creditors[cred_id] == 0:
            del creditors[cred_id]

    return transfers


def apply_debts(net_map: Dict[str, int], debts: Iterable[SimplifiedDebt]) -> Dict[str, int]:
    """Replay debts as payments: each debtor's balance rises, each creditor's falls."""
    result = dict(net_map)
    for d in debts:
        result[d.from_id] = result.get(d.from_id, 0) + d.amount
        result[d.to_id] = result.get(d.to_id, 0) - d.amount
    return result


def validate_settlement(settlement: Settlement):
    if settlement.amount <= 0:
        raise InvalidAmountError("Settlement amount must be positive")
    if settlement.payer == settlement.payee:
        raise InvalidParticipantsError("Settlement payer and payee must differ")


def _fold_events(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement],
    member_ids: Iterable[str],
    tolerance: Optional[Decimal] = None,
) -> Dict[str, Dict[str, int]]:
    by_currency: Dict[str, Dict[str, int]] = {}
    members = list(member_ids)

    def ledger(currency: str) -> Dict[str, int]:
        currency = normalize_currency(currency)
        if currency not in by_currency:
            by_currency[currency] = {uid: 0 for uid in members}
        return by_currency[currency]

    for expense in expenses:
        if expense.is_deleted:
            logger.debug("Skipping deleted expense %s", expense.id)
            continue
        net = ledger(expense.currency)
        for uid, delta in compute_splits(expense, tolerance).items():
            net[uid] = net.get(uid, 0) + delta

    for settlement in settlements:
        if settlement.is_deleted:
            logger.debug("Skipping deleted settlement %s", settlement.id)
            continue
        validate_settlement(settlement)
        net = ledger(settlement.currency)
        net[settlement.payer] = net.get(settlement.payer, 0) + settlement.amount
        net[settlement.payee] = net.get(settlement.payee, 0) - settlement.amount

    return by_currency


def compute_group_balances(
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement] = (),
    *,
    member_ids: Iterable[str] = (),
    currency: Optional[str] = None,
    tolerance: Optional[Decimal] = None,
) -> Dict[str, CurrencyBalances]:
    """
    Fold a group's expenses and settlements into a balance report per currency.

    Each currency is balanced on its own. Positive balances are owed money,
    negative balances owe money. Raises ImbalanceError if any currency's
    balances fail to sum to zero. ``tolerance`` is passed through to the
    split calculator for percentage expenses.
    """
    expenses = list(expenses)
    settlements = list(settlements)

    if currency is not None:
        currency = normalize_currency(currency)
        expenses = [e for e in expenses if normalize_currency(e.currency) == currency]
        settlements = [s for s in settlements if normalize_currency(s.currency) == currency]

    folded = _fold_events(expenses, settlements, member_ids, tolerance)

    report: Dict[str, CurrencyBalances] = {}
    for cur in sorted(folded):
        net = folded[cur]
        residual = sum(net.values())
        if residual != 0:
            logger.error(
                "Balance conservation violated for %s: residual=%s expenses=%s settlements=%s",
                cur,
                residual,
                [e.id for e in expenses if normalize_currency(e.currency) == cur],
                [s.id for s in settlements if normalize_currency(s.currency) == cur],
            )
            raise ImbalanceError(cur, residual)

        report[cur] = CurrencyBalances(
            currency=cur,
            net_balances=dict(sorted(net.items())),
            simplified_debts=simplify_debts(net),
        )

    return report
