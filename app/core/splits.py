"""
Split calculator.

Turns a single expense into the share each participant owes and into the
signed effect the expense has on every member's balance. All arithmetic is
done on integer minor units; percentages are the only decimal input and are
rounded once, with the rounding drift pushed onto the largest shares so the
parts always add back up to the total.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional
from app.core.errors import InvalidAmountError, InvalidParticipantsError, SplitMismatchError
from app.core.events import Expense, SplitShare

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = Decimal("0.001")
HUNDRED = Decimal("100")


def _validate(expense: Expense):
    if expense.amount <= 0:
        raise InvalidAmountError("Expense amount must be positive")

    if not expense.participants:
        raise InvalidParticipantsError("Expense needs at least one participant")

    if len(expense.participants) != len(set(expense.participants)):
        raise InvalidParticipantsError("Duplicate participants in expense")

    if expense.split_type == "equal":
        return

    seen = set()
    for share in expense.shares:
        if share.member_id not in expense.participants:
            raise InvalidParticipantsError(
                f"Share references non-participant {share.member_id}"
            )
        if share.member_id in seen:
            raise InvalidParticipantsError(f"Duplicate share for {share.member_id}")
        if share.value < 0:
            raise InvalidAmountError(f"Negative share for {share.member_id}")
        seen.add(share.member_id)

    missing = [p for p in expense.participants if p not in seen]
    if missing:
        raise InvalidParticipantsError(f"Missing shares for {', '.join(missing)}")


def equal_split(amount: int, participants: List[str]) -> List[int]:
    base, remainder = divmod(amount, len(participants))
    return [base + 1 if i < remainder else base for i in range(len(participants))]


def exact_split(amount: int, values: List[Decimal]) -> List[int]:
    parts = []
    for v in values:
        if v != v.to_integral_value():
            raise InvalidAmountError(f"Exact share {v} is not a whole number of minor units")
        parts.append(int(v))

    total = sum(parts)
    if total != amount:
        raise SplitMismatchError(
            f"Exact shares sum to {total}, expected {amount}",
            expected=amount,
            actual=total,
        )
    return parts


def percentage_split(
    amount: int,
    percentages: List[Decimal],
    tolerance: Decimal = PERCENTAGE_TOLERANCE,
) -> List[int]:
    total_pct = sum(percentages, Decimal("0"))
    if abs(total_pct - HUNDRED) > tolerance:
        raise SplitMismatchError(
            f"Percentages sum to {total_pct}, expected 100",
            expected=HUNDRED,
            actual=total_pct,
        )

    exact = [Decimal(amount) * pct / HUNDRED for pct in percentages]
    parts = [int(v.quantize(Decimal("1"), rounding=ROUND_HALF_UP)) for v in exact]

    drift = amount - sum(parts)
    if drift:
        logger.debug("Correcting percentage rounding drift of %s on %s", drift, amount)
        step = 1 if drift > 0 else -1
        # largest share first, supplied order on ties
        order = sorted(range(len(parts)), key=lambda i: (-exact[i], i))
        i = 0
        while drift:
            idx = order[i % len(order)]
            if step < 0 and parts[idx] == 0:
                i += 1
                continue
            parts[idx] += step
            drift -= step
            i += 1

    return parts


def compute_shares(expense: Expense, tolerance: Optional[Decimal] = None) -> List[SplitShare]:
    """Owed share per participant, in participant order. Sums to ``expense.amount``."""
    _validate(expense)

    if expense.split_type == "equal":
        parts = equal_split(expense.amount, expense.participants)
    else:
        by_member = {s.member_id: s.value for s in expense.shares}
        values = [by_member[p] for p in expense.participants]

        if expense.split_type == "exact":
            parts = exact_split(expense.amount, values)
        else:
            parts = percentage_split(
                expense.amount,
                values,
                PERCENTAGE_TOLERANCE if tolerance is None else tolerance,
            )

    return [
        SplitShare(member_id=member, value=Decimal(part))
        for member, part in zip(expense.participants, parts)
    ]


def compute_splits(expense: Expense, tolerance: Optional[Decimal] = None) -> Dict[str, int]:
    """Signed balance contribution of one expense.

    Participants are debited their share and the payer is credited the full
    amount, so the values always sum to zero.
    """
    contributions: Dict[str, int] = {}

    for share in compute_shares(expense, tolerance):
        contributions[share.member_id] = contributions.get(share.member_id, 0) - int(share.value)

    contributions[expense.paid_by] = contributions.get(expense.paid_by, 0) + expense.amount

    return contributions
