from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from app.core.balances import CurrencyBalances, compute_group_balances
from app.core.config import settings
from app.core.dependencies import check_group_membership, get_group_member_ids
from app.core.money import format_minor
from app.models.expense import Expense
from app.models.settlement import Settlement
from app.services.expense_services import expense_to_event
from app.services.settlement_service import settlement_to_event

async def get_group_net_balances(db: AsyncSession, group_id: int, currency: str | None = None):
    # one snapshot of the group's live events, folded from scratch every time
    expense_q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.group_id == group_id, Expense.is_deleted == False)
        .order_by(Expense.id)
    )
    expense_res = await db.execute(expense_q)
    expenses = [expense_to_event(e) for e in expense_res.scalars().all()]

    settlement_q = (
        select(Settlement)
        .where(Settlement.group_id == group_id, Settlement.is_deleted == False)
        .order_by(Settlement.id)
    )
    settlement_res = await db.execute(settlement_q)
    settlements = [settlement_to_event(s) for s in settlement_res.scalars().all()]

    member_ids = await get_group_member_ids(db, group_id)

    return compute_group_balances(
        expenses,
        settlements,
        member_ids=member_ids,
        currency=currency,
        tolerance=settings.PERCENTAGE_TOLERANCE,
    )

def serialize_currency_balances(balances: CurrencyBalances) -> dict:
    cur = balances.currency

    return {
        "currency": cur,
        "net": balances.net_balances,
        "members": [
            {
                "member_id": uid,
                "net_balance": format_minor(mb.net_balance, cur),
                "net_balance_minor": mb.net_balance,
                "owes": {to: format_minor(a, cur) for to, a in mb.owes.items()},
                "owed_by": {frm: format_minor(a, cur) for frm, a in mb.owed_by.items()},
            }
            for uid, mb in balances.member_balances().items()
        ],
        "simplified_debts": [
            {
                "from_id": d.from_id,
                "to_id": d.to_id,
                "amount": format_minor(d.amount, cur),
                "amount_minor": d.amount,
            }
            for d in balances.simplified_debts
        ],
    }

async def get_group_balances(db: AsyncSession, group_id: int, member_id: str, currency: str | None = None):
    await check_group_membership(db, group_id, member_id)

    report = await get_group_net_balances(db, group_id, currency)

    return {
        "group_id": group_id,
        "balances_by_currency": {
            cur: serialize_currency_balances(balances)
            for cur, balances in report.items()
        },
    }

async def get_member_open_balances(db: AsyncSession, group_id: int, member_id: str) -> dict[str, int]:
    report = await get_group_net_balances(db, group_id)

    return {
        cur: balances.net_balances[member_id]
        for cur, balances in report.items()
        if balances.net_balances.get(member_id, 0) != 0
    }
