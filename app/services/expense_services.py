import logging
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from fastapi import HTTPException
from app.core import events
from app.core.config import settings
from app.core.dependencies import check_group_membership, require_members
from app.core.errors import InvalidAmountError
from app.core.money import Money, format_minor, normalize_currency
from app.core.splits import compute_shares
from app.models.expense import Expense
from app.models.expense_split import ExpenseSplit

logger = logging.getLogger(__name__)

PERCENTAGE_PLACES = 6

def _percentage(value: Decimal) -> Decimal:
    # stored as text in expense_splits.share_value
    if not value.is_finite() or abs(value) > 100:
        raise InvalidAmountError(f"Invalid percentage: {value}")

    value = value.normalize()
    if value.as_tuple().exponent < -PERCENTAGE_PLACES:
        raise InvalidAmountError(
            f"Percentage {value} has more than {PERCENTAGE_PLACES} decimal places"
        )
    return value

def build_expense_event(data, group_id: int, paid_by: str, expense_id: int | None = None) -> events.Expense:
    """Turn request data (major units) into an engine expense (minor units)."""
    currency = normalize_currency(data.currency)
    amount = Money.parse(data.amount, currency)

    shares = []
    if data.split_type == "exact":
        shares = [
            events.SplitShare(member_id=s.member_id, value=Decimal(Money.parse(s.value, currency).amount))
            for s in data.splits
        ]
    elif data.split_type == "percentage":
        shares = [events.SplitShare(member_id=s.member_id, value=_percentage(s.value)) for s in data.splits]

    return events.Expense(
        id=expense_id,
        group_id=group_id,
        currency=currency,
        amount=amount.amount,
        paid_by=paid_by,
        participants=list(data.participants),
        split_type=data.split_type,
        shares=shares,
    )

def expense_to_event(expense: Expense) -> events.Expense:
    splits = sorted(expense.splits, key=lambda s: s.position)
    shares = []
    if expense.split_type != "equal":
        shares = [
            events.SplitShare(member_id=s.member_id, value=Decimal(s.share_value))
            for s in splits
        ]

    return events.Expense(
        id=expense.id,
        group_id=expense.group_id,
        currency=expense.currency,
        amount=expense.amount_minor,
        paid_by=expense.paid_by,
        participants=[s.member_id for s in splits],
        split_type=expense.split_type,
        shares=shares,
        is_deleted=expense.is_deleted,
    )

def serialize_expense(expense: Expense) -> dict:
    return {
        "id": expense.id,
        "group_id": expense.group_id,
        "description": expense.description,
        "amount": format_minor(expense.amount_minor, expense.currency),
        "amount_minor": expense.amount_minor,
        "currency": expense.currency,
        "paid_by": expense.paid_by,
        "split_type": expense.split_type,
        "created_at": expense.created_at,
        "is_deleted": expense.is_deleted,
        "splits": [
            {
                "member_id": s.member_id,
                "amount": format_minor(s.amount_minor, expense.currency),
                "amount_minor": s.amount_minor,
                "share_value": s.share_value,
            }
            for s in sorted(expense.splits, key=lambda s: s.position)
        ],
    }

def _split_rows(event: events.Expense) -> list[ExpenseSplit]:
    computed = compute_shares(event, settings.PERCENTAGE_TOLERANCE)
    entered = {s.member_id: s.value for s in event.shares}

    return [
        ExpenseSplit(
            member_id=share.member_id,
            position=i,
            share_value=format(entered[share.member_id], "f") if share.member_id in entered else None,
            amount_minor=int(share.value),
        )
        for i, share in enumerate(computed)
    ]

async def _get_expense(db: AsyncSession, expense_id: int) -> Expense:
    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.id == expense_id, Expense.is_deleted == False)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    return expense

async def create_expense(db: AsyncSession, data, member_id: str):
    await check_group_membership(db, data.group_id, member_id)

    paid_by = data.paid_by or member_id
    await require_members(db, data.group_id, [paid_by, *data.participants])

    event = build_expense_event(data, data.group_id, paid_by)
    splits = _split_rows(event)

    expense = Expense(
        group_id=data.group_id,
        paid_by=paid_by,
        amount_minor=event.amount,
        currency=event.currency,
        split_type=event.split_type,
        description=data.description,
        splits=splits,
    )
    db.add(expense)
    await db.commit()

    logger.info(
        "Created expense %s in group %s: %s %s paid by %s",
        expense.id, expense.group_id, event.amount, event.currency, paid_by,
    )

    return serialize_expense(await _get_expense(db, expense.id))

async def edit_expense(db: AsyncSession, data, expense_id: int, member_id: str):
    expense = await _get_expense(db, expense_id)
    await check_group_membership(db, expense.group_id, member_id)

    paid_by = data.paid_by or expense.paid_by
    await require_members(db, expense.group_id, [paid_by, *data.participants])

    # whole record is replaced, old splits are orphaned and removed
    event = build_expense_event(data, expense.group_id, paid_by, expense_id=expense.id)
    splits = _split_rows(event)

    expense.paid_by = paid_by
    expense.amount_minor = event.amount
    expense.currency = event.currency
    expense.split_type = event.split_type
    expense.description = data.description
    expense.splits = splits

    await db.commit()
    logger.info("Updated expense %s in group %s", expense.id, expense.group_id)

    return serialize_expense(await _get_expense(db, expense_id))

async def delete_expense(db: AsyncSession, member_id: str, expense_id: int):
    expense = await _get_expense(db, expense_id)
    await check_group_membership(db, expense.group_id, member_id)

    expense.is_deleted = True
    await db.commit()

    logger.info("Deleted expense %s in group %s", expense.id, expense.group_id)
    return {"status": "deleted"}

async def get_expense_by_id(db: AsyncSession, expense_id: int, member_id: str):
    expense = await _get_expense(db, expense_id)
    await check_group_membership(db, expense.group_id, member_id)
    return serialize_expense(expense)

async def list_group_expenses(db: AsyncSession, member_id: str, group_id: int):
    await check_group_membership(db, group_id, member_id)

    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.group_id == group_id, Expense.is_deleted == False)
        .order_by(Expense.created_at, Expense.id)
    )
    res = await db.execute(q)
    return [serialize_expense(e) for e in res.scalars().all()]
