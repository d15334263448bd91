import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException
from app.core import events
from app.core.balances import validate_settlement
from app.core.dependencies import check_group_membership, require_members
from app.core.money import Money, format_minor
from app.models.settlement import Settlement

logger = logging.getLogger(__name__)

def build_settlement_event(data, group_id: int, payer: str, settlement_id: int | None = None) -> events.Settlement:
    amount = Money.parse(data.amount, data.currency)

    event = events.Settlement(
        id=settlement_id,
        group_id=group_id,
        currency=amount.currency,
        amount=amount.amount,
        payer=payer,
        payee=data.payee,
    )
    validate_settlement(event)
    return event

def settlement_to_event(settlement: Settlement) -> events.Settlement:
    return events.Settlement(
        id=settlement.id,
        group_id=settlement.group_id,
        currency=settlement.currency,
        amount=settlement.amount_minor,
        payer=settlement.payer,
        payee=settlement.payee,
        is_deleted=settlement.is_deleted,
    )

def serialize_settlement(settlement: Settlement) -> dict:
    return {
        "id": settlement.id,
        "group_id": settlement.group_id,
        "payer": settlement.payer,
        "payee": settlement.payee,
        "amount": format_minor(settlement.amount_minor, settlement.currency),
        "amount_minor": settlement.amount_minor,
        "currency": settlement.currency,
        "note": settlement.note,
        "created_at": settlement.created_at,
        "is_deleted": settlement.is_deleted,
    }

async def _get_settlement(db: AsyncSession, settlement_id: int) -> Settlement:
    q = (
        select(Settlement)
        .where(Settlement.id == settlement_id, Settlement.is_deleted == False)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    settlement = res.scalar_one_or_none()

    if not settlement:
        raise HTTPException(404, "Settlement not found")

    return settlement

async def add_settlement(db: AsyncSession, member_id: str, data):
    await check_group_membership(db, data.group_id, member_id)

    payer = data.payer or member_id
    event = build_settlement_event(data, data.group_id, payer)
    await require_members(db, data.group_id, [event.payer, event.payee])

    settlement = Settlement(
        group_id=data.group_id,
        payer=event.payer,
        payee=event.payee,
        amount_minor=event.amount,
        currency=event.currency,
        note=data.note,
    )
    db.add(settlement)
    await db.commit()

    logger.info(
        "Recorded settlement %s in group %s: %s pays %s %s %s",
        settlement.id, settlement.group_id, event.payer, event.payee, event.amount, event.currency,
    )

    return serialize_settlement(await _get_settlement(db, settlement.id))

async def edit_settlement(db: AsyncSession, member_id: str, settlement_id: int, data):
    settlement = await _get_settlement(db, settlement_id)
    await check_group_membership(db, settlement.group_id, member_id)

    payer = data.payer or settlement.payer
    event = build_settlement_event(data, settlement.group_id, payer, settlement_id=settlement.id)
    await require_members(db, settlement.group_id, [event.payer, event.payee])

    settlement.payer = event.payer
    settlement.payee = event.payee
    settlement.amount_minor = event.amount
    settlement.currency = event.currency
    settlement.note = data.note

    await db.commit()
    logger.info("Updated settlement %s in group %s", settlement.id, settlement.group_id)

    return serialize_settlement(await _get_settlement(db, settlement_id))

async def undo_settlement(db: AsyncSession, settlement_id: int, member_id: str):
    settlement = await _get_settlement(db, settlement_id)
    await check_group_membership(db, settlement.group_id, member_id)

    settlement.is_deleted = True
    await db.commit()

    logger.info("Deleted settlement %s in group %s", settlement.id, settlement.group_id)
    return {"status": "deleted"}

async def get_settlement_history(db: AsyncSession, group_id: int, member_id: str):
    await check_group_membership(db, group_id, member_id)

    q = (
        select(Settlement)
        .where(Settlement.group_id == group_id, Settlement.is_deleted == False)
        .order_by(Settlement.created_at.desc(), Settlement.id.desc())
    )
    res = await db.execute(q)
    return [serialize_settlement(s) for s in res.scalars().all()]
