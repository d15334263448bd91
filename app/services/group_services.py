import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from fastapi import HTTPException
from app.core.dependencies import check_group_membership, get_group_or_404
from app.core.money import format_minor
from app.models.group import Group, GroupMember
from app.services.balance_services import get_member_open_balances

logger = logging.getLogger(__name__)

async def create_group(db: AsyncSession, name: str, creator_id: str):
    group = Group(name=name, created_by=creator_id)
    db.add(group)
    await db.flush()

    member = GroupMember(group_id=group.id, member_id=creator_id)
    db.add(member)

    await db.commit()
    await db.refresh(group)

    logger.info("Created group %s for %s", group.id, creator_id)
    return group

async def add_member(db: AsyncSession, group_id: int, member_id: str, creator_id: str):
    group = await get_group_or_404(db, group_id)

    if group.created_by != creator_id:
        raise HTTPException(403, "Only the group creator can add members")

    check_q = select(GroupMember).where(
        GroupMember.group_id == group_id,
        GroupMember.member_id == member_id
    )

    existing = await db.execute(check_q)

    if existing.scalar_one_or_none():
        raise HTTPException(400, "Member already exist in this group")

    new_member = GroupMember(group_id=group_id, member_id=member_id)
    db.add(new_member)
    await db.commit()
    await db.refresh(new_member)
    return new_member

async def remove_member(db: AsyncSession, group_id: int, member_id: str, creator_id: str):
    group = await get_group_or_404(db, group_id)

    if group.created_by != creator_id and member_id != creator_id:
        raise HTTPException(403, "Only group admin can remove members")

    if member_id == group.created_by:
        raise HTTPException(400, "Group admin cannot leave the group")

    res = await db.execute(
        select(GroupMember).where(
            GroupMember.group_id == group_id,
            GroupMember.member_id == member_id
        )
    )
    member = res.scalar_one_or_none()

    if not member:
        raise HTTPException(404, "Member is not part of this group")

    open_balances = await get_member_open_balances(db, group_id, member_id)

    if open_balances:
        owed = ", ".join(f"{format_minor(amt, cur)} {cur}" for cur, amt in open_balances.items())
        raise HTTPException(400, f"Member has outstanding balances: {owed}")

    await db.delete(member)
    await db.commit()

    logger.info("Removed member %s from group %s", member_id, group_id)
    return {"status": "member_removed"}

async def list_group_for_member(db: AsyncSession, member_id: str):
    q = (
        select(Group)
        .join(GroupMember)
        .where(GroupMember.member_id == member_id)
        .order_by(Group.id)
    )
    result = await db.execute(q)
    return result.scalars().all()

async def list_group_members(db: AsyncSession, member_id: str, group_id: int):
    await check_group_membership(db, group_id, member_id)

    q = (
        select(GroupMember)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    result = await db.execute(q)
    return result.scalars().all()
