from fastapi import HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.models.group import Group, GroupMember

async def get_current_member(request: Request) -> str:
    # authentication happens upstream; it forwards the member id in a header
    member_id = request.headers.get(settings.MEMBER_HEADER)

    if not member_id or not member_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized access")

    return member_id.strip()

async def get_group_or_404(db: AsyncSession, group_id: int) -> Group:
    res = await db.execute(select(Group).where(Group.id == group_id))
    group = res.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group doesn't exist")

    return group

async def get_group_member_ids(db: AsyncSession, group_id: int) -> list[str]:
    res = await db.execute(
        select(GroupMember.member_id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    return list(res.scalars().all())

async def check_group_membership(db: AsyncSession, group_id: int, member_id: str):
    await get_group_or_404(db, group_id)

    res = await db.execute(
        select(GroupMember).where(
            GroupMember.group_id == group_id,
            GroupMember.member_id == member_id
        )
    )

    if not res.scalar_one_or_none():
        raise HTTPException(403, "You are not member of this group")

async def require_members(db: AsyncSession, group_id: int, member_ids) -> None:
    members = set(await get_group_member_ids(db, group_id))
    outsiders = [m for m in member_ids if m not in members]

    if outsiders:
        raise HTTPException(400, f"Not group members: {', '.join(outsiders)}")
