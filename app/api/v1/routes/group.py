from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_member
from app.services.group_services import create_group, add_member, remove_member, list_group_for_member, list_group_members
from app.services.expense_services import list_group_expenses
from app.services.settlement_service import get_settlement_history
from app.schemas.group import GroupCreate, GroupMemberOut, GroupOut, MemberAdd
from app.schemas.expense import ExpenseOut
from app.schemas.settlement import SettlementOut

router = APIRouter()

@router.post("/", response_model=GroupOut, status_code=201, description="create new group")
async def create_new_group(
    data: GroupCreate,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await create_group(db, data.name, member_id)

@router.get("/my-groups", response_model=list[GroupOut], description="get member groups")
async def my_groups(db: AsyncSession = Depends(get_db), member_id: str = Depends(get_current_member)):
    return await list_group_for_member(db, member_id)

@router.post("/{group_id}/members", response_model=GroupMemberOut, status_code=201)
async def add_member_to_group(
    group_id: int,
    data: MemberAdd,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await add_member(db, group_id, data.member_id, member_id)

@router.delete("/{group_id}/members/{target_id}")
async def rem_mem(
    group_id: int,
    target_id: str,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await remove_member(db, group_id=group_id, member_id=target_id, creator_id=member_id)

@router.get("/{group_id}/members", response_model=list[GroupMemberOut])
async def group_members(group_id: int, db: AsyncSession = Depends(get_db), member_id: str = Depends(get_current_member)):
    return await list_group_members(db, member_id, group_id=group_id)

@router.get("/{group_id}/expenses", response_model=list[ExpenseOut], description="get all expenses of the group")
async def fetch_expenses(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await list_group_expenses(db, member_id, group_id)

@router.get("/{group_id}/settlements", response_model=list[SettlementOut])
async def fetch_history(
    group_id: int,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await get_settlement_history(db, group_id, member_id)
