from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_member
from app.schemas.balances import GroupBalanceOut
from app.services.balance_services import get_group_balances

router = APIRouter()

@router.get("/{group_id}/balances", response_model=GroupBalanceOut)
async def group_balances(
    group_id: int,
    currency: str | None = Query(None, min_length=3, max_length=3),
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await get_group_balances(db, group_id, member_id, currency)
