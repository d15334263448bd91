from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_current_member
from app.schemas.settlement import SettlementCreate, SettlementOut, SettlementUpdate
from app.services.settlement_service import add_settlement, edit_settlement, undo_settlement

router = APIRouter()

@router.post("/", response_model=SettlementOut, status_code=201)
async def add_manual_settlement(
    data: SettlementCreate,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await add_settlement(db, member_id, data)

@router.put("/{settlement_id}", response_model=SettlementOut)
async def edit_settlement_route(
    settlement_id: int,
    data: SettlementUpdate,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await edit_settlement(db, member_id, settlement_id, data)

@router.delete("/{settlement_id}")
async def undo_settlement_route(
    settlement_id: int,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member)
):
    return await undo_settlement(db, settlement_id, member_id)
