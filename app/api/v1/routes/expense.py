from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseUpdate
from app.services.expense_services import create_expense, delete_expense, edit_expense, get_expense_by_id
from app.core.dependencies import get_current_member

router = APIRouter()

@router.post("/", response_model=ExpenseOut, status_code=201)
async def add_expense(data: ExpenseCreate, db: AsyncSession = Depends(get_db), member_id: str = Depends(get_current_member)):
    return await create_expense(db, data, member_id)

@router.put("/{expense_id}", response_model=ExpenseOut)
async def edit(data: ExpenseUpdate, expense_id: int, db: AsyncSession = Depends(get_db), member_id: str = Depends(get_current_member)):
    return await edit_expense(db, data, expense_id=expense_id, member_id=member_id)

@router.delete("/{expense_id}")
async def del_expense(expense_id: int, db: AsyncSession = Depends(get_db), member_id: str = Depends(get_current_member)):
    return await delete_expense(db, member_id=member_id, expense_id=expense_id)

@router.get("/{expense_id}", response_model=ExpenseOut)
async def fetch(
    expense_id: int,
    db: AsyncSession = Depends(get_db),
    member_id: str = Depends(get_current_member),
):
    return await get_expense_by_id(db, expense_id=expense_id, member_id=member_id)
