from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False)
    member_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False)
    # exact minor units or a percentage, as entered; null for equal splits
    share_value = Column(String(32), nullable=True)
    amount_minor = Column(BigInteger, nullable=False)

    expense = relationship("Expense", back_populates="splits")
