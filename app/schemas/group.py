from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class GroupCreate(BaseModel):
    name: str = Field(min_length=1)

class GroupOut(BaseModel):
    id: int
    name: str
    created_by: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

class MemberAdd(BaseModel):
    member_id: str = Field(min_length=1)

class GroupMemberOut(BaseModel):
    group_id: int
    member_id: str
    joined_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
