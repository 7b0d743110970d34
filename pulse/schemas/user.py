from pydantic import BaseModel, ConfigDict, EmailStr
from typing import List, Optional
from pulse.models.user import UserRole

# Shared properties
class UserBase(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    roles: Optional[List[UserRole]] = None

# Properties to return to client (never includes the password hash)
class UserRead(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    created_at: Optional[str] = None
