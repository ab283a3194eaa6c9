"""
==============================================================================
User Schemas Module
==============================================================================

Response schemas for the calling user's profile.

==============================================================================
"""

from typing import Optional
from pydantic import BaseModel, Field
from storeledger.db.models import Role


class UserDetail(BaseModel):
    """Profile fields exposed to the client."""
    user_code: int
    kakao_email: str
    role: Role
    phone_number: Optional[str]
    work_time: Optional[str]
    work_place: Optional[str]

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """Single user response."""
    success: bool = Field(default=True)
    user: UserDetail
