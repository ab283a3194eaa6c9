"""
==============================================================================
User Endpoints
==============================================================================

Profile of the calling user.

==============================================================================
"""

from fastapi import APIRouter, Depends

from storeledger.core.dependencies import get_current_user
from storeledger.db.models import User
from storeledger.schemas.user import UserDetail, UserResponse


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get the calling user's profile."""
    return UserResponse(user=UserDetail.model_validate(user))
