"""Profile routers - own profile, role management and user lookup"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Caller, Identity, get_current_caller, get_current_identity, require_admin
from ...database import get_db
from ...schemas import MessageResponse
from .schemas import ProfileResponse, ProfileUpsert, RoleUpdate
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])
users_router = APIRouter(prefix="/users", tags=["Users"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


@router.post("/profile", response_model=ProfileResponse)
async def upsert_profile(
    data: ProfileUpsert,
    identity: Identity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service),
):
    """Create or update the signed-in user's profile"""
    profile = service.upsert_own_profile(identity, data)
    return ProfileResponse.model_validate(profile)


@router.get("/profile/{uid}", response_model=ProfileResponse)
async def get_profile(
    uid: str,
    caller: Caller = Depends(get_current_caller),
    service: ProfileService = Depends(get_profile_service),
):
    profile = service.get_profile(caller.uid, caller.role, uid)
    return ProfileResponse.model_validate(profile)


@router.patch("/role/{uid}", response_model=MessageResponse)
async def update_role(
    uid: str,
    data: RoleUpdate,
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    service.update_role(caller.role, uid, data.role)
    return MessageResponse(message="Role updated successfully")


@users_router.get("", response_model=list[ProfileResponse])
async def get_users(
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return [ProfileResponse.model_validate(p) for p in service.list_profiles(caller.role)]


@users_router.get("/{user_id}", response_model=ProfileResponse)
async def get_user(
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ProfileService = Depends(get_profile_service),
):
    profile = service.get_profile(caller.uid, caller.role, user_id)
    return ProfileResponse.model_validate(profile)
