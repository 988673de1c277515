"""Profile service - Business logic for profiles and roles"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import Identity
from ...models import Booking, Profile
from ...schemas import Role
from ...shared.errors import NotFoundError, ValidationError
from ...shared.validators import display_name_from_email
from ..bookings import policy
from .repository import ProfileRepository
from .schemas import ProfileUpsert, StaffCreate

logger = logging.getLogger(__name__)

STAFF_ROLE_VALUES = (Role.ADMIN.value, Role.PHOTOGRAPHER.value)


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def _load(self, user_id: str) -> Profile:
        profile = self.repo.get_profile(self.db, user_id)
        if not profile:
            raise NotFoundError("User not found")
        return profile

    def upsert_own_profile(self, identity: Identity, data: ProfileUpsert) -> Profile:
        """Create or update the caller's profile. The role is never set from here."""
        profile = self.repo.get_profile(self.db, identity.uid)
        if profile:
            return self.repo.update_profile(
                self.db, profile, display_name=data.displayName, phone=data.phone
            )

        logger.info(f"🆕 Creating profile for {identity.email}")
        return self.repo.create_profile(
            self.db,
            id=identity.uid,
            email=identity.email or "",
            display_name=data.displayName or identity.name or display_name_from_email(identity.email),
            phone=data.phone,
            role=Role.CLIENT.value,
        )

    def get_profile(self, caller_id: str, caller_role: Role, user_id: str) -> Profile:
        policy.check_view(caller_id, caller_role, user_id)
        return self._load(user_id)

    def update_role(self, caller_role: Role, user_id: str, role: Optional[str]) -> Profile:
        policy.check_admin(caller_role)
        if role not in {r.value for r in Role}:
            raise ValidationError("Invalid role")
        profile = self._load(user_id)
        previous = profile.role
        profile = self.repo.update_profile(self.db, profile, role=role)
        logger.info(f"🔑 Role for {user_id} changed {previous} → {role}")
        return profile

    def list_profiles(self, caller_role: Role) -> list[Profile]:
        policy.check_admin(caller_role)
        return self.repo.get_all_profiles(self.db)

    def search_profiles(
        self,
        caller_role: Role,
        role: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Profile], int]:
        policy.check_admin(caller_role)
        return self.repo.search_profiles(
            self.db, role=role, search=search, offset=(page - 1) * limit, limit=limit
        )

    def get_user_detail(self, caller_role: Role, user_id: str) -> tuple[Profile, list[Booking]]:
        policy.check_admin(caller_role)
        profile = self._load(user_id)
        return profile, self.repo.get_bookings_for_user(self.db, user_id)

    def list_staff(self, caller_role: Role) -> list[Profile]:
        policy.check_admin(caller_role)
        return self.repo.get_staff_profiles(self.db)

    def create_staff(self, caller_role: Role, data: StaffCreate) -> Profile:
        """Give an existing identity-provider account an admin or photographer profile"""
        policy.check_admin(caller_role)
        if not data.uid or not data.email or not data.displayName:
            raise ValidationError("Email, user ID, and display name are required")
        if data.role not in STAFF_ROLE_VALUES:
            raise ValidationError("Invalid role. Must be admin or photographer")

        profile = self.repo.get_profile(self.db, data.uid)
        if profile:
            profile = self.repo.update_profile(
                self.db, profile, role=data.role, display_name=data.displayName
            )
        else:
            profile = self.repo.create_profile(
                self.db,
                id=data.uid,
                email=data.email,
                display_name=data.displayName,
                role=data.role,
            )
        logger.info(f"✅ Staff account {data.email} set up as {data.role}")
        return profile
